"""
Scripted stand-in for a LangChain chat model.

The handler receives the message list of each call and returns either the
reply text, a dict (sent back as JSON), a ready ``AIMessage`` or an exception
to raise.
"""

import json
from datetime import date, timedelta
from typing import Callable, List, Optional

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

TINY_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
TINY_WAV = "data:audio/wav;base64,UklGRiQAAABXQVZFZm10IBAAAAABAAEAQB8AAEAfAAABAAgAZGF0YQAAAAA="
TINY_WEBM = "data:audio/webm;codecs=opus;base64,GkXfo59ChoEBQveBAULygQRC84EIQoKEd2VibUKHgQRChYECGFOAZw=="


class FakeChatModel:
    def __init__(self, handler: Callable[[List[BaseMessage]], object]) -> None:
        self.handler = handler
        self.calls: List[List[BaseMessage]] = []
        self.bound_tools: List[List[str]] = []

    def bind_tools(self, tools):
        self.bound_tools.append([tool.name for tool in tools])
        return self

    async def ainvoke(self, messages):
        snapshot = list(messages)
        self.calls.append(snapshot)
        reply = self.handler(snapshot)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, AIMessage):
            return reply
        if isinstance(reply, (dict, list)):
            return AIMessage(content=json.dumps(reply))
        return AIMessage(content=str(reply))


def schema_title(messages: List[BaseMessage]) -> Optional[str]:
    """Title of the JSON Schema carried by the output contract, if any."""
    for message in messages:
        if isinstance(message, SystemMessage):
            start = message.content.find("{")
            return json.loads(message.content[start:]).get("title")
    return None


def human_text(messages: List[BaseMessage]) -> str:
    """Text of the last human message, media blocks left out."""
    for message in reversed(messages):
        if isinstance(message, HumanMessage):
            content = message.content
            if isinstance(content, list):
                return "\n".join(
                    block.get("text", "") for block in content if block.get("type") == "text"
                )
            return content
    return ""


def price_history(days: int = 7, end: date = date(2026, 10, 19), base: float = 2000.0):
    return [
        {"date": (end - timedelta(days=days - 1 - i)).isoformat(), "price": base + 10 * i}
        for i in range(days)
    ]


DIAGNOSIS_ANSWER = {
    "cropName": "Tomato",
    "disease": "Early Blight",
    "severity": "medium",
    "currentStage": "Brown concentric spots on lower leaves.",
    "remedies": "Remove infected leaves and avoid overhead watering.",
    "immediateSteps": "Prune affected foliage today.",
    "preventiveMeasures": "Rotate crops and mulch the soil.",
    "organicRemedies": "Neem oil spray every 7 days.",
    "chemicalRemedies": "Mancozeb at label dose.",
    "diseaseProgression": "Spots spread upward within two weeks.",
}

MARKET_ANSWER = {
    "price": 2060.0,
    "trendAnalysis": "Prices at Azadpur rose steadily this week.",
    "priceHistory": price_history(),
}

WEATHER_ANSWER = {
    "current": {"temp": 31, "condition": "Sunny", "humidity": 40, "windSpeed": 12},
    "forecast": [
        {
            "day": day,
            "date": (date(2026, 10, 20) + timedelta(days=i)).isoformat(),
            "highTemp": 32,
            "lowTemp": 22,
            "condition": "Heavy rain" if i == 2 else "Partly cloudy",
            "icon": "rain" if i == 2 else "partly cloudy",
            "humidity": 55,
            "windSpeed": 10,
        }
        for i, day in enumerate(
            ["Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
        )
    ],
    "summary": "Heavy rain on Thursday; plan spraying before it.",
}

DISEASE_ANSWER = {
    "forecastSummary": "Humid week with elevated fungal risk.",
    "diseaseRisks": [
        {
            "diseaseName": "Rust",
            "riskLevel": "very high",
            "riskFactors": "High humidity and mild nights.",
            "preventiveActions": "Scout fields and spray propiconazole if seen.",
        }
    ],
}

INSIGHTS_ANSWER = {
    "insights": [
        {
            "priority": "High",
            "category": "Weather",
            "title": "Heavy rain Thursday",
            "recommendation": "Finish spraying by Wednesday.",
            "source": "Weather Forecast",
        }
    ]
}


def recommendation(name: str) -> dict:
    return {
        "cropName": name,
        "profitabilityScore": "High Profitability",
        "riskScore": "Low Risk",
        "profitabilityAnalysis": "Stable prices and good yields.",
        "suitability": "Suits loamy soils of the region.",
        "actionableAdvice": "Sow improved seed in early November.",
    }


RECOMMENDATIONS_ANSWER = {
    "recommendations": [
        recommendation(name) for name in ("Chickpea", "Lentil", "Maize", "Sorghum")
    ]
}


def market_handler(messages: List[BaseMessage]):
    """Call the market tool once, then answer from its data."""
    tool_messages = [m for m in messages if isinstance(m, ToolMessage)]
    if not tool_messages:
        return AIMessage(
            content="",
            tool_calls=[
                {
                    "name": "market_data_lookup",
                    "args": {"crop": "Wheat", "mandi": "Azadpur"},
                    "id": "call-market",
                }
            ],
        )
    snapshot = json.loads(tool_messages[-1].content)
    return {
        "price": snapshot["currentPrice"],
        "trendAnalysis": "Prices moved within a narrow band.",
        "priceHistory": snapshot["priceHistory"],
    }
