"""
Farm insights: weather, disease risk and market data fetched in parallel, then
merged by one synthesis call into a prioritized list of insights.
"""

from __future__ import annotations

from typing import Any, Optional

from langgraph.graph import END, StateGraph

from ...prompts.farm_insights import render_farm_insights
from ...schemas import FarmInsightsInput, FarmInsightsOutput, require_valid
from ..invocation import ModelInvoker, get_invoker
from .common import flow_scope, gather_sub_results, trace_node
from .simple import forecast_disease_outbreak, get_market_price, get_weather_forecast
from .state import FarmInsightsState


FLOW_NAME = "get_farm_insights"


def build_farm_insights_graph(invoker: ModelInvoker):
    """
    Construct and return the farm insights LangGraph workflow.
    """

    async def _gather_node(state: FarmInsightsState) -> FarmInsightsState:
        request = state["request"]
        sub_results = await gather_sub_results(
            {
                "weather": get_weather_forecast(
                    {"location": request.region, "language": request.language},
                    invoker=invoker,
                ),
                "disease": forecast_disease_outbreak(
                    {
                        "crop": request.crop,
                        "region": request.region,
                        "language": request.language,
                    },
                    invoker=invoker,
                ),
                "market": get_market_price(
                    {
                        "crop": request.crop,
                        "mandi": request.mandi or request.region,
                        "language": request.language,
                    },
                    invoker=invoker,
                ),
            }
        )
        return {
            "context": {name: sub.context_value() for name, sub in sub_results.items()},
            "failed_sources": [name for name, sub in sub_results.items() if not sub.ok],
        }

    async def _synthesize_node(state: FarmInsightsState) -> FarmInsightsState:
        prompt = render_farm_insights(state["request"], state.get("context") or {})
        result = await invoker.invoke_structured(prompt, FarmInsightsOutput)
        return {"result": result}

    graph = StateGraph(FarmInsightsState)
    graph.add_node("gather", trace_node(FLOW_NAME, "gather", _gather_node))
    graph.add_node("synthesize", trace_node(FLOW_NAME, "synthesize", _synthesize_node))

    graph.set_entry_point("gather")
    graph.add_edge("gather", "synthesize")
    graph.add_edge("synthesize", END)
    return graph.compile()


async def get_farm_insights(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> FarmInsightsOutput:
    request = require_valid(FarmInsightsInput, payload)
    invoker = invoker or get_invoker()
    with flow_scope(FLOW_NAME, request) as span:
        state = await build_farm_insights_graph(invoker).ainvoke({"request": request})
        failed = state.get("failed_sources") or []
        span.set_attribute("flow.failed_sources", ",".join(failed))
        return state["result"]
