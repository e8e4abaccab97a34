"""
Crop recommendations: market and disease data for every alternative crop,
fetched in parallel, ranked by one synthesis call into the top three.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from langgraph.graph import END, StateGraph

from ...prompts.crop_recommendations import render_crop_recommendations
from ...schemas import CropRecommendationsInput, CropRecommendationsOutput, require_valid
from ..invocation import ModelInvoker, get_invoker
from .common import flow_scope, gather_sub_results, trace_node
from .simple import forecast_disease_outbreak, get_market_price
from .state import CropRecommendationsState


FLOW_NAME = "get_crop_recommendations"

CANDIDATE_CROPS = (
    "Maize",
    "Soybean",
    "Groundnut",
    "Sorghum",
    "Millet",
    "Lentil",
    "Chickpea",
    "Cotton",
)


def candidate_crops(current_crop: str) -> List[str]:
    current = " ".join(current_crop.split()).casefold()
    return [crop for crop in CANDIDATE_CROPS if crop.casefold() != current]


async def _candidate_data(
    crop: str, request: CropRecommendationsInput, invoker: ModelInvoker
) -> Dict[str, object]:
    sub_results = await gather_sub_results(
        {
            "disease": forecast_disease_outbreak(
                {"crop": crop, "region": request.region, "language": request.language},
                invoker=invoker,
            ),
            # no mandi is asked for here, the region stands in for it
            "market": get_market_price(
                {"crop": crop, "mandi": request.region, "language": request.language},
                invoker=invoker,
            ),
        }
    )
    return {
        "cropName": crop,
        "marketData": sub_results["market"].context_value(),
        "diseaseForecast": sub_results["disease"].context_value(),
    }


def build_crop_recommendations_graph(invoker: ModelInvoker):
    """
    Construct and return the crop recommendations LangGraph workflow.
    """

    async def _gather_node(state: CropRecommendationsState) -> CropRecommendationsState:
        request = state["request"]
        candidates = await asyncio.gather(
            *(
                _candidate_data(crop, request, invoker)
                for crop in candidate_crops(request.current_crop)
            )
        )
        return {"candidates": list(candidates)}

    async def _synthesize_node(state: CropRecommendationsState) -> CropRecommendationsState:
        prompt = render_crop_recommendations(state["request"], state.get("candidates") or [])
        result = await invoker.invoke_structured(prompt, CropRecommendationsOutput)
        return {"result": result}

    graph = StateGraph(CropRecommendationsState)
    graph.add_node("gather", trace_node(FLOW_NAME, "gather", _gather_node))
    graph.add_node("synthesize", trace_node(FLOW_NAME, "synthesize", _synthesize_node))

    graph.set_entry_point("gather")
    graph.add_edge("gather", "synthesize")
    graph.add_edge("synthesize", END)
    return graph.compile()


async def get_crop_recommendations(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> CropRecommendationsOutput:
    request = require_valid(CropRecommendationsInput, payload)
    invoker = invoker or get_invoker()
    with flow_scope(FLOW_NAME, request):
        state = await build_crop_recommendations_graph(invoker).ainvoke({"request": request})
        return state["result"]
