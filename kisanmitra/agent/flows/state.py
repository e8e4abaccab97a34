"""
LangGraph state of the composite flows.
"""

from typing import Dict, List, TypedDict

from ...schemas import (
    CropRecommendationsInput,
    CropRecommendationsOutput,
    FarmInsightsInput,
    FarmInsightsOutput,
)


class FarmInsightsState(TypedDict, total=False):
    request: FarmInsightsInput
    context: Dict[str, object]
    failed_sources: List[str]
    result: FarmInsightsOutput


class CropRecommendationsState(TypedDict, total=False):
    request: CropRecommendationsInput
    candidates: List[Dict[str, object]]
    result: CropRecommendationsOutput
