"""
Single-call flows. Each entry point takes a raw or validated payload and
returns the typed output of its flow.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from ...errors import InvocationError
from ...infra.config import get_config
from ...infra.llm import get_speech_client
from ...prompts.speech import (
    render_transcription,
    speech_instructions,
    transcription_language,
)
from ...schemas import (
    AskAIOutput,
    CarbonCreditsOutput,
    DiagnoseCropDiseaseOutput,
    DiseaseOutbreakOutput,
    GovernmentSchemesOutput,
    MarketPriceOutput,
    SpeechToTextInput,
    SpeechToTextOutput,
    TextToSpeechInput,
    TextToSpeechOutput,
    WeatherForecastOutput,
    YieldPredictionOutput,
    require_valid,
)
from ..invocation import ModelInvoker
from .common import flow_scope
from .registry import (
    ASK_AI_FLOW,
    CARBON_CREDITS_FLOW,
    DIAGNOSIS_FLOW,
    DISEASE_FORECAST_FLOW,
    MARKET_PRICE_FLOW,
    SCHEMES_FLOW,
    WEATHER_FLOW,
    YIELD_FLOW,
    run_flow,
)


SPEECH_TO_TEXT_FLOW = "speech_to_text"
TEXT_TO_SPEECH_FLOW = "text_to_speech"
SPEECH_FORMAT = "wav"


async def diagnose_crop_disease(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> DiagnoseCropDiseaseOutput:
    return await run_flow(DIAGNOSIS_FLOW, payload, invoker=invoker)


async def get_market_price(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> MarketPriceOutput:
    return await run_flow(MARKET_PRICE_FLOW, payload, invoker=invoker)


async def get_weather_forecast(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> WeatherForecastOutput:
    return await run_flow(WEATHER_FLOW, payload, invoker=invoker)


async def forecast_disease_outbreak(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> DiseaseOutbreakOutput:
    return await run_flow(DISEASE_FORECAST_FLOW, payload, invoker=invoker)


async def predict_yield(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> YieldPredictionOutput:
    return await run_flow(YIELD_FLOW, payload, invoker=invoker)


async def estimate_carbon_credits(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> CarbonCreditsOutput:
    return await run_flow(CARBON_CREDITS_FLOW, payload, invoker=invoker)


async def find_government_schemes(
    payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> GovernmentSchemesOutput:
    return await run_flow(SCHEMES_FLOW, payload, invoker=invoker)


async def ask_ai(payload: Any, *, invoker: Optional[ModelInvoker] = None) -> AskAIOutput:
    return await run_flow(ASK_AI_FLOW, payload, invoker=invoker)


def _speech_client(client: Optional[AsyncOpenAI]) -> AsyncOpenAI:
    if client is not None:
        return client
    try:
        return get_speech_client()
    except ValueError as exc:
        raise InvocationError(f"speech backend unavailable: {exc}") from exc


async def speech_to_text(
    payload: Any, *, client: Optional[AsyncOpenAI] = None
) -> SpeechToTextOutput:
    """Transcribe recorded audio (webm, ogg, wav, mp3, m4a, ...) with the transcription endpoint."""
    request = require_valid(SpeechToTextInput, payload)
    with flow_scope(SPEECH_TO_TEXT_FLOW, request):
        client = _speech_client(client)
        prompt = render_transcription(request)
        options: Dict[str, Any] = {}
        language = transcription_language(request)
        if language:
            options["language"] = language
        try:
            transcript = await client.audio.transcriptions.create(
                model=get_config().transcription_model,
                file=prompt.media[0].as_upload(),
                prompt=prompt.text,
                **options,
            )
        except OpenAIError as exc:
            raise InvocationError(f"transcription failed: {exc}") from exc
        return SpeechToTextOutput(text=(transcript.text or "").strip())


async def text_to_speech(
    payload: Any, *, client: Optional[AsyncOpenAI] = None
) -> TextToSpeechOutput:
    """Synthesize speech and return it as an audio data URI."""
    request = require_valid(TextToSpeechInput, payload)
    with flow_scope(TEXT_TO_SPEECH_FLOW, request):
        client = _speech_client(client)
        cfg = get_config()
        try:
            response = await client.audio.speech.create(
                model=cfg.speech_model,
                voice=cfg.speech_voice,
                input=request.text,
                instructions=speech_instructions(request),
                response_format=SPEECH_FORMAT,
            )
        except OpenAIError as exc:
            raise InvocationError(f"speech synthesis failed: {exc}") from exc
        audio = response.content
        if not audio:
            raise InvocationError("speech synthesis returned no audio")
        encoded = base64.b64encode(audio).decode("ascii")
        return TextToSpeechOutput(media=f"data:audio/{SPEECH_FORMAT};base64,{encoded}")
