from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI

from .config import get_config

def _require_openai() -> str:
    cfg = get_config()
    if cfg.llm_provider != "openai":
        raise ValueError("Only OpenAI is supported as LLM provider, set LLM_PROVIDER=openai")
    if not cfg.openai_api_key:
        raise ValueError("OPENAI_API_KEY is not configured, cannot call the OpenAI API")
    return cfg.openai_api_key

def get_chat_model(model: Optional[str] = None) -> BaseChatModel:
    cfg = get_config()
    api_key = _require_openai()
    kwargs = {
        "api_key": api_key,
        "temperature": cfg.llm_temperature,
        "model": model or cfg.llm_model,
    }
    if cfg.openai_api_base:
        kwargs["base_url"] = cfg.openai_api_base
    return ChatOpenAI(**kwargs)


def get_speech_client() -> AsyncOpenAI:
    cfg = get_config()
    api_key = _require_openai()
    kwargs = {"api_key": api_key}
    if cfg.openai_api_base:
        kwargs["base_url"] = cfg.openai_api_base
    return AsyncOpenAI(**kwargs)
