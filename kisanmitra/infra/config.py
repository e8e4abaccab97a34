from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    llm_provider: str = Field(default="openai", validation_alias="LLM_PROVIDER")
    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_api_base: Optional[str] = Field(
        default=None, validation_alias="OPENAI_API_BASE"
    )
    llm_model: str = Field(default="gpt-4o-mini", validation_alias="LLM_MODEL")
    llm_temperature: float = Field(default=0.2, validation_alias="LLM_TEMPERATURE")
    transcription_model: str = Field(
        default="gpt-4o-mini-transcribe", validation_alias="TRANSCRIPTION_MODEL"
    )
    speech_model: str = Field(
        default="gpt-4o-mini-tts", validation_alias="SPEECH_MODEL"
    )
    speech_voice: str = Field(default="alloy", validation_alias="SPEECH_VOICE")
    max_tool_rounds: int = Field(default=4, ge=1, validation_alias="MAX_TOOL_ROUNDS")
    market_provider: str = Field(default="mock", validation_alias="MARKET_PROVIDER")
    market_api_url: Optional[str] = Field(
        default=None, validation_alias="MARKET_API_URL"
    )
    market_api_key: Optional[str] = Field(
        default=None, validation_alias="MARKET_API_KEY"
    )
    log_path: Optional[str] = Field(default=None, validation_alias="LOG_PATH")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    fastapi_port: int = Field(default=8000, validation_alias="FASTAPI_PORT")

    @field_validator("llm_provider", mode="after")
    @classmethod
    def normalize_llm_provider(cls, value: str) -> str:
        return value.lower() if value else value

    @field_validator("market_provider", mode="after")
    @classmethod
    def normalize_market_provider(cls, value: str) -> str:
        return value.lower() if value else value


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()
