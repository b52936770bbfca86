"""Orchestrator configuration — LLM credentials, lifecycle timings and server knobs."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "SENTINEL_"}

    # LLM
    llm_provider: str = "google"
    google_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.1

    # Ingestion
    raw_text_limit: int = 10_000

    # Detection: "empty" fires only while the alert store is empty,
    # "unresolved" fires while no alert is left unresolved.
    detection_scope: str = "empty"

    # Healing
    thinking_delay_seconds: float = 2.0
    action_delay_seconds: float = 4.0

    # Telemetry
    otlp_endpoint: str = ""
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8100


settings = Settings()
