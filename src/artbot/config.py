"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

MATCH_STRATEGIES = {"sequential", "concurrent", "aggregate"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    microsoft_app_id: str | None = None
    microsoft_app_password: str | None = None
    trusted_service_hosts: str = (
        "botframework.com,botframework.us,trafficmanager.net,localhost,127.0.0.1"
    )
    supabase_url: str
    supabase_service_key: str
    catalog_table: str = "paintings"
    state_table: str = "bot_state"
    blob_bucket: str = "paintings"
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    luis_app_id: str
    luis_api_key: str
    luis_api_host_name: str
    qna_knowledgebase_id: str
    qna_endpoint_key: str
    qna_endpoint_host_name: str
    qna_score_threshold: float = 0.3
    translator_key: str
    translator_location: str
    translator_endpoint: str = "https://api.cognitive.microsofttranslator.com"
    search_key: str
    search_endpoint: str = "https://api.bing.microsoft.com/v7.0/search"
    pivot_language: str = "en"
    catalog_size: int = 33
    match_strategy: str = "sequential"
    match_concurrency: int = 8
    http_timeout_seconds: float = 15.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_match_strategy(raw: str | None) -> str:
    """Normalize the configured match strategy, falling back to sequential."""
    if raw is None:
        return "sequential"
    cleaned = raw.strip().lower()
    if cleaned in MATCH_STRATEGIES:
        return cleaned
    return "sequential"


def parse_trusted_hosts(raw: str | None) -> tuple[str, ...]:
    """Parse the comma-separated service URL host allowlist."""
    if raw is None:
        return ()
    hosts: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower().lstrip("*.").rstrip(".")
        if value and value not in hosts:
            hosts.append(value)
    return tuple(hosts)
