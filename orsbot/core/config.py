from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "ORS Bot Backend"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    # Provider credentials (read once at startup, never mutated)
    google_api_key: str | None = None
    openai_api_key: str | None = None
    perplexity_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PERPLEXITY_API_KEY", "NEXT_PUBLIC_PERPLEXITY_API_KEY"),
    )
    tavily_api_key: str | None = None

    # Search providers
    perplexity_model: str = Field(
        default="sonar-pro",
        validation_alias=AliasChoices("PERPLEXITY_MODEL", "NEXT_PUBLIC_PERPLEXITY_MODEL"),
    )
    perplexity_base_url: str = "https://api.perplexity.ai"
    tavily_base_url: str = "https://api.tavily.com"
    tavily_search_depth: str = "basic"
    search_max_results: int = 10  # Results requested from providers that accept a limit

    # Rewrite provider (OpenAI)
    rewrite_model: str = "gpt-4o-mini"
    rewrite_temperature: float = 0.0  # Deterministic prompt building
    rewrite_max_tokens: int = 400
    research_rewrite_model: str = "gpt-4o"
    research_rewrite_temperature: float = 0.7
    research_rewrite_max_tokens: int = 1000

    # Answer provider (Gemini)
    default_answer_model: str = "gemini-2.5-flash"
    answer_temperature: float = 0.7
    answer_max_output_tokens: int = 2000

    # Pipeline shaping
    max_references: int = 5  # Numbered entries in the rendered sources block
    trace_preview_chars: int = 200  # Input echo length in stage traces
    context_max_messages: int = 10  # Prior turns folded into rewrite/search prompts

    # Upper bound for every outbound provider call (seconds)
    provider_timeout_seconds: float = 60.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
