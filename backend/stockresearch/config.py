"""Application configuration."""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_SEARXNG_URL = "https://apisearch.jamiehsiao.us/search"
DEFAULT_QUERY_EXCLUDE = "-site:*.cn -site:cn -site:zh.wikipedia.org"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0 Safari/537.36"
)


class Settings(BaseSettings):
    """App settings from env."""

    # Text completion (OpenAI-compatible endpoint, Groq by default)
    llm_api_key: str = Field(default="", validation_alias=AliasChoices("llm_api_key", "GROQ_API_KEY", "LLM_API_KEY"))
    llm_base_url: str = "https://api.groq.com/openai/v1"
    model_ticker: str = "openai/gpt-oss-120b"  # small classification call
    model_report: str = "openai/gpt-oss-120b"
    llm_timeout_seconds: float = 60.0

    # Google Custom Search
    google_search_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "google_search_api_key", "GOOGLESEARCH_API_KEY", "GOOGLE_SEARCH_API_KEY"
        ),
    )
    google_search_cx: str = Field(
        default="",
        validation_alias=AliasChoices("google_search_cx", "GOOGLESEARCH_CX", "GOOGLE_SEARCH_CX"),
    )
    google_search_language: str = Field(
        default="",
        validation_alias=AliasChoices("google_search_language", "GOOGLESEARCH_LANGUAGE"),
    )
    googlesearch_fallback_searx: bool = False

    # SearXNG behind Cloudflare Access
    searxng_url: str = DEFAULT_SEARXNG_URL
    searxng_language: str = "en"
    searxng_query_exclude: str = DEFAULT_QUERY_EXCLUDE
    searxng_user_agent: str = DEFAULT_USER_AGENT
    searxng_engines: str = ""  # comma-separated, e.g. "bing,duckduckgo"
    cf_id: str = ""
    cf_secret: str = ""

    # Research fan-out
    search_timeout_seconds: float = 10.0
    research_search_concurrency: int = 2
    research_search_delay_seconds: float = 2.0
    research_snippet_max_chars: int = 300
    max_related_tickers: int = 0

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def engine_list(self) -> list[str]:
        return [e.strip() for e in self.searxng_engines.split(",") if e.strip()]

    @property
    def has_google_search(self) -> bool:
        return bool(self.google_search_api_key and self.google_search_cx)

    @property
    def has_searxng_credentials(self) -> bool:
        return bool(self.cf_id and self.cf_secret)

    @property
    def google_language(self) -> str:
        return self.google_search_language or self.searxng_language or "en"


def missing_keys(settings: Settings | None = None) -> list[str]:
    """Names of required env keys that are unset. CF_ID/CF_SECRET are optional once Google search is configured."""
    settings = settings or Settings()
    required = {"GROQ_API_KEY": settings.llm_api_key}
    if not settings.has_google_search:
        required["CF_ID"] = settings.cf_id
        required["CF_SECRET"] = settings.cf_secret
    return [name for name, value in required.items() if not value]
