"""Configuration management for the Portfolio CMS service."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # Read-only containers may not expose .env; rely on the real environment
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # OpenAI configuration (required)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")

    # Environment
    PORTFOLIO_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Embedding configuration
    EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-small", description="OpenAI embedding model"
    )
    EMBEDDING_DIM: int = Field(default=1536, description="Embedding vector dimension")
    CHUNK_MAX_CHARS: int = Field(default=1000, description="Max characters per indexed chunk")

    # Assistant configuration
    CHAT_MODEL: str = Field(default="gpt-4o", description="Model for assistant answers")
    CHAT_TEMPERATURE: float = Field(default=0.7, description="Assistant sampling temperature")
    CHAT_MAX_TOKENS: int = Field(default=500, description="Max tokens per assistant answer")
    RAG_MATCH_THRESHOLD: float = Field(
        default=0.5, description="Similarity threshold for assistant retrieval"
    )
    RAG_MATCH_COUNT: int = Field(default=5, description="Documents retrieved per question")
    SEARCH_MATCH_THRESHOLD: float = Field(
        default=0.7, description="Similarity threshold for admin vector search"
    )

    # Admin access
    ADMIN_API_KEY: str | None = Field(default=None, description="API key for admin tooling")
    ADMIN_EMAILS: str = Field(
        default="", description="Comma-separated emails allowed to use the admin API"
    )

    # Revalidation
    REVALIDATION_SECRET: str | None = Field(
        default=None, description="Shared secret for revalidation and cron calls"
    )
    FRONTEND_REVALIDATE_URL: str | None = Field(
        default=None, description="Frontend hook notified with paths to revalidate"
    )
    CONTENT_CACHE_TTL_SECONDS: int = Field(
        default=3600, description="Lifetime of cached public content"
    )
    CONTENT_CACHE_MAX_ENTRIES: int = Field(
        default=1024, description="Cached entries kept before the oldest are evicted"
    )
    REVALIDATION_POLL_SECONDS: int = Field(
        default=60, description="Scheduler poll interval in seconds"
    )
    ENABLE_REVALIDATION_SCHEDULER: bool = Field(
        default=True, description="Run the background revalidation scheduler"
    )

    # Sync queue
    OFFLINE_STORAGE_DIR: str = Field(
        default=".portfolio_cache", description="Directory for the offline key/value store"
    )
    SYNC_MAX_RETRIES: int = Field(default=3, description="Attempts before a queued write is dropped")

    # Database retries
    DB_MAX_RETRIES: int = Field(default=3, description="Attempts for retryable database errors")
    DB_RETRY_INITIAL_DELAY: float = Field(
        default=0.3, description="Initial backoff delay in seconds"
    )

    # GitHub integration
    GITHUB_TOKEN: str | None = Field(default=None, description="GitHub API token")
    GITHUB_USERNAME: str | None = Field(default=None, description="GitHub account shown on the site")
    GITHUB_WEBHOOK_SECRET: str | None = Field(
        default=None, description="Secret used to sign GitHub webhooks"
    )

    # Rate limits
    CONTACT_RATE_LIMIT_PER_MINUTE: int = Field(
        default=5, description="Contact form submissions per client per minute"
    )
    RAG_RATE_LIMIT_PER_MINUTE: int = Field(
        default=10, description="Assistant questions per client per minute"
    )

    @property
    def admin_emails(self) -> set[str]:
        """Normalized set of admin emails."""
        return {e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()}


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
