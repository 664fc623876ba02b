from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Prismic
    PRISMIC_API_ENDPOINT: str = "https://spacetraveling.cdn.prismic.io/api/v2"
    PRISMIC_ACCESS_TOKEN: str = ""
    POSTS_DOCUMENT_TYPE: str = "posts"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Listing
    POSTS_PAGE_SIZE: int = 1
    LISTING_COOKIE_NAME: str = "spacetraveling.listing"
    LISTING_SESSION_TTL_SECONDS: int = 1800

    # Post pages
    STATIC_PATHS_PAGE_SIZE: int = 2
    POST_FALLBACK_LOADING: bool = True
    WORDS_PER_MINUTE: int = 200
    DATE_PLACEHOLDER: str = "Sem data"
    UTTERANCES_REPO: str = ""

    # Preview
    PREVIEW_COOKIE_NAME: str = "spacetraveling.preview"

    # Logging
    LOG_LEVEL: str = "INFO"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
