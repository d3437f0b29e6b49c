from typing import FrozenSet, List, Optional
from pydantic_settings import BaseSettings


def parse_email_list(raw: Optional[str]) -> FrozenSet[str]:
    """
    Turn a comma-separated env value into a normalized set of emails.
    Missing / blank values are an empty set, never an error.
    """
    if not raw:
        return frozenset()
    return frozenset(
        part.strip().lower() for part in raw.split(",") if part.strip()
    )


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "BuzzVar Admin API"
    ENV: str = "development"
    # Read directly by core/logging_config.py at import time
    LOG_LEVEL: str = "INFO"

    # Public dashboard origin (login redirects, OAuth callback)
    SITE_URL: str = "http://localhost:3000"

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # -------------------------------------------------
    # Supabase (DB, Auth, Storage)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Bucket holding venue cover images / videos
    VENUE_MEDIA_BUCKET: str = "venue-media"

    # -------------------------------------------------
    # Role allow-lists (comma separated)
    # -------------------------------------------------
    SUPER_ADMIN_EMAILS: Optional[str] = None
    ADMIN_EMAILS: Optional[str] = None

    # -------------------------------------------------
    # Deployed schema flags
    # -------------------------------------------------
    # The admin_users table and the users/venues is_active columns are
    # modelled in the types but missing from the deployed database.
    # Leave these off until the schema actually has them.
    ADMIN_USERS_TABLE: bool = False
    USERS_IS_ACTIVE_COLUMN: bool = False
    VENUES_IS_ACTIVE_COLUMN: bool = False

    # -------------------------------------------------
    # View cache
    # -------------------------------------------------
    VIEW_CACHE_TTL_SECONDS: int = 60

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True

    @property
    def super_admin_emails(self) -> FrozenSet[str]:
        return parse_email_list(self.SUPER_ADMIN_EMAILS)

    @property
    def admin_emails(self) -> FrozenSet[str]:
        return parse_email_list(self.ADMIN_EMAILS)


# Instantiate settings
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests override it with their own Settings."""
    return settings
