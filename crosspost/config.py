from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings loaded from environment."""

    # Service
    service_name: str = "crosspost"
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]
    max_request_size: int = 1 * 1024 * 1024  # 1 MB

    # Credential storage: "memory" or "database"
    credential_store: str = "memory"

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "crosspost"
    db_user: str = "dbadmin"
    db_password: str = ""
    database_url_override: str | None = None  # e.g. sqlite+aiosqlite:///./crosspost.db

    # LinkedIn OAuth
    linkedin_client_id: str = ""
    linkedin_client_secret: str = ""
    linkedin_redirect_uri: str = "http://localhost:3000/linkedin-callback"
    linkedin_scope: str = "w_member_social"

    # Meta Graph API (Facebook, Instagram)
    graph_api_version: str = "v19.0"

    # Outbound calls; None keeps the httpx default
    http_timeout_seconds: float | None = None
    publish_timeout_seconds: float | None = None  # Per-platform budget
    scheduled_post_retention_hours: float = 24

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
