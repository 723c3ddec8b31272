from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Publisher settings loaded from environment."""

    # Service
    service_name: str = "content-publisher"
    log_level: str = "INFO"

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "contenthub"
    db_user: str = "postgres"
    db_password: str = ""

    # Meta Graph API (Facebook Pages, Instagram Business)
    meta_graph_base_url: str = "https://graph.facebook.com"
    meta_graph_api_version: str = "v21.0"
    graph_timeout_seconds: float = 30.0

    # Instagram container readiness
    media_poll_interval_seconds: float = 2.0
    media_poll_max_attempts: int = 30

    # Posts
    default_max_retries: int = 3

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def graph_url(self) -> str:
        return f"{self.meta_graph_base_url.rstrip('/')}/{self.meta_graph_api_version}"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
