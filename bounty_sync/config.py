"""Application configuration"""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    database_url: str = "sqlite:///./bounty_sync.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Remote trackers
    github_host: str = "github.com"
    gitlab_host: str = "gitlab.com"
    github_api_base_url: str = "https://api.github.com"
    gitlab_api_base_url: str = "https://gitlab.com"
    http_timeout_seconds: float = 30.0

    # Label attached to every issue created through this service.
    open_for_pickup_issue_label: str = "Open for pickup"

    # Comma-separated list of roles that bypass project ownership checks.
    admin_roles: str = "Administrator,Connect Support"

    # Event bus (Redis Streams)
    redis_url: str = "redis://localhost:6379/0"
    event_stream_key: str = "bounty_sync:issue_events"
    # Approximate cap on stream length; 0 disables trimming.
    event_stream_maxlen: int = 100000

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    def admin_role_list(self) -> List[str]:
        return [r.strip() for r in (self.admin_roles or "").split(",") if r.strip()]


settings = Settings()
