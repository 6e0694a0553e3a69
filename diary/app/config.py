from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    app_name: str = "Daily Diary API"
    debug: bool = False
    log_level: str = "INFO"

    # Database settings
    database_url: Optional[str] = None
    db_pool_min_size: int = 5
    db_pool_max_size: int = 10
    db_server_selection_timeout_ms: int = 5000
    db_socket_timeout_ms: int = 45000
    db_retry_writes: bool = True

    # Upper bound for connecting + listing entries
    list_timeout_seconds: float = 8.0

    # 0 disables the cap
    gratitude_max_items: int = 3

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def gratitude_limit(self) -> Optional[int]:
        return self.gratitude_max_items if self.gratitude_max_items > 0 else None

@lru_cache()
def get_settings():
    return Settings()
