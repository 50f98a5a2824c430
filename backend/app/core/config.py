from functools import lru_cache
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    processes_path: str = "data/processes.json"
    # empty keeps timer state in memory only
    storage_path: str = ""
    storage_key: str = "cookingTimer"
    static_dir: str = ""
    tick_interval_sec: float = 1.0
    firing_threshold_sec: float = 30.0
    default_serving_size: int = 4
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
    }

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
