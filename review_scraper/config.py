# review_scraper/config.py
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


BROWSER_ARGS: List[str] = [
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--disable-setuid-sandbox",
    "--no-sandbox",
]


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    headless: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    navigation_timeout_ms: int = 60000
    concurrency: int = 2
    data_dir: str = "data"
    output_file: str = "outputs/reviews.csv"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
