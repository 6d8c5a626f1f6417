from typing import Literal
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "Splito Ledger"
    LOG_LEVEL: str = "INFO"
    SPLIT_REMAINDER_STRATEGY: Literal["last", "largest_remainder"] = "last"

    class Config:
        env_file = ".env"

settings = Settings()
