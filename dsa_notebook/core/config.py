from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal
from pathlib import Path

class Settings(BaseSettings):
    # Storage
    MONGO_URI: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "dsa-notebook"

    # API server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3001
    CORS_ORIGINS: List[str] = ["http://localhost:8080"]

    # Print organizer client
    API_BASE_URL: str = "http://localhost:3001/api"
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    UNORGANIZED_PRINT_POSITION: Literal["first", "last"] = "last"

    model_config = SettingsConfigDict(env_file=Path(__file__).parent.parent.parent / ".env")

settings = Settings()
