from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    APP_NAME: str = "School Fee Tracker"

    # Database (in-memory SQLite by default, data lives as long as the process)
    DATABASE_URL: str = "sqlite://"

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Fill an empty store with a handful of demo students on startup
    SEED_DEMO_DATA: bool = False

    # Fee record validation
    MIN_FEE_YEAR: int = 2020
    MAX_FEE_YEAR: int = 2030

    # Statuses counted as "pending" on the dashboard. Set to ["UNPAID"] to count unpaid records
    PENDING_FEE_STATUSES: List[str] = ["PENDING", "OVERDUE"]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
