# backend configuration
# loads env vars for mongodb, cors and the local timezone used to derive "today"

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent / ".env")


class Settings(BaseSettings):
    # mongodb
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "mood_journal_db")

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # iana timezone name, entry dates are local calendar days
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
