from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    api_base_url: str = os.getenv("API_BASE_URL", "http://localhost:3001").rstrip("/")
    # Seconds per request; the news API itself waits on Airtable without a timeout
    request_timeout: float = float(os.getenv("NEWS_CLIENT_TIMEOUT", "15"))


settings = Settings()
