# rheum_news/config.py
import os
from dotenv import load_dotenv
load_dotenv()

AIRTABLE_BASE_ID = os.getenv("AIRTABLE_BASE_ID")
AIRTABLE_TABLE_ID = os.getenv("AIRTABLE_TABLE_ID")
AIRTABLE_ACCESS_TOKEN = os.getenv("AIRTABLE_ACCESS_TOKEN")
AIRTABLE_API_URL = os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0").rstrip("/")
# Unset means no client-side timeout: a slow upstream is a slow response
AIRTABLE_TIMEOUT = float(os.getenv("AIRTABLE_TIMEOUT")) if os.getenv("AIRTABLE_TIMEOUT") else None

NEWS_DEFAULT_LIMIT = int(os.getenv("NEWS_DEFAULT_LIMIT", "50"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))
ROOT_PATH = os.getenv("ROOT_PATH", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
