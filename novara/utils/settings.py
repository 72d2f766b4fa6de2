# novara/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    return float(raw) if raw else None


API_URL = os.getenv("NOVARA_API_URL", "http://localhost:5000/api")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./novara.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# unset means no timeout, requests waits on the backend
HTTP_TIMEOUT = _optional_float("NOVARA_HTTP_TIMEOUT")

LENIENT_VERIFICATION = _flag("NOVARA_LENIENT_VERIFICATION", "true")

STORE_NAME = os.getenv("NOVARA_STORE_NAME", "Novara Jewels")
THEME_COLOR = os.getenv("NOVARA_THEME_COLOR", "#8b7355")
CURRENCY = "INR"
DEFAULT_COUNTRY = os.getenv("NOVARA_DEFAULT_COUNTRY", "IN")

SUCCESS_REDIRECT_MS = int(os.getenv("NOVARA_SUCCESS_REDIRECT_MS", 2000))
FAILURE_REDIRECT_MS = int(os.getenv("NOVARA_FAILURE_REDIRECT_MS", 3000))
ORDERS_PATH = "/orders"

DASHBOARD_WORKERS = int(os.getenv("NOVARA_DASHBOARD_WORKERS", 5))
