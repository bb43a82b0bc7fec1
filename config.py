import os

# --- AUTH ---
TOKEN_TTL_MINUTES = int(os.environ.get("TOKEN_TTL_MINUTES", "1440"))  # 24 Hours

# --- BILLING ---
BILL_DUE_DAYS = int(os.environ.get("BILL_DUE_DAYS", "30"))
DEFAULT_TARIFF_PER_UNIT = os.environ.get("DEFAULT_TARIFF_PER_UNIT", "5000")

# --- WEB ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173"
    ).split(",")
    if origin.strip()
]

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100
