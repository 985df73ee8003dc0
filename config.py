import os
from pathlib import Path

# ============
# Content data
# ============
DATA_DIR = Path(os.getenv("PORTFOLIO_DATA_DIR", Path(__file__).parent / "work_list"))
CV_ASSET_BASE_URL = os.getenv("CV_ASSET_BASE_URL", "/asset/cv/")

# Files hidden from the admin file list (auto-managed or deprecated)
HIDDEN_FILES = {
    "experience.csv",
    "portfolioMap.json",
    "publish.csv",
}

# ===========
# HTTP / logs
# ===========
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# =====================
# Auth / Security Setup
# =====================
# The admin tool is local-only; auth is opt-in.
ADMIN_AUTH = os.getenv("ADMIN_AUTH", "0") == "1"
SECRET_KEY = os.getenv("JWT_SECRET", "super-secret-key-change")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 12
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@portfolio.dev")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")
