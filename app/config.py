# ========================================
# app/config.py
# ========================================

import os
from pathlib import Path
from dotenv import load_dotenv

# Find and load .env file (backend/.env first, then current directory)
current_dir = Path(__file__).resolve().parent  # app/
backend_dir = current_dir.parent                # backend/
env_path = backend_dir / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path)
else:
    load_dotenv()

# ===========================
# DATABASE
# ===========================
MONGO_URI = os.getenv("MONGO_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "jobtracker")

# ===========================
# AUTH
# ===========================
SECRET_KEY = os.getenv("SECRET_KEY", "super_secret_random_key_CHANGE_THIS")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# ===========================
# HTTP
# ===========================
raw_origins = os.getenv("ALLOWED_ORIGINS", "")
ALLOWED_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]

# ===========================
# LOGGING
# ===========================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
