# nocturne/config.py
import os

from dotenv import load_dotenv

load_dotenv()

# Persistence
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nocturne.db")
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql")  # sql|memory
DB_AUTO_CREATE = os.getenv("DB_AUTO_CREATE", "1") not in ("0", "false", "False")
SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "1") not in ("0", "false", "False")

# Sessions
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

# Simulated payment latency (donations, card linking)
SIMULATED_LATENCY_SEC = float(os.getenv("SIMULATED_LATENCY_SEC", "1.5"))

# Generation collaborators
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TTS_MODEL = os.getenv("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts")
GENERATION_TIMEOUT_SEC = float(os.getenv("GENERATION_TIMEOUT_SEC", "60"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
LOG_PATH = os.getenv("LOG_PATH", "")  # empty = console only
