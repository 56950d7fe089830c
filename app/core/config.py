import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_TTS_MODEL = os.getenv("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
TTS_VOICE = os.getenv("TTS_VOICE", "Algenib")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "60"))

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "krishisahay")
CURRENT_CROPS_COLLECTION = os.getenv("CURRENT_CROPS_COLLECTION", "current_crops")

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "English")

# last_write_wins | latest_request
RESULT_POLICY = os.getenv("RESULT_POLICY", "last_write_wins")

# page sessions untouched for this many seconds are dropped
SESSION_IDLE_TTL = int(os.getenv("SESSION_IDLE_TTL", "3600"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Gemini TTS returns raw little-endian PCM
TTS_SAMPLE_RATE = 24000
TTS_SAMPLE_WIDTH = 2
TTS_CHANNELS = 1
