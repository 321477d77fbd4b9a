# rehab_client/config.py

import os

import dotenv
dotenv.load_dotenv()

# Backend (FastAPI) base URL
BACKEND_URL = os.getenv("COACH_BACKEND_URL", "http://127.0.0.1:8000").rstrip("/")

# One attempt per request; on timeout we fall back to the static message
REQUEST_TIMEOUT_S = float(os.getenv("COACH_REQUEST_TIMEOUT", "5.0"))

CAMERA_INDEX = int(os.getenv("COACH_CAMERA_INDEX", "0"))
COUNTDOWN_SECONDS = 5
TTS_RATE = 150
