"""Fixed relay configuration; only the provider credential comes from the environment."""
from __future__ import annotations
import os

GEMINI_API_KEY = os.getenv("GOOGLE_GENERATIVE_AI_API_KEY", "")
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
MODEL_ID = "gemini-2.5-flash"

# Seconds a single /api/generate call may stay active, streaming included.
MAX_DURATION = 30
