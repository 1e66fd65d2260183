"""
Gemini Relay package.

Provides:
- A streaming text relay from a chat message list to Google Gemini
- FastAPI app exposing POST /api/generate
"""
