"""Launch the relay app under uvicorn."""
from __future__ import annotations
import argparse
import os

import uvicorn

def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the Gemini relay")
    ap.add_argument("--host", default=os.getenv("RELAY_HOST", "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(os.getenv("RELAY_PORT", "8000")))
    args = ap.parse_args()

    uvicorn.run(
        "gemini_relay.serve.fastapi_app:app",
        host=args.host,
        port=args.port,
    )

if __name__ == "__main__":
    main()
