"""FastAPI relay to Gemini.

Endpoints:
- POST /api/generate  { "messages": [{"role": "...", "content": "..."}, ...] }

The response body is the model's text, streamed as plain text in the order
the provider emits it.
"""
from __future__ import annotations
import asyncio
import logging
import time
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from gemini_relay.common.config import MAX_DURATION, MODEL_ID
from gemini_relay.common.logging_setup import setup_logging
from gemini_relay.common.schema import GenerationRequest
from gemini_relay.provider.gemini import stream_text

LOGGER = logging.getLogger("gemini_relay.serve.app")
setup_logging()

app = FastAPI(title="Gemini Relay")


async def _bounded(fragments: AsyncIterator[str], limit: float) -> AsyncIterator[str]:
    """Re-yield ``fragments`` until ``limit`` seconds have passed, then raise TimeoutError."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + limit
    try:
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise asyncio.TimeoutError(f"Generation exceeded {limit}s")
            try:
                fragment = await asyncio.wait_for(anext(fragments), remaining)
            except StopAsyncIteration:
                return
            yield fragment
    finally:
        await fragments.aclose()


def _log_completed(count: int, start: float) -> None:
    latency = int((time.time() - start) * 1000)
    LOGGER.info("Stream completed: fragments=%s latency_ms=%s", count, latency)


async def _relay(first: str, fragments: AsyncIterator[str], start: float) -> AsyncIterator[str]:
    yield first
    count = 1
    async for fragment in fragments:
        count += 1
        yield fragment
    _log_completed(count, start)


@app.post("/api/generate")
async def generate(request: Request) -> StreamingResponse:
    body = await request.json()
    messages = body["messages"]
    LOGGER.info("Relaying %s message(s) to %s", len(messages), MODEL_ID)

    start = time.time()
    gen_request = GenerationRequest(model=MODEL_ID, messages=messages)
    fragments = _bounded(stream_text(gen_request), MAX_DURATION)

    # Pull the first fragment before headers go out so early failures yield a 500.
    try:
        first = await anext(fragments)
    except StopAsyncIteration:
        _log_completed(0, start)
        return StreamingResponse(iter(()), media_type="text/plain; charset=utf-8")

    return StreamingResponse(
        _relay(first, fragments, start),
        media_type="text/plain; charset=utf-8",
    )
