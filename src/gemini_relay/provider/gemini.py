"""Streaming client for the Gemini generateContent API.

Converts chat messages to Gemini's wire format, opens a server-sent-events
stream and yields text fragments in the order the provider emits them.
"""
from __future__ import annotations
import json
import logging
from typing import Any, AsyncIterator

import httpx

from gemini_relay.common.config import GEMINI_API_KEY, GEMINI_BASE_URL, MAX_DURATION
from gemini_relay.common.schema import GenerationRequest

LOGGER = logging.getLogger("gemini_relay.provider.gemini")

_ROLE_MAP = {"user": "user", "assistant": "model"}


def _make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=float(MAX_DURATION))


def _media_part(data: str, mime_type: str) -> dict[str, Any]:
    if data.startswith(("http://", "https://", "gs://")):
        return {"fileData": {"mimeType": mime_type, "fileUri": data}}
    return {"inlineData": {"mimeType": mime_type, "data": data}}


def _content_parts(content: Any) -> list[dict[str, Any]]:
    """
    Turn message content into Gemini parts.

    Content is either a plain string or a list of typed parts: ``text``,
    ``image`` (base64 or URL in ``image``) and ``file`` (base64 or URL in
    ``data``). Media type is read from ``mediaType`` or ``mimeType``.

    Raises:
        ValueError: on a part type Gemini cannot represent.
    """
    if isinstance(content, str):
        return [{"text": content}]
    parts: list[dict[str, Any]] = []
    for part in content or []:
        kind = part.get("type")
        mime_type = part.get("mediaType") or part.get("mimeType")
        if kind == "text":
            parts.append({"text": part.get("text", "")})
        elif kind == "image":
            parts.append(_media_part(part["image"], mime_type or "image/jpeg"))
        elif kind == "file":
            if not mime_type:
                raise ValueError("File parts need a mediaType")
            parts.append(_media_part(part["data"], mime_type))
        else:
            raise ValueError(f"Unsupported content part type: {kind!r}")
    return parts


def to_gemini_payload(request: GenerationRequest) -> dict[str, Any]:
    """
    Build the streamGenerateContent request body.

    Leading system messages become ``systemInstruction``; user and
    assistant turns keep their order in ``contents``.

    Raises:
        ValueError: on a role or content part Gemini cannot represent, or a
            system message after the conversation has started.
    """
    system_parts: list[dict[str, Any]] = []
    contents: list[dict[str, Any]] = []
    for msg in request.messages:
        role = msg["role"]
        parts = _content_parts(msg.get("content"))
        if role == "system":
            if contents:
                raise ValueError(
                    "System messages are only supported at the beginning of the conversation"
                )
            system_parts.extend(parts)
        elif role in _ROLE_MAP:
            contents.append({"role": _ROLE_MAP[role], "parts": parts})
        else:
            raise ValueError(f"Unsupported message role: {role!r}")

    payload: dict[str, Any] = {"contents": contents}
    if system_parts:
        payload["systemInstruction"] = {"parts": system_parts}
    return payload


async def iter_sse_fragments(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Decode SSE ``data:`` lines into text fragments of the first candidate."""
    async for line in lines:
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if not data:
            continue
        chunk = json.loads(data)
        if "error" in chunk:
            raise RuntimeError(f"Gemini stream error: {chunk['error']}")
        candidates = chunk.get("candidates") or []
        if not candidates:
            continue
        for part in (candidates[0].get("content") or {}).get("parts") or []:
            # reasoning parts are not part of the text stream
            if part.get("thought"):
                continue
            text = part.get("text")
            if text:
                yield text


async def stream_text(request: GenerationRequest) -> AsyncIterator[str]:
    """
    Stream generated text for ``request`` from Gemini.

    Args:
        request: Model id and chat messages.

    Yields:
        Text fragments in emission order.
    """
    payload = to_gemini_payload(request)
    url = f"{GEMINI_BASE_URL}/models/{request.model}:streamGenerateContent"
    headers = {"x-goog-api-key": GEMINI_API_KEY}

    async with _make_client() as client:
        async with client.stream(
            "POST", url, params={"alt": "sse"}, headers=headers, json=payload
        ) as resp:
            if resp.is_error:
                body = await resp.aread()
                LOGGER.error(
                    "Gemini request failed: status=%s body=%s",
                    resp.status_code,
                    body.decode("utf-8", errors="replace"),
                )
                resp.raise_for_status()
            async for fragment in iter_sse_fragments(resp.aiter_lines()):
                yield fragment
