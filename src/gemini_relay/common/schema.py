"""Dataclasses for the generation request handed to the provider."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any

@dataclass
class GenerationRequest:
    """Target model plus the caller's messages, passed through untouched."""
    model: str
    messages: list[dict[str, Any]]
