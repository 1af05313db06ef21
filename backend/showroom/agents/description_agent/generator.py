# backend/showroom/agents/description_agent/generator.py

"""
Description Assistant
Writes a short sales description for a vehicle with the OpenAI chat
completions API. Never fails the caller: when the model is unconfigured,
unreachable or returns nothing usable, a templated sentence is used instead.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from ...core.config import settings

logger = logging.getLogger(__name__)


class DescriptionSource(str, Enum):
    GENERATED = "generated"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class VehicleTraits:
    brand: str
    model: str
    year: Optional[int] = None
    type: Optional[str] = None
    color: Optional[str] = None
    engine_size: Optional[str] = None


@dataclass(frozen=True)
class DescriptionResult:
    text: str
    source: DescriptionSource


def build_prompt(traits: VehicleTraits) -> str:
    return (
        f"Write an engaging, short sales description (2-4 sentences) for a "
        f"{traits.year or ''} {traits.brand} {traits.model} {traits.type or ''}. "
        f"Mention color: {traits.color or 'N/A'} and engine: {traits.engine_size or 'N/A'}. "
        f"Keep tone persuasive and friendly."
    )


def fallback_description(traits: VehicleTraits) -> str:
    year = traits.year if traits.year else "Year N/A"
    engine = traits.engine_size or "engine N/A"
    return f"A {traits.brand} {traits.model} ({year}) with {engine} - a reliable choice for everyday driving."


def _request_completion(prompt: str) -> Optional[str]:
    response = requests.post(
        settings.OPENAI_API_URL,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
        },
        json={
            "model": settings.OPENAI_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": 150,
            "temperature": 0.7,
        },
        timeout=settings.DESCRIPTION_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    data = response.json()
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        return None
    return (choices[0].get("message") or {}).get("content")


def generate_description(traits: VehicleTraits) -> DescriptionResult:
    if not settings.OPENAI_API_KEY:
        return DescriptionResult(fallback_description(traits), DescriptionSource.FALLBACK)

    try:
        text = _request_completion(build_prompt(traits))
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Description model unavailable, using fallback: {e}")
        return DescriptionResult(fallback_description(traits), DescriptionSource.FALLBACK)

    if not text or not text.strip():
        logger.warning("Description model returned no content, using fallback")
        return DescriptionResult(fallback_description(traits), DescriptionSource.FALLBACK)

    return DescriptionResult(text.strip(), DescriptionSource.GENERATED)


def describe_vehicle(traits: VehicleTraits) -> str:
    """Text-only view of generate_description for request handlers."""
    result = generate_description(traits)
    logger.info(f"Description for {traits.brand} {traits.model}: {result.source.value}")
    return result.text
