"""Drafts marketplace listing copy with the OpenAI chat completions API."""
import json
import re
from decimal import Decimal
from typing import Any

import openai
import structlog
from openai import AsyncOpenAI

from flippit.application.interfaces.listing_copy_generator import (
    ListingCopy,
    ListingCopyGeneratorInterface,
)
from flippit.domain.errors import AuthError, NetworkError, UpstreamRejection

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = "You generate high-converting marketplace listings. Respond with strict JSON."

_CODE_FENCE = re.compile(r"```(?:json)?\s*")


def build_prompt(query_text: str, msrp_price: Decimal | None, platform: str) -> str:
    suggested = msrp_price if msrp_price is not None else "unknown"
    return (
        f"Create an optimized marketplace listing for {platform}.\n"
        f"Product: {query_text}\n"
        f"Suggested price: {suggested}\n"
        "Return strictly JSON with fields: title (concise, SEO-friendly), description "
        "(persuasive 3-5 bullet paragraphs, include condition, authenticity, what's included, "
        "shipping/meetup guidance). No markdown, no extra keys."
    )


def parse_listing_json(content: str) -> dict[str, Any]:
    """Parse the model reply, tolerating a ```json fenced block."""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        cleaned = _CODE_FENCE.sub("", content).replace("```", "").strip()
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise UpstreamRejection("Model reply is not valid JSON", details=content) from exc
    if not isinstance(parsed, dict):
        raise UpstreamRejection("Model reply is not a JSON object", details=content)
    return parsed


class ListingCopyGenerator(ListingCopyGeneratorInterface):

    def __init__(
        self,
        client: AsyncOpenAI | None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.4,
        max_tokens: int = 600,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(
        self, query_text: str, msrp_price: Decimal | None, platform: str
    ) -> ListingCopy:
        if self._client is None:
            raise AuthError("Missing OPENAI_API_KEY")

        logger.info("listing_copy_requested", platform=platform, model=self._model)
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(query_text, msrp_price, platform)},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except openai.APIStatusError as exc:
            logger.error("openai_request_failed", status_code=exc.status_code)
            raise NetworkError(
                f"OpenAI error {exc.status_code}", details=exc.response.text
            ) from exc
        except openai.APIError as exc:
            logger.error("openai_connection_failed", error=str(exc))
            raise NetworkError(f"Failed to reach OpenAI: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamRejection("No content")

        parsed = parse_listing_json(content)
        return ListingCopy(
            title=str(parsed.get("title") or query_text),
            description=str(parsed.get("description") or ""),
            suggested_price=msrp_price,
        )
