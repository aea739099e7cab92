# smart_shopping/services/recommendation_client.py

"""Gemini-backed product recommendation client.

Turns a free-text shopping request into structured :class:`Product`
objects with a single ``generate_content`` call:

1. Build a prompt embedding the query and the requested currency.
2. Ask the model for ``application/json`` constrained by an array-of-objects
   response schema.
3. Parse and validate the returned text, then stamp each entry with a
   synthesized id and the *requested* currency.

Every failure (SDK, network, empty body, malformed JSON, schema mismatch)
surfaces as a :class:`RecommendationError`. There is no retry and no
partial-result recovery; identical queries always hit the model again.
"""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from google import genai
from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from smart_shopping.config.settings import Settings
from smart_shopping.models.product import Product

logger = logging.getLogger("smart_shopping.recommendations")


class RecommendationError(Exception):
    """The recommendation request failed for any reason."""


class ParseError(RecommendationError):
    """The model response was empty, malformed, or off-schema."""


class EmptyQueryError(ValueError):
    """The query was empty after trimming; no request is issued."""


class SuggestedProduct(BaseModel):
    """One product entry as returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    estimated_price: float = Field(
        alias="estimatedPrice", ge=0, allow_inf_nan=False, strict=True
    )
    category: str
    reason: str


_SUGGESTIONS = TypeAdapter(list[SuggestedProduct])


def build_prompt(query: str, currency: str) -> str:
    """Build the natural-language instruction sent to the model."""
    return (
        f"Generate a list of {Settings.MIN_RECOMMENDATIONS}-"
        f"{Settings.MAX_RECOMMENDATIONS} distinct product recommendations "
        f'based on this user request: "{query}". '
        f"Focus on variety and relevance. "
        f"Provide estimated prices in {currency}. Return valid JSON."
    )


def build_response_schema(currency: str) -> types.Schema:
    """Build the array-of-objects schema constraining the model output."""
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(
            type=types.Type.OBJECT,
            properties={
                "name": types.Schema(
                    type=types.Type.STRING,
                    description="Name of the product",
                ),
                "description": types.Schema(
                    type=types.Type.STRING,
                    description="Short description of the product features",
                ),
                "estimatedPrice": types.Schema(
                    type=types.Type.NUMBER,
                    description=f"Estimated price in {currency}",
                ),
                "category": types.Schema(
                    type=types.Type.STRING,
                    description="Product category",
                ),
                "reason": types.Schema(
                    type=types.Type.STRING,
                    description="Why this product fits the user's request",
                ),
            },
            required=[
                "name",
                "description",
                "estimatedPrice",
                "category",
                "reason",
            ],
        ),
    )


def parse_products(
    text: str | None, currency: str, response_time: float
) -> list[Product]:
    """Parse raw model text into products stamped with *currency*.

    Ids are ``prod-<response_time_ms>-<index>``: unique within a batch,
    not across sessions.
    """
    if not text or not text.strip():
        raise ParseError("Empty response from AI")

    try:
        raw: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Response is not valid JSON: {exc}") from exc

    try:
        suggestions = _SUGGESTIONS.validate_python(raw)
    except ValidationError as exc:
        raise ParseError(
            f"Response does not match the product schema: {exc}"
        ) from exc

    stamp = int(response_time * 1000)
    return [
        Product(
            id=f"prod-{stamp}-{index}",
            name=s.name,
            description=s.description,
            estimated_price=s.estimated_price,
            currency=currency,
            category=s.category,
            reason=s.reason,
        )
        for index, s in enumerate(suggestions)
    ]


class RecommendationClient:
    """Requests product recommendations from the Gemini API."""

    def __init__(
        self,
        client: genai.Client | None = None,
        model: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self.model = model or Settings.GEMINI_MODEL
        self._clock = clock

    def _get_client(self) -> genai.Client:
        """Create the Gemini client on first use."""
        if self._client is not None:
            return self._client

        api_key = Settings.GOOGLE_API_KEY
        if not api_key:
            raise RecommendationError(
                "No Gemini API key configured. "
                "Set GEMINI_API_KEY in your environment or .env file."
            )
        self._client = genai.Client(api_key=api_key)
        logger.info("Gemini client initialised (model=%s)", self.model)
        return self._client

    def generate_recommendations(
        self, query: str, currency: str = "USD"
    ) -> list[Product]:
        """Return recommended products for *query* priced in *currency*."""
        query = query.strip()
        if not query:
            raise EmptyQueryError("Query must not be empty")
        currency = currency or Settings.DEFAULT_CURRENCY

        client = self._get_client()
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=build_response_schema(currency),
        )

        logger.info(
            "Requesting recommendations for '%s' in %s", query, currency
        )
        started = time.monotonic()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=build_prompt(query, currency),
                config=config,
            )
            text = response.text
        except Exception as exc:
            raise RecommendationError(
                f"Gemini request failed: {exc}"
            ) from exc

        products = parse_products(text, currency, self._clock())
        logger.info(
            "Received %d recommendations for '%s' in %.0fms",
            len(products),
            query,
            (time.monotonic() - started) * 1000,
        )

        if not (
            Settings.MIN_RECOMMENDATIONS
            <= len(products)
            <= Settings.MAX_RECOMMENDATIONS
        ):
            logger.warning(
                "Model returned %d products (expected %d-%d) for '%s'",
                len(products),
                Settings.MIN_RECOMMENDATIONS,
                Settings.MAX_RECOMMENDATIONS,
                query,
            )
        return products
