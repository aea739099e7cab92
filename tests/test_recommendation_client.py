# tests/test_recommendation_client.py

"""Tests for the Gemini recommendation client."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from google.genai import types

from smart_shopping.config.settings import Settings
from smart_shopping.services.recommendation_client import (
    EmptyQueryError,
    ParseError,
    RecommendationClient,
    RecommendationError,
    build_prompt,
    build_response_schema,
    parse_products,
)

FIXED_TIME = 1_700_000_000.5


def _raw_entry(index: int, **overrides: Any) -> dict[str, Any]:
    """One well-formed model entry."""
    entry: dict[str, Any] = {
        "name": f"Laptop {index}",
        "description": "16GB RAM, RTX graphics",
        "estimatedPrice": 899.99,
        "category": "Electronics",
        "reason": "Fits a sub-1000 gaming budget",
    }
    entry.update(overrides)
    return entry


def _mock_genai(text: str | None) -> MagicMock:
    """Build a fake genai.Client whose response has *text*."""
    response = MagicMock()
    response.text = text
    client = MagicMock()
    client.models.generate_content.return_value = response
    return client


def _client_for(text: str | None) -> tuple[RecommendationClient, MagicMock]:
    genai_client = _mock_genai(text)
    return (
        RecommendationClient(client=genai_client, clock=lambda: FIXED_TIME),
        genai_client,
    )


class TestBuildPrompt(unittest.TestCase):
    """Prompt construction."""

    def test_embeds_query_and_currency(self) -> None:
        """The query is quoted and the currency named."""
        prompt = build_prompt("gaming laptop under 1000", "EUR")
        self.assertIn('"gaming laptop under 1000"', prompt)
        self.assertIn("in EUR", prompt)

    def test_asks_for_range_and_json(self) -> None:
        """The model is told the expected count and format."""
        prompt = build_prompt("tent", "USD")
        self.assertIn("6-8", prompt)
        self.assertIn("JSON", prompt)


class TestResponseSchema(unittest.TestCase):
    """Response schema construction."""

    def test_array_of_objects_with_required_fields(self) -> None:
        """All five fields are declared and required."""
        schema = build_response_schema("USD")
        self.assertEqual(schema.type, types.Type.ARRAY)
        assert schema.items is not None
        self.assertEqual(schema.items.type, types.Type.OBJECT)
        self.assertEqual(
            sorted(schema.items.required or []),
            ["category", "description", "estimatedPrice", "name", "reason"],
        )

    def test_field_types(self) -> None:
        """Price is a number; the rest are strings."""
        schema = build_response_schema("USD")
        assert schema.items is not None
        props = schema.items.properties or {}
        self.assertEqual(props["estimatedPrice"].type, types.Type.NUMBER)
        for key in ("name", "description", "category", "reason"):
            with self.subTest(key=key):
                self.assertEqual(props[key].type, types.Type.STRING)

    def test_price_description_mentions_currency(self) -> None:
        """The price field description names the currency."""
        schema = build_response_schema("JPY")
        assert schema.items is not None
        props = schema.items.properties or {}
        self.assertIn("JPY", props["estimatedPrice"].description or "")


class TestParseProducts(unittest.TestCase):
    """Raw text to Product conversion."""

    def test_ids_derive_from_time_and_index(self) -> None:
        """Ids are prod-<ms>-<index> and unique within the batch."""
        text = json.dumps([_raw_entry(i) for i in range(3)])
        products = parse_products(text, "USD", FIXED_TIME)
        self.assertEqual(
            [p.id for p in products],
            [
                "prod-1700000000500-0",
                "prod-1700000000500-1",
                "prod-1700000000500-2",
            ],
        )

    def test_requested_currency_overrides_model_output(self) -> None:
        """A currency echoed by the model is ignored."""
        text = json.dumps([_raw_entry(0, currency="GBP")])
        products = parse_products(text, "PKR", FIXED_TIME)
        self.assertEqual(products[0].currency, "PKR")

    def test_preserves_order_and_fields(self) -> None:
        """Entries map one-to-one onto products in order."""
        text = json.dumps([_raw_entry(0), _raw_entry(1, estimatedPrice=10)])
        products = parse_products(text, "USD", FIXED_TIME)
        self.assertEqual([p.name for p in products], ["Laptop 0", "Laptop 1"])
        self.assertEqual(products[1].estimated_price, 10.0)
        self.assertEqual(products[0].reason, "Fits a sub-1000 gaming budget")

    def test_empty_text_raises(self) -> None:
        """None, empty, and whitespace bodies are parse errors."""
        for text in (None, "", "   "):
            with self.subTest(text=text):
                with self.assertRaises(ParseError):
                    parse_products(text, "USD", FIXED_TIME)

    def test_malformed_json_raises(self) -> None:
        """Truncated JSON is a parse error."""
        with self.assertRaises(ParseError):
            parse_products('[{"name": "x"', "USD", FIXED_TIME)

    def test_non_array_raises(self) -> None:
        """A top-level object instead of an array is rejected."""
        text = json.dumps({"products": [_raw_entry(0)]})
        with self.assertRaises(ParseError):
            parse_products(text, "USD", FIXED_TIME)

    def test_missing_field_raises(self) -> None:
        """An entry without a required field fails the whole batch."""
        entry = _raw_entry(1)
        del entry["reason"]
        text = json.dumps([_raw_entry(0), entry])
        with self.assertRaises(ParseError):
            parse_products(text, "USD", FIXED_TIME)

    def test_negative_price_raises(self) -> None:
        """Prices must be non-negative."""
        text = json.dumps([_raw_entry(0, estimatedPrice=-5)])
        with self.assertRaises(ParseError):
            parse_products(text, "USD", FIXED_TIME)

    def test_non_numeric_price_raises(self) -> None:
        """Booleans and numeric strings are not prices."""
        for price in (True, "99"):
            with self.subTest(price=price):
                text = json.dumps([_raw_entry(0, estimatedPrice=price)])
                with self.assertRaises(ParseError):
                    parse_products(text, "USD", FIXED_TIME)

    def test_parse_error_is_recommendation_error(self) -> None:
        """Callers can catch a single failure type."""
        self.assertTrue(issubclass(ParseError, RecommendationError))


class TestRecommendationClient(unittest.TestCase):
    """RecommendationClient.generate_recommendations."""

    def test_returns_products_for_well_formed_response(self) -> None:
        """Six well-formed entries give six products."""
        text = json.dumps([_raw_entry(i) for i in range(6)])
        client, _ = _client_for(text)
        products = client.generate_recommendations(
            "gaming laptop under 1000 USD", "USD"
        )
        self.assertEqual(len(products), 6)
        self.assertTrue(all(p.currency == "USD" for p in products))
        self.assertEqual(len({p.id for p in products}), 6)

    def test_calls_model_with_json_schema_config(self) -> None:
        """The request asks for JSON constrained by the schema."""
        client, genai_client = _client_for(json.dumps([_raw_entry(0)]))
        client.generate_recommendations("tent", "EUR")

        genai_client.models.generate_content.assert_called_once()
        kwargs = genai_client.models.generate_content.call_args.kwargs
        self.assertEqual(kwargs["model"], client.model)
        self.assertIn('"tent"', kwargs["contents"])
        config = kwargs["config"]
        self.assertEqual(config.response_mime_type, "application/json")
        self.assertEqual(config.response_schema.type, types.Type.ARRAY)

    def test_query_is_trimmed(self) -> None:
        """Surrounding whitespace is removed before prompting."""
        client, genai_client = _client_for(json.dumps([_raw_entry(0)]))
        client.generate_recommendations("  tent  ", "USD")
        contents = genai_client.models.generate_content.call_args.kwargs[
            "contents"
        ]
        self.assertIn('"tent"', contents)

    def test_empty_currency_defaults_to_usd(self) -> None:
        """An unset currency falls back to USD."""
        client, _ = _client_for(json.dumps([_raw_entry(0)]))
        products = client.generate_recommendations("tent", "")
        self.assertEqual(products[0].currency, "USD")

    def test_blank_query_issues_no_request(self) -> None:
        """Whitespace-only queries are rejected client-side."""
        client, genai_client = _client_for("[]")
        with self.assertRaises(EmptyQueryError):
            client.generate_recommendations("   ", "USD")
        genai_client.models.generate_content.assert_not_called()

    def test_empty_response_body_raises_parse_error(self) -> None:
        """An empty body surfaces as ParseError."""
        client, _ = _client_for("")
        with self.assertRaises(ParseError):
            client.generate_recommendations("tent", "USD")

    def test_sdk_failure_wrapped(self) -> None:
        """Network/SDK errors become RecommendationError."""
        client, genai_client = _client_for("[]")
        genai_client.models.generate_content.side_effect = ConnectionError(
            "offline"
        )
        with self.assertRaises(RecommendationError) as ctx:
            client.generate_recommendations("tent", "USD")
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)

    def test_identical_queries_are_not_cached(self) -> None:
        """Each call reaches the model."""
        client, genai_client = _client_for(json.dumps([_raw_entry(0)]))
        client.generate_recommendations("tent", "USD")
        client.generate_recommendations("tent", "USD")
        self.assertEqual(genai_client.models.generate_content.call_count, 2)

    def test_out_of_range_count_is_accepted_with_warning(self) -> None:
        """Fewer than six entries are returned but logged."""
        client, _ = _client_for(json.dumps([_raw_entry(0)]))
        with self.assertLogs(
            "smart_shopping.recommendations", level="WARNING"
        ) as logs:
            products = client.generate_recommendations("tent", "USD")
        self.assertEqual(len(products), 1)
        self.assertIn("expected 6-8", logs.output[0])

    def test_missing_api_key_raises(self) -> None:
        """Without an injected client or key, the call fails cleanly."""
        client = RecommendationClient()
        with self.assertRaises(RecommendationError):
            client.generate_recommendations("tent", "USD")

    def test_client_created_lazily_from_key(self) -> None:
        """A configured key builds a genai.Client once."""
        with patch.object(Settings, "GOOGLE_API_KEY", "test-key"), patch(
            "smart_shopping.services.recommendation_client.genai.Client"
        ) as mock_cls:
            mock_cls.return_value = _mock_genai(json.dumps([_raw_entry(0)]))
            client = RecommendationClient()
            client.generate_recommendations("tent", "USD")
            client.generate_recommendations("tent", "USD")
            mock_cls.assert_called_once_with(api_key="test-key")


if __name__ == "__main__":
    unittest.main()
