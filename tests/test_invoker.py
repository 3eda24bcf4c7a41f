"""Tests for the model invoker transport chain."""
import json
import unittest

import httpx

from budgetwise.llm.invoker import ModelInvoker, Transport
from budgetwise.llm.validator import RefusalPatterns, ResponseValidator
from budgetwise.utils.exceptions import (
    ChainExhaustedError,
    RefusalError,
    RoutingError,
    TransportError,
)

ENDPOINT = "http://api.test/api/ai-insights"
RELAY = "http://relay.test/api/ai-insights"

GOOD_ANSWER = {"response": '{"overallScore": 81, "summary": "Fine", "insights": []}'}


class RecordingHandler:
    """MockTransport handler that replays scripted outcomes in order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        status, payload = outcome
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def calls(self):
        return [(str(r.url), json.loads(r.content)["model"]) for r in self.requests]


class TestModelInvoker(unittest.IsolatedAsyncioTestCase):
    """Test ModelInvoker functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.validator = ResponseValidator(RefusalPatterns.from_list(["I cannot help with that"]))

    def _invoker(self, handler, relay_url=RELAY, **kwargs):
        return ModelInvoker(
            endpoint_url=ENDPOINT,
            primary_model="primary-model",
            fallback_model="fallback-model",
            relay_url=relay_url,
            http_transport=httpx.MockTransport(handler),
            **kwargs
        )

    async def test_primary_success(self):
        handler = RecordingHandler([(200, GOOD_ANSWER)])

        result = await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(result.overall_score, 81)
        self.assertEqual(handler.calls, [(ENDPOINT, "primary-model")])

    async def test_request_payload(self):
        handler = RecordingHandler([(200, GOOD_ANSWER)])
        invoker = self._invoker(handler, temperature=0.2, max_tokens=500, auth_token="tok")

        await invoker.invoke("analyze this", self.validator.validate)

        request = handler.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.headers["Authorization"], "Bearer tok")
        self.assertEqual(json.loads(request.content), {
            "model": "primary-model",
            "prompt": "analyze this",
            "stream": False,
            "options": {"temperature": 0.2, "max_tokens": 500},
        })

    async def test_no_auth_header_without_token(self):
        handler = RecordingHandler([(200, GOOD_ANSWER)])

        await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertNotIn("Authorization", handler.requests[0].headers)

    async def test_server_error_moves_to_fallback(self):
        handler = RecordingHandler([(500, {"error": "boom"}), (200, GOOD_ANSWER)])

        result = await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(result.overall_score, 81)
        self.assertEqual(handler.calls, [(ENDPOINT, "primary-model"), (ENDPOINT, "fallback-model")])

    async def test_not_found_inserts_relay(self):
        handler = RecordingHandler([(404, {}), (200, GOOD_ANSWER)])

        result = await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(result.overall_score, 81)
        self.assertEqual(handler.calls, [(ENDPOINT, "primary-model"), (RELAY, "primary-model")])

    async def test_connect_error_inserts_relay(self):
        handler = RecordingHandler([
            httpx.ConnectError("connection refused"),
            (500, {}),
            (200, GOOD_ANSWER),
        ])

        result = await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(result.overall_score, 81)
        self.assertEqual(handler.calls, [
            (ENDPOINT, "primary-model"),
            (RELAY, "primary-model"),
            (ENDPOINT, "fallback-model"),
        ])

    async def test_relay_inserted_once(self):
        handler = RecordingHandler([(404, {}), (404, {}), (404, {})])

        with self.assertRaises(ChainExhaustedError) as ctx:
            await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(handler.calls, [
            (ENDPOINT, "primary-model"),
            (RELAY, "primary-model"),
            (ENDPOINT, "fallback-model"),
        ])
        self.assertEqual(len(ctx.exception.errors), 3)
        self.assertTrue(all(isinstance(e, RoutingError) for e in ctx.exception.errors))

    async def test_no_relay_configured(self):
        handler = RecordingHandler([(404, {}), (200, GOOD_ANSWER)])

        await self._invoker(handler, relay_url=None).invoke("prompt", self.validator.validate)

        self.assertEqual(handler.calls, [(ENDPOINT, "primary-model"), (ENDPOINT, "fallback-model")])

    async def test_refusal_moves_to_fallback_without_relay(self):
        handler = RecordingHandler([
            (200, {"response": "I cannot help with that"}),
            (200, GOOD_ANSWER),
        ])

        result = await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(result.overall_score, 81)
        self.assertEqual(handler.calls, [(ENDPOINT, "primary-model"), (ENDPOINT, "fallback-model")])

    async def test_refusal_object_is_recorded(self):
        refusal = {"response": '{"refused": true, "reason": "policy"}'}
        handler = RecordingHandler([(200, refusal), (200, refusal)])

        with self.assertRaises(ChainExhaustedError) as ctx:
            await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(len(handler.requests), 2)
        self.assertIsInstance(ctx.exception.errors[0], RefusalError)
        self.assertIn("policy", str(ctx.exception))

    async def test_timeout_is_transport_failure(self):
        handler = RecordingHandler([httpx.ReadTimeout("too slow"), (200, GOOD_ANSWER)])

        await self._invoker(handler).invoke("prompt", self.validator.validate)

        # Timeouts are not routing failures, so the relay is skipped.
        self.assertEqual(handler.calls, [(ENDPOINT, "primary-model"), (ENDPOINT, "fallback-model")])

    async def test_non_json_body(self):
        handler = RecordingHandler([(200, "<html>gateway</html>"), (200, "<html>gateway</html>")])

        with self.assertRaises(ChainExhaustedError) as ctx:
            await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertTrue(all(isinstance(e, TransportError) for e in ctx.exception.errors))

    async def test_every_transport_tried_once(self):
        handler = RecordingHandler([(500, {}), (503, {})])

        with self.assertRaises(ChainExhaustedError):
            await self._invoker(handler).invoke("prompt", self.validator.validate)

        self.assertEqual(len(handler.requests), 2)
        self.assertEqual(handler.outcomes, [])

    def test_transports(self):
        invoker = self._invoker(RecordingHandler([]))

        self.assertEqual(invoker.transports(), [
            Transport("primary", ENDPOINT, "primary-model"),
            Transport("fallback", ENDPOINT, "fallback-model"),
        ])


if __name__ == "__main__":
    unittest.main()
