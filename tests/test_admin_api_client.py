import asyncio
import json
import unittest
from uuid import UUID

import aiohttp

from domain.errors import ConfigurationError, RemoteRejectedError, TransportFailureError
from domain.models import ActorContext, BanAction, PardonAction
from fakes import FakeResponse, FakeSession
from infrastructure.http.admin_api_client import (
    AdminApiClient,
    parse_error_response,
    serialize_ban,
    serialize_pardon,
)

ACTOR = ActorContext(identity=UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"), display_name="Mod1")
TARGET_ID = UUID("11111111-1111-1111-1111-111111111111")
BAN = BanAction(
    target_login="Alice",
    target_id=TARGET_ID,
    reason="griefing",
    minutes=60,
    severity=2,
    actor=ACTOR,
)
PARDON = PardonAction(ban_id=7, actor=ACTOR)
DEEPLY_NESTED = b"[" * 200000


class SerializationTests(unittest.TestCase):
    def test_ban_body_uses_wire_field_names(self):
        body = serialize_ban(BAN)

        self.assertEqual(
            body,
            {
                "Username": "Alice",
                "PlayerGuid": str(TARGET_ID),
                "Reason": "griefing",
                "Minutes": 60,
                "Severity": 2,
                "Actor": {"Guid": str(ACTOR.identity), "Name": "Mod1"},
            },
        )

    def test_pardon_body_never_names_a_player(self):
        body = serialize_pardon(PARDON)

        self.assertEqual(body["BanId"], 7)
        self.assertNotIn("PlayerGuid", body)
        self.assertNotIn("Username", body)


class ParseErrorResponseTests(unittest.TestCase):
    def test_business_envelope(self):
        error = parse_error_response(
            404,
            json.dumps({"Message": "Ban not found", "ErrorCode": 404}).encode(),
        )

        self.assertIsInstance(error, RemoteRejectedError)
        self.assertEqual(error.message, "Ban not found")
        self.assertEqual(error.code, 404)
        self.assertIsNone(error.inner_message)

    def test_business_envelope_with_exception(self):
        error = parse_error_response(
            500,
            json.dumps(
                {"Message": "Failed", "ErrorCode": 3, "Exception": {"Message": "NullReference"}}
            ).encode(),
        )

        self.assertIsInstance(error, RemoteRejectedError)
        self.assertEqual(error.inner_message, "NullReference")
        self.assertIn("NullReference", str(error))

    def test_malformed_bodies_degrade_to_transport_failure(self):
        for body in [b"<html>bad gateway</html>", b"", b"\xff\xfe", b"[1, 2]", b'{"Message": "x"}']:
            with self.subTest(body=body):
                error = parse_error_response(502, body)

                self.assertIsInstance(error, TransportFailureError)
                self.assertEqual(error.status, 502)
                self.assertTrue(str(error))

    def test_deeply_nested_body_is_transport_failure(self):
        error = parse_error_response(502, DEEPLY_NESTED)

        self.assertIsInstance(error, TransportFailureError)
        self.assertEqual(error.status, 502)
        self.assertTrue(str(error))

    def test_raw_body_is_kept(self):
        error = parse_error_response(500, b"upstream exploded")

        self.assertEqual(error.raw_body, "upstream exploded")
        self.assertIn("upstream exploded", str(error))


class AdminApiClientTests(unittest.IsolatedAsyncioTestCase):
    def _client(self, session):
        return AdminApiClient(session, "https://game.example/", "secret")

    async def test_ban_posts_body_and_actor_header(self):
        session = FakeSession(FakeResponse(200))

        await self._client(session).ban(BAN)

        self.assertEqual(len(session.requests), 1)
        request = session.requests[0]
        self.assertEqual(request["method"], "POST")
        self.assertEqual(request["url"], "https://game.example/admin/actions/ban")
        self.assertEqual(json.loads(request["data"]), serialize_ban(BAN))
        headers = request["headers"]
        self.assertEqual(headers["Authorization"], "SS14Token secret")
        self.assertEqual(json.loads(headers["Actor"]), {"Guid": str(ACTOR.identity), "Name": "Mod1"})

    async def test_relay_dispatches_pardon(self):
        session = FakeSession(FakeResponse(200))

        await self._client(session).relay(PARDON)

        self.assertEqual(session.requests[0]["url"], "https://game.example/admin/actions/pardon")
        self.assertNotIn("PlayerGuid", json.loads(session.requests[0]["data"]))

    async def test_remote_rejection_is_raised(self):
        session = FakeSession(FakeResponse(404, {"Message": "Ban not found", "ErrorCode": 404}))

        with self.assertRaises(RemoteRejectedError) as ctx:
            await self._client(session).pardon(PARDON)

        self.assertEqual(ctx.exception.message, "Ban not found")

    async def test_transport_failure_is_not_retried(self):
        for error in [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()]:
            with self.subTest(error=error):
                session = FakeSession(error=error)

                with self.assertRaises(TransportFailureError):
                    await self._client(session).ban(BAN)

                self.assertEqual(len(session.requests), 1)

    async def test_server_error_with_html_body(self):
        session = FakeSession(FakeResponse(503, "<html>maintenance</html>"))

        with self.assertRaises(TransportFailureError) as ctx:
            await self._client(session).ban(BAN)

        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(len(session.requests), 1)

    async def test_deeply_nested_error_body(self):
        session = FakeSession(FakeResponse(502, DEEPLY_NESTED))

        with self.assertRaises(TransportFailureError) as ctx:
            await self._client(session).pardon(PARDON)

        self.assertEqual(ctx.exception.status, 502)

    def test_rejects_bad_configuration(self):
        session = FakeSession()
        with self.assertRaises(ConfigurationError):
            AdminApiClient(session, "game.example", "secret")
        with self.assertRaises(ConfigurationError):
            AdminApiClient(session, "https://game.example", "")
        with self.assertRaises(ConfigurationError):
            AdminApiClient(session, "https://game.example", "sec\nret")


if __name__ == "__main__":
    unittest.main()
