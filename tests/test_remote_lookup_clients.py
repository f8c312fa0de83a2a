import unittest
from uuid import UUID

import aiohttp

from domain.errors import TransportFailureError
from fakes import FakeResponse, FakeSession
from infrastructure.http.auth_client import AuthorizationClient
from infrastructure.http.player_lookup_client import PlayerLookupClient

ADMIN_ID = UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
DEEPLY_NESTED = b"[" * 200000


class AuthorizationClientTests(unittest.IsolatedAsyncioTestCase):
    def _client(self, session):
        return AuthorizationClient(session, "https://auth.example", "token")

    async def test_linked_account(self):
        session = FakeSession(FakeResponse(200, {"uuid": str(ADMIN_ID)}))

        result = await self._client(session).get_user_id_by_discord_id("1001")

        self.assertEqual(result, ADMIN_ID)
        request = session.requests[0]
        self.assertEqual(request["url"], "https://auth.example/api/uuid")
        self.assertEqual(request["params"], {"method": "discord", "id": "1001"})
        self.assertEqual(request["headers"]["Authorization"], "Bearer token")

    async def test_refusal_statuses(self):
        for status in [401, 403, 404, 500]:
            with self.subTest(status=status):
                session = FakeSession(FakeResponse(status, {"error": "not linked"}))

                self.assertIsNone(await self._client(session).get_user_id_by_discord_id("1001"))

    async def test_unparseable_success_body(self):
        for body in ["not json", {"uuid": "not-a-uuid"}, {"id": str(ADMIN_ID)}, ""]:
            with self.subTest(body=body):
                session = FakeSession(FakeResponse(200, body))

                self.assertIsNone(await self._client(session).get_user_id_by_discord_id("1001"))

    async def test_deeply_nested_body_is_a_refusal(self):
        for status in [200, 403]:
            with self.subTest(status=status):
                session = FakeSession(FakeResponse(status, DEEPLY_NESTED))

                self.assertIsNone(await self._client(session).get_user_id_by_discord_id("1001"))

    async def test_unreachable_service_raises(self):
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

        with self.assertRaises(TransportFailureError):
            await self._client(session).get_user_id_by_discord_id("1001")
        self.assertEqual(len(session.requests), 1)


class PlayerLookupClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_found(self):
        session = FakeSession(FakeResponse(200, {"userName": "Carol", "userId": str(ADMIN_ID)}))

        result = await PlayerLookupClient(session).lookup_user_id_by_login("Carol")

        self.assertEqual(result, ADMIN_ID)
        request = session.requests[0]
        self.assertEqual(request["url"], "https://auth.spacestation14.com/api/query/name")
        self.assertEqual(request["params"], {"name": "Carol"})

    async def test_not_found_envelope(self):
        session = FakeSession(FakeResponse(404, {"status": 404}))

        self.assertIsNone(await PlayerLookupClient(session).lookup_user_id_by_login("Ghost"))

    async def test_deeply_nested_body_is_not_found(self):
        session = FakeSession(FakeResponse(200, DEEPLY_NESTED))

        self.assertIsNone(await PlayerLookupClient(session).lookup_user_id_by_login("Carol"))

    async def test_unreachable_service_raises(self):
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

        with self.assertRaises(TransportFailureError):
            await PlayerLookupClient(session, "https://lookup.example").lookup_user_id_by_login("Carol")


if __name__ == "__main__":
    unittest.main()
