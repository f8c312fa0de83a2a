import unittest
from types import SimpleNamespace

from interfaces.discord.handlers import GENERIC_FAILURE_MESSAGE, _build_external_context, _respond


class FakeInteraction:
    def __init__(self):
        self.deferred = []
        self.sent = []
        self.user = SimpleNamespace(id=1001, display_name="Mod One", name="mod1")
        self.command = SimpleNamespace(qualified_name="bans ban")
        self.response = SimpleNamespace(defer=self._defer)
        self.followup = SimpleNamespace(send=self._send)

    async def _defer(self, **kwargs):
        self.deferred.append(kwargs)

    async def _send(self, **kwargs):
        self.sent.append(kwargs)


class RespondTests(unittest.IsolatedAsyncioTestCase):
    async def test_sends_exactly_one_ephemeral_reply(self):
        interaction = FakeInteraction()

        async def handler():
            return "done", None

        await _respond(interaction, handler)

        self.assertEqual(len(interaction.deferred), 1)
        self.assertTrue(interaction.deferred[0]["ephemeral"])
        self.assertEqual(interaction.sent, [{"ephemeral": True, "content": "done"}])

    async def test_unexpected_error_still_replies_once(self):
        interaction = FakeInteraction()

        async def handler():
            raise RuntimeError("boom")

        with self.assertLogs("interfaces.discord.handlers", level="ERROR"):
            await _respond(interaction, handler)

        self.assertEqual(interaction.sent, [{"ephemeral": True, "content": GENERIC_FAILURE_MESSAGE}])

    def test_external_context_from_user(self):
        ctx = _build_external_context(SimpleNamespace(id=1001, display_name="", name="mod1"))

        self.assertEqual(ctx.provider, "discord")
        self.assertEqual(ctx.provider_user_id, "1001")
        self.assertEqual(ctx.display_name, "mod1")


if __name__ == "__main__":
    unittest.main()
