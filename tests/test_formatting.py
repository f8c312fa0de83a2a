import unittest
from datetime import datetime, timezone
from uuid import UUID

from domain.models import AdminNote, AdminNoteShort, ServerBan, ServerBanShort
from interfaces.discord.formatting import (
    EMBED_DESCRIPTION_LIMIT,
    EMBED_TITLE_LIMIT,
    build_ban_list_embed,
    build_embed,
    build_note_list_embed,
    format_admin_note,
    format_ban_summary,
    format_short_ban_summary,
    shorten,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
PLAYER_ID = UUID("11111111-1111-1111-1111-111111111111")


class FormattingTests(unittest.TestCase):
    def test_shorten(self):
        self.assertEqual(shorten("short"), "short")
        self.assertEqual(shorten("x" * 60), "x" * 50 + "...")

    def test_short_ban_summary(self):
        self.assertEqual(format_short_ban_summary(ServerBanShort(ban_id=4, reason="rdm")), "**4**. rdm")

    def test_ban_summary_permanent_ban(self):
        ban = ServerBan(
            ban_id=4,
            player_id=PLAYER_ID,
            address=None,
            ban_time=NOW,
            expiration_time=None,
            reason="rdm",
            banning_admin=None,
            hwid=b"\x01\x02",
            auto_delete=True,
            last_edited_at=None,
            last_edited_by=None,
            round_id=None,
        )

        text = format_ban_summary(ban, "Mod1", None)

        self.assertIn("**Expiration Time:** Never", text)
        self.assertIn("**Banning Admin:** Mod1", text)
        self.assertIn("0102", text)
        self.assertIn("**Auto Delete:** Yes", text)
        self.assertNotIn("Last Edited By", text)
        self.assertTrue(text.endswith("rdm"))

    def test_admin_note(self):
        note = AdminNote(
            note_id=1,
            round_id=3,
            player_id=PLAYER_ID,
            message="be nice",
            created_by=None,
            created_at=NOW,
            last_edited_by=None,
            last_edited_at=None,
            deleted=False,
            deleted_at=None,
            secret=False,
            expiration_time=None,
            severity=0,
        )

        text = format_admin_note(note, "Mod1", "Mod2")

        self.assertIn("**Round ID:** 3", text)
        self.assertIn("**Secret:** No", text)
        self.assertNotIn("Deleted At", text)
        self.assertTrue(text.endswith("be nice"))

    def test_list_embeds(self):
        embed = build_ban_list_embed("Alice", [ServerBanShort(ban_id=1, reason="a"), ServerBanShort(ban_id=2, reason="b")])
        self.assertEqual(embed.title, "Bans for `Alice`")
        self.assertEqual(embed.description, "**1**. a\n**2**. b")

        empty = build_note_list_embed("Alice", [])
        self.assertEqual(empty.description, "No notes found.")

        notes = build_note_list_embed("Alice", [AdminNoteShort(note_id=3, message="c")])
        self.assertEqual(notes.description, "**3**. c")

    def test_long_description_is_truncated(self):
        embed = build_embed("t", "x" * (EMBED_DESCRIPTION_LIMIT + 10))

        self.assertEqual(len(embed.description), EMBED_DESCRIPTION_LIMIT)


    def test_long_login_keeps_title_within_limit(self):
        login = "A" * 300

        for embed in [build_ban_list_embed(login, []), build_note_list_embed(login, [])]:
            with self.subTest(title=embed.title[:20]):
                self.assertLessEqual(len(embed.title), EMBED_TITLE_LIMIT)
                self.assertTrue(embed.title.endswith("..."))


if __name__ == "__main__":
    unittest.main()
