from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import discord

from domain.models import AdminNote, AdminNoteShort, ServerBan, ServerBanShort

SHORT_MSG_LEN_SYMBOLS = 50
EMBED_TITLE_LIMIT = 256
EMBED_DESCRIPTION_LIMIT = 4096
FOOTER_TEXT = "SS14 Admin Relay"


def shorten(text: str, limit: int = SHORT_MSG_LEN_SYMBOLS) -> str:
    """Cut `text` to `limit` characters, marking the cut with an ellipsis."""

    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def _fmt_time(value: Optional[datetime]) -> str:
    if value is None:
        return "Never"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def format_short_ban_summary(ban: ServerBanShort) -> str:
    return f"**{ban.ban_id}**. {shorten(ban.reason)}"


def format_short_note_summary(note: AdminNoteShort) -> str:
    return f"**{note.note_id}**. {shorten(note.message)}"


def format_ban_summary(ban: ServerBan, created_by: str, last_edited_by: Optional[str]) -> str:
    lines = [
        f"🔒 **Ban ID:** {ban.ban_id}",
        f"📅 **Ban Time:** {_fmt_time(ban.ban_time)}",
        f"📍 **Address:** {ban.address or 'None'}",
        f"✍️ **Banning Admin:** {created_by}",
        f"⏳ **Expiration Time:** {_fmt_time(ban.expiration_time)}",
    ]

    if ban.hwid:
        lines.append(f"🖥️ **HWID:** {ban.hwid.hex()}")
    if ban.last_edited_at is not None:
        lines.append(f"🕒 **Last Edited At:** {_fmt_time(ban.last_edited_at)}")
    if last_edited_by is not None:
        lines.append(f"✍️ **Last Edited By:** {last_edited_by}")
    if ban.round_id is not None:
        lines.append(f"✨ **Round ID:** {ban.round_id}")

    lines.append(f"🗑️ **Auto Delete:** {'Yes' if ban.auto_delete else 'No'}")
    lines.append("")
    lines.append(f"📝 **Reason:**\n{ban.reason}")
    return "\n".join(lines)


def format_admin_note(note: AdminNote, created_by: str, last_edited_by: str) -> str:
    lines = [
        f"✨ **Round ID:** {note.round_id if note.round_id is not None else 'None'}",
        f"👤 **Created By:** {created_by}",
        f"📅 **Created At:** {_fmt_time(note.created_at)}",
        f"✍️ **Last Edited By:** {last_edited_by}",
        f"🕒 **Last Edited At:** {_fmt_time(note.last_edited_at)}",
        f"🗑️ **Deleted:** {'Yes' if note.deleted else 'No'}",
    ]

    if note.deleted_at is not None:
        lines.append(f"🗓️ **Deleted At:** {_fmt_time(note.deleted_at)}")
    lines.append("🔒 **Secret:** Yes" if note.secret else "🔓 **Secret:** No")
    if note.expiration_time is not None:
        lines.append(f"⏳ **Expiration Time:** {_fmt_time(note.expiration_time)}")

    lines.append("")
    lines.append(f"📝 **Message:**\n{note.message}")
    return "\n".join(lines)


def build_embed(title: str, description: str) -> discord.Embed:
    if len(title) > EMBED_TITLE_LIMIT:
        title = title[: EMBED_TITLE_LIMIT - 3] + "..."
    if len(description) > EMBED_DESCRIPTION_LIMIT:
        description = description[: EMBED_DESCRIPTION_LIMIT - 3] + "..."
    embed = discord.Embed(title=title, description=description, colour=discord.Colour.random())
    embed.set_footer(text=FOOTER_TEXT)
    return embed


def build_ban_list_embed(login: str, bans: List[ServerBanShort]) -> discord.Embed:
    if bans:
        description = "\n".join(format_short_ban_summary(ban) for ban in bans)
    else:
        description = "No bans found."
    return build_embed(f"Bans for `{login}`", description)


def build_note_list_embed(login: str, notes: List[AdminNoteShort]) -> discord.Embed:
    if notes:
        description = "\n".join(format_short_note_summary(note) for note in notes)
    else:
        description = "No notes found."
    return build_embed(f"Notes for `{login}`", description)
