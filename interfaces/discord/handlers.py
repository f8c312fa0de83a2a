from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, Tuple

import discord
from discord import app_commands
from discord.ext import commands

from application.services import (
    BanCommand,
    BanInfoCommand,
    BanListCommand,
    ExternalContext,
    NoteInfoCommand,
    NoteListCommand,
    PardonCommand,
    execute_ban,
    execute_pardon,
    get_ban_info,
    get_note_info,
    list_bans,
    list_notes,
)
from domain.gateways import AdminActionGateway, AuthorizationGateway, PlayerLookupGateway
from domain.repositories import ModerationRecordRepository, PlayerRepository
from interfaces.discord.formatting import (
    build_ban_list_embed,
    build_embed,
    build_note_list_embed,
    format_admin_note,
    format_ban_summary,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong while handling the command."

Reply = Tuple[Optional[str], Optional[discord.Embed]]


def _build_external_context(user: discord.abc.User) -> ExternalContext:
    """Create an `ExternalContext` from a Discord user."""

    return ExternalContext(
        provider="discord",
        provider_user_id=str(user.id),
        display_name=user.display_name or user.name,
    )


async def _respond(interaction: discord.Interaction, handler: Callable[[], Awaitable[Reply]]) -> None:
    """
    Defer, run `handler`, and send exactly one ephemeral follow-up.

    Unexpected errors are logged and turned into a generic reply.
    """

    await interaction.response.defer(ephemeral=True, thinking=True)

    try:
        content, embed = await handler()
    except Exception:
        logger.exception(
            "Unhandled error in /%s from %s",
            interaction.command.qualified_name if interaction.command else "?",
            interaction.user.id,
        )
        content, embed = GENERIC_FAILURE_MESSAGE, None

    kwargs = {"ephemeral": True}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed

    try:
        await interaction.followup.send(**kwargs)
    except discord.HTTPException as e:
        logger.error("Error creating response: %s", e)


def create_discord_bot(
    guild_id: int,
    player_repo: PlayerRepository,
    record_repo: ModerationRecordRepository,
    lookup_gateway: PlayerLookupGateway,
    auth_gateway: AuthorizationGateway,
    action_gateway: AdminActionGateway,
) -> commands.Bot:
    """
    Configure and return a Discord bot exposing the `/bans` and `/notes`
    slash command groups, registered on a single guild.

    This module contains only Discord-specific concerns: reading slash
    command options into command values and rendering results.
    """

    intents = discord.Intents.default()
    bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)
    guild = discord.Object(id=guild_id)

    bans_group = app_commands.Group(name="bans", description="Player bans on the game server")
    notes_group = app_commands.Group(name="notes", description="Admin notes of a player")

    async def setup_hook() -> None:
        bot.tree.add_command(bans_group, guild=guild)
        bot.tree.add_command(notes_group, guild=guild)
        synced = await bot.tree.sync(guild=guild)
        logger.info("Registered %s commands: %s", len(synced), [c.name for c in synced])

    bot.setup_hook = setup_hook

    @bot.event
    async def on_ready():
        logger.info("Bot %s connected and ready to handle interactions!", bot.user)

    @bans_group.command(name="ban", description="Bans a player on the game server")
    @app_commands.describe(
        login="In-game login",
        minutes="Ban duration in minutes, 0 for a permanent ban",
        severity="Ban severity as understood by the game server",
        reason="Reason shown to the player",
    )
    async def ban_cmd(
        interaction: discord.Interaction,
        login: str,
        minutes: app_commands.Range[int, 0],
        severity: app_commands.Range[int, 0],
        reason: str = "No reason supplied",
    ):
        async def handler() -> Reply:
            result = await execute_ban(
                _build_external_context(interaction.user),
                BanCommand(login=login, reason=reason, minutes=minutes, severity=severity),
                auth_gateway,
                player_repo,
                lookup_gateway,
                action_gateway,
            )
            return result.message, None

        await _respond(interaction, handler)

    @bans_group.command(name="pardon", description="Pardons specified ban ID")
    @app_commands.describe(id="ID of the ban from the `list` subcommand")
    async def pardon_cmd(interaction: discord.Interaction, id: int):
        async def handler() -> Reply:
            result = await execute_pardon(
                _build_external_context(interaction.user),
                PardonCommand(ban_id=id),
                auth_gateway,
                player_repo,
                action_gateway,
            )
            return result.message, None

        await _respond(interaction, handler)

    @bans_group.command(name="list", description="Lists all bans of this user")
    @app_commands.describe(login="In-game login")
    async def ban_list_cmd(interaction: discord.Interaction, login: str):
        async def handler() -> Reply:
            result = await list_bans(BanListCommand(login=login), player_repo, lookup_gateway, record_repo)
            if not result.success:
                return result.error_message, None
            return None, build_ban_list_embed(result.login, result.bans)

        await _respond(interaction, handler)

    @bans_group.command(name="info", description="Lists info about this ban")
    @app_commands.describe(id="ID of the ban from the `list` subcommand")
    async def ban_info_cmd(interaction: discord.Interaction, id: int):
        async def handler() -> Reply:
            result = await get_ban_info(BanInfoCommand(ban_id=id), player_repo, record_repo)
            if not result.success:
                return result.error_message, None
            description = format_ban_summary(
                result.ban,
                result.banning_admin_name,
                result.last_edited_by_name,
            )
            return None, build_embed(f"Ban of `{result.player_name}`", description)

        await _respond(interaction, handler)

    @notes_group.command(name="list", description="Lists all notes of this user")
    @app_commands.describe(login="In-game login")
    async def note_list_cmd(interaction: discord.Interaction, login: str):
        async def handler() -> Reply:
            result = await list_notes(NoteListCommand(login=login), player_repo, lookup_gateway, record_repo)
            if not result.success:
                return result.error_message, None
            return None, build_note_list_embed(result.login, result.notes)

        await _respond(interaction, handler)

    @notes_group.command(name="note", description="Gets a specific note by ID")
    @app_commands.describe(id="ID of the note from the `list` subcommand")
    async def note_info_cmd(interaction: discord.Interaction, id: int):
        async def handler() -> Reply:
            result = await get_note_info(NoteInfoCommand(note_id=id), player_repo, record_repo)
            if not result.success:
                return result.error_message, None
            description = format_admin_note(
                result.note,
                result.created_by_name,
                result.last_edited_by_name,
            )
            return None, build_embed(f"Note `{id}` for `{result.player_name}`", description)

        await _respond(interaction, handler)

    return bot
