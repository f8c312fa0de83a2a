import asyncio
import logging
import sys

from dotenv import load_dotenv

from domain.errors import ConfigurationError
from infrastructure.config import Settings, load_settings
from infrastructure.db.moderation_repository_postgres import PostgresModerationRecordRepository
from infrastructure.db.moderation_repository_sqlite import SqliteModerationRecordRepository
from infrastructure.db.player_repository_postgres import PostgresPlayerRepository
from infrastructure.db.player_repository_sqlite import SqlitePlayerRepository
from infrastructure.http.admin_api_client import AdminApiClient
from infrastructure.http.auth_client import AuthorizationClient
from infrastructure.http.player_lookup_client import PlayerLookupClient
from infrastructure.http.session import create_http_session
from interfaces.discord.handlers import create_discord_bot

logger = logging.getLogger("discord_main")


def build_repositories(settings: Settings):
    if settings.uses_postgres:
        return (
            PostgresPlayerRepository(settings.database),
            PostgresModerationRecordRepository(settings.database),
        )
    return (
        SqlitePlayerRepository(settings.database),
        SqliteModerationRecordRepository(settings.database),
    )


async def run(settings: Settings) -> None:
    player_repo, record_repo = build_repositories(settings)

    async with create_http_session(settings.http_connect_timeout, settings.http_total_timeout) as session:
        bot = create_discord_bot(
            settings.guild_id,
            player_repo,
            record_repo,
            PlayerLookupClient(session, settings.player_lookup_url),
            AuthorizationClient(session, settings.auth_url, settings.auth_token),
            AdminApiClient(session, settings.ss14_api_url, settings.ss14_api_token),
        )
        async with bot:
            await bot.start(settings.discord_token)


def main() -> None:
    load_dotenv()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Unable to parse configuration: %s", e)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(settings))
    except ConfigurationError as e:
        logger.error("Unable to start: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Shutting down.")


if __name__ == "__main__":
    main()
