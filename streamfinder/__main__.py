# streamfinder/__main__.py

import re

from telegram import Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    InlineQueryHandler,
    MessageHandler,
    filters,
)

from streamfinder.config import get_configuration, logger
from streamfinder.handlers.command_handlers import help_command
from streamfinder.handlers.error_handler import global_error_handler
from streamfinder.handlers.inline_handlers import handle_inline_query
from streamfinder.services.provider_cache import ProviderCache
from streamfinder.services.tmdb_client import TMDBClient


def register_handlers(application: Application) -> None:
    """Registers the inline query, help and error handlers for the bot."""
    application.add_handler(InlineQueryHandler(handle_inline_query))

    # /start and /help, with or without the leading slash.
    application.add_handler(
        MessageHandler(
            filters.Regex(re.compile(r"^/?(start|help)$", re.IGNORECASE)),
            help_command,
        )
    )

    application.add_error_handler(global_error_handler)

    logger.info("All handlers have been registered.")


async def post_shutdown(application: Application) -> None:
    """Closes the shared TMDB HTTP client when the bot stops."""
    client = application.bot_data.get("TMDB_CLIENT")
    if isinstance(client, TMDBClient):
        await client.aclose()
    logger.info("--- TMDB client closed. Shutdown complete. ---")


def main() -> None:
    """
    Main function to initialize and run the inline Telegram bot.
    """
    logger.info("Starting bot...")

    config = get_configuration(require_telegram=True)
    assert config.telegram_token is not None

    application = (
        ApplicationBuilder()
        .token(config.telegram_token)
        .post_shutdown(post_shutdown)
        .build()
    )

    # Shared services live in bot_data so every handler reaches the same
    # HTTP client and provider catalog cache.
    client = TMDBClient(
        config.tmdb_token,
        language=config.language,
        region=config.region,
        timeout=config.timeout,
    )
    application.bot_data["TMDB_CLIENT"] = client
    application.bot_data["PROVIDER_CACHE"] = ProviderCache(client.get_provider_catalog)

    register_handlers(application)

    logger.info("Bot startup complete. Starting polling...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
