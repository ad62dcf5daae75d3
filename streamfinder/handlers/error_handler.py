# streamfinder/handlers/error_handler.py

import html
import json
import traceback

from telegram import Update
from telegram.ext import ContextTypes

from ..config import logger
from ..services.tmdb_client import TMDBError


async def global_error_handler(
    update: object, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """
    Catches all unhandled exceptions and logs them with the update that caused them.

    Inline queries get no reply at all; updates that carry a message receive a
    short plain-text apology.
    """
    if not context.error:
        logger.warning("Error handler was called but context.error is None.")
        return

    error = context.error
    if isinstance(error, TMDBError):
        logger.error(f"[TMDB] Request to {error.url} failed: {error}")
    else:
        logger.error("An unhandled exception occurred:", exc_info=error)

    tb_string = "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    )
    update_str = update.to_dict() if isinstance(update, Update) else str(update)

    context_message = (
        "An exception was raised while handling an update\n"
        f"<pre>update = {html.escape(json.dumps(update_str, indent=2, ensure_ascii=False))}"
        "</pre>\n\n"
        f"<b>Traceback:</b>\n<pre>{html.escape(tb_string)}</pre>"
    )
    logger.debug(f"DETAILED EXCEPTION REPORT:\n{context_message}")

    if isinstance(update, Update) and update.effective_message:
        error_text = (
            "❌ An unexpected error occurred.\n\n"
            "I couldn't finish that request. Please try again later."
        )
        try:
            await update.effective_message.reply_text(text=error_text)
        except Exception as e:
            logger.error(f"Failed to send the user-facing error message: {e}")
