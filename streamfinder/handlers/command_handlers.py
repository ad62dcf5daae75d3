# streamfinder/handlers/command_handlers.py

from telegram import Message, Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from ..config import logger


def get_help_message_text(bot_username: str | None) -> str:
    """Returns the MarkdownV2 usage text shown for /start and /help."""
    handle = f"@{bot_username}" if bot_username else "my username"
    return (
        "Type "
        f"`{handle}` "
        r"followed by a movie or TV show title in any chat\." + "\n\n"
        r"I'll list matching titles and where they are streaming in the US\. "
        r"Pick one to send it to the chat\."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Explains how to use the bot through inline queries."""
    message = update.message
    if not isinstance(message, Message):
        return

    user = update.effective_user
    logger.info(f"User {user.id if user else 'unknown'} requested help.")

    await message.reply_text(
        text=get_help_message_text(context.bot.username),
        parse_mode=ParseMode.MARKDOWN_V2,
    )
