"""
Check that the configured Telegram bot token is valid

Usage: quizbot-check-token
"""
import asyncio
import logging
import sys

from telegram import Bot
from telegram.error import InvalidToken, TelegramError

from quizbot.config import settings, validate_bot_token, ConfigurationError

logger = logging.getLogger(__name__)


async def fetch_bot_identity(token: str):
    """Call getMe with the token and return the bot user"""
    async with Bot(token) as bot:
        return await bot.get_me()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')

    try:
        token = validate_bot_token(settings.TELEGRAM_BOT_TOKEN)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Checking bot token ({len(token)} characters)...")

    try:
        me = asyncio.run(fetch_bot_identity(token))
    except InvalidToken:
        logger.error("Token is invalid or the bot was deleted")
        return 1
    except TelegramError as e:
        logger.error(f"Token check failed: {str(e)}")
        return 1

    logger.info("Token is valid")
    logger.info(f"  Bot name: {me.first_name}")
    logger.info(f"  Username: @{me.username}")
    logger.info(f"  ID: {me.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
