"""
Telegram application wiring
"""
import logging
from typing import List

from sqlalchemy.orm import sessionmaker
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from quizbot.bot import handlers
from quizbot.bot.keyboards import FINISH_QUIZ_CALLBACK
from quizbot.config import Settings
from quizbot.schemas.quiz import QuestionCreate
from quizbot.services.quiz_store import quiz_store
from quizbot.services.wizard import InMemorySessionStore, QuizWizard

logger = logging.getLogger(__name__)


def make_wizard(settings: Settings, session_factory: sessionmaker) -> QuizWizard:
    """Wizard persisting finished drafts through the quiz store"""

    def create_quiz(title: str, created_by: str, questions: List[QuestionCreate]) -> int:
        db = session_factory()
        try:
            return quiz_store.create_quiz(db, title, created_by, questions)
        finally:
            db.close()

    return QuizWizard(
        sessions=InMemorySessionStore(),
        admin_ids=settings.admin_ids,
        create_quiz=create_quiz,
    )


def register_handlers(application: Application) -> None:
    application.add_handler(CommandHandler(["start", "help"], handlers.start))
    application.add_handler(CommandHandler("create_quiz", handlers.create_quiz))
    application.add_handler(CommandHandler("results", handlers.results))
    application.add_handler(CommandHandler("open", handlers.open_web_app))
    application.add_handler(
        CallbackQueryHandler(handlers.finish_quiz, pattern=f"^{FINISH_QUIZ_CALLBACK}$")
    )
    # Edited messages must not replay into the wizard
    application.add_handler(
        MessageHandler(filters.UpdateType.MESSAGE & ~filters.COMMAND, handlers.handle_message)
    )
    application.add_error_handler(handlers.error_handler)


def build_application(
    settings: Settings,
    session_factory: sessionmaker,
    wizard: QuizWizard = None
) -> Application:
    """
    Build the Telegram application with handlers and shared dependencies

    Args:
        settings: Application settings (token, admins, Web App URL)
        session_factory: Database session factory
        wizard: Quiz wizard; built from settings when omitted
    """
    application = Application.builder().token(settings.TELEGRAM_BOT_TOKEN).build()

    application.bot_data["settings"] = settings
    application.bot_data["session_factory"] = session_factory
    application.bot_data["wizard"] = wizard or make_wizard(settings, session_factory)

    register_handlers(application)

    logger.info(f"Telegram application built ({len(settings.admin_ids)} admins)")
    return application
