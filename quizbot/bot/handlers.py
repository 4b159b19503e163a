"""
Telegram update handlers - commands, wizard messages and Web App results

Dependencies are read from context.bot_data:
    wizard           QuizWizard
    session_factory  sessionmaker producing database sessions
    settings         Settings
"""
import logging
from typing import List

from telegram import Update
from telegram.ext import ContextTypes

from quizbot import messages
from quizbot.bot.keyboards import finish_quiz_keyboard, web_app_keyboard
from quizbot.schemas.results import UserResult
from quizbot.services.grading_service import grading_service, parse_webapp_payload
from quizbot.services.quiz_store import quiz_store
from quizbot.services.wizard import WizardReply

logger = logging.getLogger(__name__)


def format_results(results: List[UserResult]) -> str:
    if not results:
        return messages.NO_RESULTS

    text = messages.RESULTS_HEADER
    for result in results:
        text += messages.RESULTS_LINE.format(
            title=result.title,
            correct=result.correct_answers,
            total=result.total_answers,
            last_taken=result.last_taken_at.strftime("%Y-%m-%d %H:%M"),
        )
    return text


async def _send_wizard_reply(update: Update, reply: WizardReply) -> None:
    markup = finish_quiz_keyboard() if reply.show_finish_button else None
    await update.effective_message.reply_text(reply.text, reply_markup=markup)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/start and /help - welcome text, with a Web App button when one is configured"""
    settings = context.bot_data["settings"]
    first_name = update.effective_user.first_name or ""

    text = messages.WELCOME_GREETING.format(first_name=first_name)
    if settings.has_valid_web_app_url:
        text += messages.WELCOME_WITH_WEB_APP
        markup = web_app_keyboard(settings.WEB_APP_URL)
    else:
        text += messages.WELCOME_WITHOUT_WEB_APP.format(local_url=settings.local_url)
        markup = None

    await update.effective_message.reply_text(text, reply_markup=markup)


async def open_web_app(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/open - offer the Web App button"""
    settings = context.bot_data["settings"]

    if not settings.has_valid_web_app_url:
        await update.effective_message.reply_text(
            messages.WEB_APP_NOT_CONFIGURED.format(local_url=settings.local_url)
        )
        return

    await update.effective_message.reply_text(
        messages.OPEN_WEB_APP_PROMPT,
        reply_markup=web_app_keyboard(settings.WEB_APP_URL),
    )


async def create_quiz(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/create_quiz - start the authoring wizard"""
    wizard = context.bot_data["wizard"]
    reply = wizard.begin(update.effective_user.id)
    await _send_wizard_reply(update, reply)


async def results(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/results - latest per-quiz results of the sender"""
    settings = context.bot_data["settings"]
    user_id = str(update.effective_user.id)

    db = context.bot_data["session_factory"]()
    try:
        user_results = quiz_store.get_user_results(db, user_id, settings.RESULTS_LIMIT)
    finally:
        db.close()

    await update.effective_message.reply_text(format_results(user_results))


async def handle_web_app_data(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Grade and record answers sent from the Web App"""
    message = update.effective_message
    user_id = str(update.effective_user.id)

    payload = parse_webapp_payload(message.web_app_data.data)
    if payload is None:
        await message.reply_text(messages.SUBMISSION_INVALID)
        return

    db = context.bot_data["session_factory"]()
    try:
        result = grading_service.grade_submission(db, user_id, payload)
    except Exception as e:
        logger.error(f"Failed to record quiz result of user {user_id}: {str(e)}", exc_info=True)
        await message.reply_text(messages.SUBMISSION_FAILED)
        return
    finally:
        db.close()

    if result is None:
        await message.reply_text(messages.SUBMISSION_QUIZ_NOT_FOUND)
        return

    await message.reply_text(
        messages.SUBMISSION_SAVED.format(correct=result.correct_count, total=result.total_count)
    )


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Any non-command message

    Web App data is graded; text from an admin with an active draft drives
    the wizard; everything else is ignored.
    """
    message = update.effective_message
    if message is None or update.effective_user is None:
        return

    if message.web_app_data is not None:
        await handle_web_app_data(update, context)
        return

    wizard = context.bot_data["wizard"]
    user_id = str(update.effective_user.id)
    if not wizard.is_active(user_id):
        return

    if message.text is None:
        await message.reply_text(messages.SEND_TEXT)
        return

    try:
        reply = wizard.handle_text(user_id, message.text)
    except Exception as e:
        logger.error(f"Failed to save quiz of admin {user_id}: {str(e)}", exc_info=True)
        await message.reply_text(messages.QUIZ_CREATE_FAILED)
        return

    if reply is not None:
        await _send_wizard_reply(update, reply)


async def finish_quiz(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Inline "finish" button under a saved question"""
    query = update.callback_query
    await query.answer()

    wizard = context.bot_data["wizard"]
    user_id = str(update.effective_user.id)

    try:
        reply = wizard.finish(user_id)
    except Exception as e:
        logger.error(f"Failed to save quiz of admin {user_id}: {str(e)}", exc_info=True)
        await query.message.reply_text(messages.QUIZ_CREATE_FAILED)
        return

    if reply.completed:
        await query.edit_message_reply_markup(reply_markup=None)

    await query.message.reply_text(reply.text)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error(f"Unhandled error while processing update: {context.error}", exc_info=context.error)
