"""
Reply markups used by the bot
"""
from telegram import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    WebAppInfo,
)

from quizbot import messages

FINISH_QUIZ_CALLBACK = "finish_quiz"


def web_app_keyboard(url: str) -> ReplyKeyboardMarkup:
    """Persistent keyboard with a button launching the Web App"""
    return ReplyKeyboardMarkup(
        [[KeyboardButton(messages.OPEN_WEB_APP_BUTTON, web_app=WebAppInfo(url=url))]],
        resize_keyboard=True,
        one_time_keyboard=False,
    )


def finish_quiz_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(messages.FINISH_BUTTON, callback_data=FINISH_QUIZ_CALLBACK)]]
    )
