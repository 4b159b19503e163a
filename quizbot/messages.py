"""
User-facing texts for the bot and the HTTP surface
"""

# /start
WELCOME_GREETING = "Hi, {first_name}!\n\nHere you can take simple quizzes.\n\n"
WELCOME_WITH_WEB_APP = "Tap the button below to open the list of available quizzes."
WELCOME_WITHOUT_WEB_APP = (
    "📱 To use the web app, open it in your browser: {local_url}\n\n"
    "💬 Available commands:\n"
    "/create_quiz - create a quiz (admins only)\n"
    "/results - show your results"
)
OPEN_WEB_APP_BUTTON = "📋 Open quizzes"
OPEN_WEB_APP_PROMPT = "Open the web app:"
WEB_APP_NOT_CONFIGURED = "The web app is not configured yet. Open it in your browser: {local_url}"

# Wizard
NOT_PERMITTED = "You are not allowed to create quizzes."
ASK_TITLE = "Creating a new quiz.\n\nPlease send the quiz title."
TITLE_REQUIRED = "The title cannot be empty. Please send the quiz title."
ASK_FIRST_QUESTION = (
    "Great! Now send the text of the first question.\n\n"
    "When you are done, send an empty message instead of the question text."
)
ASK_OPTIONS = (
    "Now send the answer options for this question in one line, separated by semicolons.\n\n"
    "For example:\nOption 1; Option 2; Option 3"
)
TOO_FEW_OPTIONS = "Please give at least two answer options separated by semicolons."
ASK_CORRECT_OPTION = "Send the number of the correct answer (from 1 to {count})."
CORRECT_OPTION_OUT_OF_RANGE = "Please enter a number from 1 to {count}."
QUESTION_SAVED = "Question saved.\n\nSend the text of the next question or tap the button to finish."
FINISH_BUTTON = "Finish quiz"
NEED_ONE_QUESTION = "You need to add at least one question."
NO_ACTIVE_DRAFT = "There is no quiz being created right now."
QUIZ_CREATED = "Quiz created successfully! ID: {quiz_id}\n\nYou can open it in the web app via /start."
QUIZ_CREATE_FAILED = "Could not save the quiz. Please try finishing again."
SEND_TEXT = "Please send a text message."

# Results
NO_RESULTS = "You have no quiz results yet."
RESULTS_HEADER = "Your latest results:\n\n"
RESULTS_LINE = "• «{title}»: {correct}/{total} correct (last taken: {last_taken})\n"

# Web App submissions
SUBMISSION_SAVED = "Result saved.\n\nYou answered {correct} of {total} questions correctly."
SUBMISSION_QUIZ_NOT_FOUND = "Could not find the quiz to save the result."
SUBMISSION_INVALID = "The quiz result could not be read."
SUBMISSION_FAILED = "Something went wrong while processing the quiz results."

# HTTP surface
QUIZ_NOT_FOUND = "Quiz not found"
QUIZZES_LOAD_FAILED = "Failed to load the list of quizzes"
QUIZ_LOAD_FAILED = "Failed to load the quiz"
INVALID_REQUEST = "The request is invalid"
INTERNAL_ERROR = "An unexpected error occurred. Please try again later."
