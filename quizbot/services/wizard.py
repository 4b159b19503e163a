"""
Quiz authoring wizard - a per-admin state machine driven by chat messages

Flow:
    /create_quiz -> title -> (question text -> options -> correct number)* -> finish

A draft is finished by sending an empty question text or by the explicit
finish action. Drafts live only in the injected session store.
"""
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple, Union

from quizbot import messages
from quizbot.schemas.quiz import QuestionCreate

logger = logging.getLogger(__name__)

OPTIONS_DELIMITER = ";"
MIN_OPTIONS = 2


class WizardStep(str, Enum):
    AWAITING_TITLE = "awaiting_title"
    AWAITING_QUESTION_TEXT = "awaiting_question_text"
    AWAITING_OPTIONS = "awaiting_options"
    AWAITING_CORRECT_INDEX = "awaiting_correct_index"


@dataclass(frozen=True)
class AwaitingTitle:
    step = WizardStep.AWAITING_TITLE


@dataclass(frozen=True)
class AwaitingQuestionText:
    title: str
    questions: Tuple[QuestionCreate, ...] = ()

    step = WizardStep.AWAITING_QUESTION_TEXT


@dataclass(frozen=True)
class AwaitingOptions:
    title: str
    questions: Tuple[QuestionCreate, ...]
    question_text: str

    step = WizardStep.AWAITING_OPTIONS


@dataclass(frozen=True)
class AwaitingCorrectIndex:
    title: str
    questions: Tuple[QuestionCreate, ...]
    question_text: str
    options: Tuple[str, ...]

    step = WizardStep.AWAITING_CORRECT_INDEX


DraftState = Union[AwaitingTitle, AwaitingQuestionText, AwaitingOptions, AwaitingCorrectIndex]


@dataclass(frozen=True)
class WizardReply:
    """What the bot should answer after a wizard step"""
    text: str
    show_finish_button: bool = False
    quiz_id: Optional[int] = None

    @property
    def completed(self) -> bool:
        return self.quiz_id is not None


class SessionStore(Protocol):
    """Keyed storage for in-progress drafts"""

    def get(self, key: str) -> Optional[DraftState]: ...

    def set(self, key: str, state: DraftState) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class InMemorySessionStore:
    """Process-local draft storage, safe for concurrent use across keys"""
    _states: Dict[str, DraftState] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, key: str) -> Optional[DraftState]:
        with self._lock:
            return self._states.get(key)

    def set(self, key: str, state: DraftState) -> None:
        with self._lock:
            self._states[key] = state

    def delete(self, key: str) -> None:
        with self._lock:
            self._states.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)


CreateQuiz = Callable[[str, str, List[QuestionCreate]], int]


def parse_options(text: str) -> List[str]:
    """Split 'A; B ;C' into ['A', 'B', 'C'], dropping empty pieces"""
    return [part.strip() for part in text.split(OPTIONS_DELIMITER) if part.strip()]


def parse_correct_option(text: str, option_count: int) -> Optional[int]:
    """
    Parse a 1-based answer number

    Returns:
        Zero-based index, or None if the text is not an integer in [1, option_count]
    """
    try:
        number = int(text.strip())
    except (TypeError, ValueError):
        return None

    if not 1 <= number <= option_count:
        return None
    return number - 1


class QuizWizard:
    """
    Drives quiz drafts for administrators

    Args:
        sessions: Draft storage keyed by user id
        admin_ids: User ids allowed to author quizzes
        create_quiz: Persists (title, created_by, questions) and returns the quiz id
    """

    def __init__(self, sessions: SessionStore, admin_ids: Iterable[str], create_quiz: CreateQuiz):
        self.sessions = sessions
        self.admin_ids = frozenset(str(admin_id) for admin_id in admin_ids)
        self._create_quiz = create_quiz

    def is_admin(self, user_id) -> bool:
        return str(user_id) in self.admin_ids

    def is_active(self, user_id) -> bool:
        return self.sessions.get(str(user_id)) is not None

    def begin(self, user_id) -> WizardReply:
        """Start a new draft, discarding any unfinished one"""
        user_id = str(user_id)
        if not self.is_admin(user_id):
            return WizardReply(messages.NOT_PERMITTED)

        if self.sessions.get(user_id) is not None:
            logger.info(f"Discarding unfinished quiz draft of {user_id}")

        self.sessions.set(user_id, AwaitingTitle())
        return WizardReply(messages.ASK_TITLE)

    def handle_text(self, user_id, text: str) -> Optional[WizardReply]:
        """
        Advance the draft of user_id with an incoming text

        Returns:
            The reply to send, or None if the user has no active draft
        """
        user_id = str(user_id)
        state = self.sessions.get(user_id)
        if state is None:
            return None

        text = (text or "").strip()

        if isinstance(state, AwaitingTitle):
            return self._on_title(user_id, text)
        if isinstance(state, AwaitingQuestionText):
            return self._on_question_text(user_id, state, text)
        if isinstance(state, AwaitingOptions):
            return self._on_options(user_id, state, text)
        if isinstance(state, AwaitingCorrectIndex):
            return self._on_correct_index(user_id, state, text)

        raise TypeError(f"Unknown wizard state: {state!r}")

    def finish(self, user_id) -> WizardReply:
        """Explicit finish action (inline button)"""
        user_id = str(user_id)
        state = self.sessions.get(user_id)
        if state is None:
            return WizardReply(messages.NO_ACTIVE_DRAFT)

        questions = getattr(state, "questions", ())
        if not questions:
            return WizardReply(messages.NEED_ONE_QUESTION)

        # A question still being entered is dropped; only saved ones are stored
        return self._finalize(user_id, state.title, questions)

    def _on_title(self, user_id: str, text: str) -> WizardReply:
        if not text:
            return WizardReply(messages.TITLE_REQUIRED)

        self.sessions.set(user_id, AwaitingQuestionText(title=text))
        return WizardReply(messages.ASK_FIRST_QUESTION)

    def _on_question_text(self, user_id: str, state: AwaitingQuestionText, text: str) -> WizardReply:
        if not text:
            if not state.questions:
                return WizardReply(messages.NEED_ONE_QUESTION)
            return self._finalize(user_id, state.title, state.questions)

        self.sessions.set(user_id, AwaitingOptions(
            title=state.title,
            questions=state.questions,
            question_text=text,
        ))
        return WizardReply(messages.ASK_OPTIONS)

    def _on_options(self, user_id: str, state: AwaitingOptions, text: str) -> WizardReply:
        options = parse_options(text)
        if len(options) < MIN_OPTIONS:
            return WizardReply(messages.TOO_FEW_OPTIONS)

        self.sessions.set(user_id, AwaitingCorrectIndex(
            title=state.title,
            questions=state.questions,
            question_text=state.question_text,
            options=tuple(options),
        ))
        return WizardReply(messages.ASK_CORRECT_OPTION.format(count=len(options)))

    def _on_correct_index(self, user_id: str, state: AwaitingCorrectIndex, text: str) -> WizardReply:
        index = parse_correct_option(text, len(state.options))
        if index is None:
            return WizardReply(messages.CORRECT_OPTION_OUT_OF_RANGE.format(count=len(state.options)))

        question = QuestionCreate(
            text=state.question_text,
            options=list(state.options),
            correct_option=index,
        )
        self.sessions.set(user_id, AwaitingQuestionText(
            title=state.title,
            questions=state.questions + (question,),
        ))
        return WizardReply(messages.QUESTION_SAVED, show_finish_button=True)

    def _finalize(self, user_id: str, title: str, questions: Tuple[QuestionCreate, ...]) -> WizardReply:
        # Draft is removed only once the quiz is stored
        quiz_id = self._create_quiz(title, user_id, list(questions))
        self.sessions.delete(user_id)

        logger.info(f"Admin {user_id} finished quiz {quiz_id} with {len(questions)} questions")
        return WizardReply(messages.QUIZ_CREATED.format(quiz_id=quiz_id), quiz_id=quiz_id)
