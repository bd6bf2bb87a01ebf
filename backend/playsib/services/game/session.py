"""Single-player game loop.

A session cycles spin -> question -> reveal -> spin until the session
countdown runs out. All timing is driven by external once-per-second calls
to :meth:`GameSession.tick`; the session never sleeps, so every pending
timer is cancelled just by flipping state.
"""
import logging
import random
import threading
from typing import Any, Callable, Dict, Optional, Sequence

from playsib.errors import GameError, NotFound
from .countdown import Countdown
from .wheel import CategoryWheel

AWAITING_CATEGORY = 'awaiting_category'
AWAITING_ANSWER = 'awaiting_answer'
REVEALING = 'revealing'
ENDED = 'ended'
# Torn down by its owner; inert for good
CLOSED = 'closed'

QuestionLoader = Callable[[str], Sequence[Any]]
ScoreSubmitter = Callable[[int], Any]
EventCallback = Callable[[str, Dict[str, Any]], None]


def _as_question(raw) -> Dict[str, Any]:
    if isinstance(raw, dict):
        get = raw.get
    else:
        def get(key):
            return getattr(raw, key, None)
    return {
        'id': get('id'),
        'category': get('category'),
        'text': get('text'),
        'options': list(get('options') or []),
        'answer': get('answer'),
    }


class GameSession:
    def __init__(self, categories: Sequence[str], load_questions: QuestionLoader,
                 submit_score: Optional[ScoreSubmitter] = None, *,
                 session_duration: int = 300, question_duration: int = 20,
                 reveal_delay: int = 2, points_per_correct: int = 10,
                 min_spins: int = 4, max_spins: int = 7,
                 rng: Optional[random.Random] = None,
                 on_event: Optional[EventCallback] = None,
                 logger: Optional[logging.Logger] = None):
        self._rng = rng or random.Random()
        self.wheel = CategoryWheel(categories, min_spins=min_spins, max_spins=max_spins, rng=self._rng)
        self._load_questions = load_questions
        self._submit_score = submit_score
        self._on_event = on_event
        self.logger = logger or logging.getLogger(__name__)
        self.points_per_correct = points_per_correct

        self.session_timer = Countdown(session_duration)
        self.question_timer = Countdown(question_duration)
        self.reveal_timer = Countdown(reveal_delay)
        self._lock = threading.RLock()
        self._reset_state()
        self.session_timer.start()

    def _reset_state(self) -> None:
        self.state = AWAITING_CATEGORY
        self.score = 0
        self.category: Optional[str] = None
        self.question: Optional[Dict[str, Any]] = None
        self.last_question_id = None
        self.last_result: Optional[Dict[str, Any]] = None
        self.questions_answered = 0
        self.correct_answers = 0
        self.submitted = False
        self.submission_result = None
        self.submission_error: Optional[str] = None
        self.session_timer.reset()
        self.question_timer.reset()
        self.reveal_timer.reset()

    def _emit(self, name: str, payload: Dict[str, Any]) -> None:
        if self._on_event is not None:
            self._on_event(name, payload)

    @property
    def ended(self) -> bool:
        return self.state == ENDED

    @property
    def closed(self) -> bool:
        return self.state == CLOSED

    # ---- player input ----

    def spin(self):
        """Spin for a category and present one of its questions.

        Returns the SpinResult, or None when a spin is not allowed right now.
        Raises NotFound when the landed category has no active questions; the
        session stays in AWAITING_CATEGORY so the player can spin again.
        """
        with self._lock:
            if self.state != AWAITING_CATEGORY:
                return None
            result = self.wheel.spin()
            if result is None:
                return None
            try:
                pool = [_as_question(q) for q in (self._load_questions(result.category) or [])]
                if not pool:
                    self.logger.info(f"[spin-empty] category={result.category!r} has no active questions")
                    raise NotFound(f"No questions available for category '{result.category}'")
                self.category = result.category
                self._emit('spin', {'rotation': result.rotation, 'index': result.index, 'category': result.category})
                self._present(self._pick(pool))
            finally:
                self.wheel.settle()
            return result

    def _pick(self, pool):
        candidates = pool
        if len(pool) > 1 and self.last_question_id is not None:
            candidates = [q for q in pool if q['id'] != self.last_question_id] or pool
        return self._rng.choice(candidates)

    def _present(self, question: Dict[str, Any]) -> None:
        self.question = question
        self.last_question_id = question['id']
        self.last_result = None
        self.state = AWAITING_ANSWER
        self.question_timer.start()
        self.logger.info(f"[question] id={question['id']} category={question['category']!r}")
        self._emit('question', self.public_question())

    def submit_answer(self, choice: Optional[str]):
        """Grade an answer. An empty choice counts as a timeout.

        Returns ``{correct, answer, score}`` or None if the answer is ignored
        (wrong state, or a choice that is not one of the options).
        """
        with self._lock:
            if self.state != AWAITING_ANSWER or self.question is None:
                return None
            if choice and choice not in self.question['options']:
                self.logger.info(f"[answer-reject] choice={choice!r} is not an option")
                return None
            return self._grade(choice or '')

    def _grade(self, choice: str) -> Dict[str, Any]:
        correct = choice == self.question['answer']
        if correct:
            self.score += self.points_per_correct
            self.correct_answers += 1
        self.questions_answered += 1
        self.question_timer.cancel()
        self.state = REVEALING
        self.reveal_timer.start()
        self.last_result = {
            'correct': correct,
            'answer': self.question['answer'],
            'choice': choice or None,
            'score': self.score,
        }
        self._emit('graded', dict(self.last_result))
        return {'correct': correct, 'answer': self.question['answer'], 'score': self.score}

    # ---- timers ----

    def on_session_tick(self) -> None:
        with self._lock:
            if self.state in (ENDED, CLOSED):
                return
            if self.session_timer.tick():
                self._end()

    def on_question_tick(self) -> None:
        with self._lock:
            if self.state != AWAITING_ANSWER:
                return
            if self.question_timer.tick():
                self.logger.info(f"[question-timeout] id={self.question['id']}")
                self._grade('')

    def on_reveal_tick(self) -> None:
        with self._lock:
            if self.state != REVEALING:
                return
            if self.reveal_timer.tick():
                self.question = None
                self.category = None
                self.state = AWAITING_CATEGORY
                self._emit('category_ready', {'score': self.score})

    def tick(self) -> None:
        """One elapsed second. Session expiry wins over a question timeout."""
        with self._lock:
            self.on_session_tick()
            # Reveal before question so a timeout graded this second gets its full pause
            self.on_reveal_tick()
            self.on_question_tick()

    # ---- lifecycle ----

    def _end(self) -> None:
        self.question_timer.cancel()
        self.reveal_timer.cancel()
        self.session_timer.cancel()
        self.question = None
        self.category = None
        self.state = ENDED
        self.logger.info(f"[session-end] score={self.score} answered={self.questions_answered}")
        self._submit()
        self._emit('ended', {
            'score': self.score,
            'submitted': self.submission_error is None and self._submit_score is not None,
            'submission_error': self.submission_error,
        })

    def _submit(self) -> None:
        if self.submitted or self._submit_score is None:
            return
        self.submitted = True
        try:
            self.submission_result = self._submit_score(self.score)
        except GameError as exc:
            self.submission_error = exc.message
            self.logger.warning(f"[session-submit-failed] score={self.score} error={exc.message}")

    def end(self) -> None:
        """Force the session over now (same path as the timer running out)."""
        with self._lock:
            if self.state not in (ENDED, CLOSED):
                self._end()

    def restart(self) -> None:
        with self._lock:
            if self.state == CLOSED:
                return
            self.wheel.settle()
            self._reset_state()
            self.session_timer.start()
            self.logger.info("[session-restart]")

    def close(self) -> None:
        """Tear down: stop every timer and refuse all further input.

        The in-flight question is dropped ungraded and nothing is submitted.
        """
        with self._lock:
            self.session_timer.cancel()
            self.question_timer.cancel()
            self.reveal_timer.cancel()
            self.wheel.settle()
            self.question = None
            self.category = None
            self.state = CLOSED

    # ---- views ----

    def public_question(self) -> Optional[Dict[str, Any]]:
        if self.question is None:
            return None
        q = dict(self.question)
        # The answer is only revealed after grading
        if self.state != REVEALING:
            q.pop('answer', None)
        return q

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'state': self.state,
                'score': self.score,
                'category': self.category,
                'question': self.public_question(),
                'session_remaining': self.session_timer.remaining,
                'question_remaining': self.question_timer.remaining if self.state == AWAITING_ANSWER else None,
                'last_result': self.last_result,
                'questions_answered': self.questions_answered,
                'correct_answers': self.correct_answers,
                'rotation': self.wheel.rotation,
                'submission_error': self.submission_error,
            }
