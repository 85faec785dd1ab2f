"""
In-memory drill sessions.

A session owns the current question so the canonical answer never has to
leave the server, counts the streak of consecutive correct answers and times
the run. A wrong answer resets both the streak and the timer.

Sessions idle for longer than the registry's TTL are dropped, and the oldest
ones are evicted once the registry is full.
"""

from __future__ import annotations

import math
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from catalog import LevelDefinition
from checker import check_answer, format_answer
from generator import FractionAnswer, Question

DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_MAX_SESSIONS = 1000


class SessionFinished(RuntimeError):
    pass


@dataclass
class AnswerOutcome:
    correct: bool
    expected: Optional[str]
    streak: int
    complete: bool
    elapsed_seconds: Optional[int] = None


@dataclass
class DrillSession:
    level: LevelDefinition
    required_streak: int
    clock: Callable[[], float] = time.monotonic
    rng: Any = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    streak: int = 0
    started_at: float = 0.0
    last_seen: float = 0.0
    question: Optional[Question] = None
    finished: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.started_at = self.last_seen = self.clock()
        self.next_question()

    def next_question(self) -> Question:
        self.question = self.level.generate(rng=self.rng)
        return self.question

    def touch(self) -> None:
        self.last_seen = self.clock()

    @property
    def expects_fraction(self) -> bool:
        return self.question is not None and isinstance(self.question.answer, FractionAnswer)

    def elapsed_seconds(self) -> int:
        # whole seconds, like the on-screen timer
        return int(math.floor(self.clock() - self.started_at))

    def answer(self, user_answer: Any) -> AnswerOutcome:
        # requests for one session may arrive on different worker threads
        with self._lock:
            if self.finished or self.question is None:
                raise SessionFinished("session already finished")
            self.touch()

            correct = check_answer(user_answer, self.question, self.level.family)
            if correct:
                self.streak += 1
                if self.streak >= self.required_streak:
                    self.finished = True
                    return AnswerOutcome(
                        correct=True,
                        expected=None,
                        streak=self.streak,
                        complete=True,
                        elapsed_seconds=self.elapsed_seconds(),
                    )
                self.next_question()
                return AnswerOutcome(correct=True, expected=None, streak=self.streak, complete=False)

            expected = format_answer(self.question.answer)
            self.streak = 0
            self.started_at = self.clock()
            self.next_question()
            return AnswerOutcome(correct=False, expected=expected, streak=0, complete=False)


class SessionRegistry:
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        rng: Any = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self.clock = clock
        self.rng = rng
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._sessions: Dict[str, DrillSession] = {}
        self._lock = threading.Lock()

    def _prune(self) -> None:
        """Drop idle sessions. Caller holds the lock."""
        cutoff = self.clock() - self.ttl_seconds
        for sid in [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]:
            del self._sessions[sid]

    def start(self, level: LevelDefinition, required_streak: int) -> DrillSession:
        s = DrillSession(level=level, required_streak=required_streak, clock=self.clock, rng=self.rng)
        with self._lock:
            self._prune()
            while len(self._sessions) >= self.max_sessions:
                oldest = min(self._sessions.values(), key=lambda x: x.last_seen)
                del self._sessions[oldest.id]
            self._sessions[s.id] = s
        return s

    def get(self, session_id: str) -> Optional[DrillSession]:
        with self._lock:
            self._prune()
            s = self._sessions.get(session_id)
            if s is not None:
                s.touch()
            return s

    def discard(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
