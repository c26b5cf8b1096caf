from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Union

import pytest

from core.localization.templates import TemplateStore
from core.synthesis.response_engine import ResponseSynthesisEngine
from exceptions.exceptions import PersistenceError
from runtime.agents.dialogue_controller import DialogueController
from runtime.models.session_models import Message, MessageKind, Session, Turn, UserProfile
from runtime.store.cache_service import CacheService
from runtime.store.log_store import ContextLog
from runtime.store.profile_store import ProfileStore
from runtime.store.session_store import SessionStore


Outcome = Union[str, BaseException]


class ScriptedOracle:
    """Oracle stub that plays back a script of replies / exceptions."""

    def __init__(self, outcomes: Sequence[Outcome] = (), default: str = "Drink plenty of water.") -> None:
        self.outcomes: List[Outcome] = list(outcomes)
        self.default = default
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeClock:
    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingSessionStore(SessionStore):
    """Session store whose backing storage is down for reads and/or writes."""

    def __init__(self, cache: CacheService, fail_reads: bool = True, fail_writes: bool = True) -> None:
        super().__init__(cache=cache)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def get_session(self, user_id: str) -> Optional[Session]:
        if self.fail_reads:
            raise PersistenceError("read", f"session:{user_id}", OSError("storage offline"))
        return await super().get_session(user_id)

    async def put_session(self, session: Session) -> Session:
        if self.fail_writes:
            raise PersistenceError("write", f"session:{session.user_id}", OSError("storage offline"))
        return await super().put_session(session)


class FailingProfileStore(ProfileStore):
    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        raise PersistenceError("read", f"profile:{user_id}", OSError("storage offline"))

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        raise PersistenceError("write", f"profile:{profile.user_id}", OSError("storage offline"))


class FailingContextLog(ContextLog):
    async def append_turn(self, turn: Turn) -> None:
        raise PersistenceError("append", f"turns:{turn.user_id}", OSError("disk full"))

    async def get_recent_turns(self, user_id: str, n: int) -> List[Turn]:
        raise PersistenceError("read", f"turns:{user_id}", OSError("disk full"))


async def no_sleep(_: float) -> None:
    return None


def text_message(content: str) -> Message:
    return Message(content=content, kind=MessageKind.TEXT)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> CacheService:
    return CacheService(clock=clock)


@pytest.fixture
def oracle() -> ScriptedOracle:
    return ScriptedOracle()


@pytest.fixture
def templates() -> TemplateStore:
    return TemplateStore()


@pytest.fixture
def make_engine():
    def factory(oracle, **kwargs) -> ResponseSynthesisEngine:
        kwargs.setdefault("max_retries", 3)
        kwargs.setdefault("retry_delay", 0.0)
        kwargs.setdefault("backoff", "fixed")
        kwargs.setdefault("timeout", 5.0)
        kwargs.setdefault("emergency_number", "108")
        kwargs.setdefault("sleep", no_sleep)
        return ResponseSynthesisEngine(oracle, **kwargs)

    return factory


@pytest.fixture
def make_controller(cache: CacheService, oracle: ScriptedOracle, make_engine):
    """Build a controller over in-memory stores; any collaborator can be swapped."""

    def factory(
        session_store: Optional[SessionStore] = None,
        profile_store: Optional[ProfileStore] = None,
        context_log: Optional[ContextLog] = None,
        engine: Optional[ResponseSynthesisEngine] = None,
        templates: Optional[TemplateStore] = None,
    ) -> DialogueController:
        return DialogueController(
            session_store=session_store or SessionStore(cache=cache, ttl=timedelta(hours=24)),
            profile_store=profile_store or ProfileStore(),
            context_log=context_log or ContextLog(),
            engine=engine or make_engine(oracle),
            templates=templates or TemplateStore(),
            context_window=5,
            default_language="en",
            emergency_number="108",
        )

    return factory


@pytest.fixture
def controller(make_controller) -> DialogueController:
    return make_controller()
