"""Shared state behind the in-memory repositories."""

from dataclasses import dataclass, field
from datetime import datetime

from steno.domain.model import Case, DebtorProfile, DemandLetter, Session, User
from steno.domain.value import CaseId, LetterId, SessionId, UserId


@dataclass
class InMemoryStore:
    """One store per container, so every request sees the same records.

    Repositories never await between reading and writing a record, which
    makes each operation atomic within one event loop.
    """

    cases: dict[CaseId, Case] = field(default_factory=dict)
    letters: dict[LetterId, DemandLetter] = field(default_factory=dict)
    users: dict[UserId, User] = field(default_factory=dict)
    profiles: dict[CaseId, DebtorProfile] = field(default_factory=dict)
    sessions: dict[SessionId, Session] = field(default_factory=dict)
    consumed_grants: dict[str, datetime] = field(default_factory=dict)
