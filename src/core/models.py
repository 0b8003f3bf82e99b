"""Core domain models.

These types are shared across the core and adapters to avoid tight coupling
to any CI-platform-specific result or changelog objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional


class BuildOutcome(Enum):
    """Closed set of build results, ordered from best to worst."""

    SUCCESS = ("SUCCESS", 0)
    UNSTABLE = ("UNSTABLE", 1)
    FAILURE = ("FAILURE", 2)
    OTHER = ("NOT_BUILT", 3)
    ABORTED = ("ABORTED", 4)

    def __init__(self, text: str, ordinal: int) -> None:
        self.text = text
        self.ordinal = ordinal

    def __str__(self) -> str:
        return self.text

    def is_better_than(self, other: "BuildOutcome") -> bool:
        return self.ordinal < other.ordinal

    def is_worse_than(self, other: "BuildOutcome") -> bool:
        return self.ordinal > other.ordinal

    @classmethod
    def parse(cls, raw: str) -> "BuildOutcome":
        """Map a result name (case-insensitive) to an outcome; unknown names are OTHER."""

        normalized = raw.strip().upper()
        for outcome in cls:
            if normalized in (outcome.name, outcome.text):
                return outcome
        return cls.OTHER


@dataclass(frozen=True)
class ChangeEntry:
    """One commit reported by source control."""

    author: str
    message: str


@dataclass(frozen=True)
class ChangeSet:
    """Changes since the previous build.

    ``entries`` may be a lazy iterable backed by a source-control
    collaborator, so walking it can raise.
    """

    computed: bool
    entries: Iterable[ChangeEntry] = ()


@dataclass(frozen=True)
class BuildEvent:
    """Everything the notifier needs to know about one finished build."""

    outcome: BuildOutcome
    previous_outcome: Optional[BuildOutcome]
    display_name: str
    project_name: str
    build_url: str
    changes: ChangeSet
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedTarget:
    """Final composed message and where it goes."""

    stream: str
    title: str
    body: str
