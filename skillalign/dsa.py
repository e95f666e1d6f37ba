from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from skillalign.models import DSATopic


def _unique(ids: Iterable[str], exclude: set[str]) -> tuple[str, ...]:
    out = []
    for topic_id in ids:
        if topic_id not in exclude and topic_id not in out:
            out.append(topic_id)
    return tuple(out)


@dataclass(frozen=True)
class DSAProgress:
    """Disjoint completed / in-progress / not-started partition of topic ids."""

    completed: tuple[str, ...] = ()
    in_progress: tuple[str, ...] = ()
    not_started: tuple[str, ...] = ()

    @classmethod
    def from_snapshot(cls, snapshot) -> DSAProgress:
        """Build from ``{completed, inProgress, notStarted}``.

        A topic listed in several sets keeps its most advanced state.
        """
        if not isinstance(snapshot, dict):
            snapshot = {}

        def ids(key: str) -> list[str]:
            value = snapshot.get(key)
            return [str(v) for v in value] if isinstance(value, list) else []

        completed = _unique(ids("completed"), set())
        in_progress = _unique(ids("inProgress"), set(completed))
        not_started = _unique(ids("notStarted"), set(completed) | set(in_progress))
        return cls(completed, in_progress, not_started)

    @classmethod
    def seed(cls, topics: Iterable[DSATopic]) -> DSAProgress:
        return cls(not_started=_unique((t.id for t in topics), set()))

    def to_snapshot(self) -> dict[str, list[str]]:
        return {
            "completed": list(self.completed),
            "inProgress": list(self.in_progress),
            "notStarted": list(self.not_started),
        }

    def status(self, topic_id: str) -> str:
        if topic_id in self.completed:
            return "completed"
        if topic_id in self.in_progress:
            return "in-progress"
        return "not-started"

    def _without(self, topic_id: str) -> DSAProgress:
        return DSAProgress(
            completed=tuple(t for t in self.completed if t != topic_id),
            in_progress=tuple(t for t in self.in_progress if t != topic_id),
            not_started=tuple(t for t in self.not_started if t != topic_id),
        )

    def start(self, topic_id: str) -> DSAProgress:
        if topic_id in self.completed:
            return self
        rest = self._without(topic_id)
        return DSAProgress(rest.completed, rest.in_progress + (topic_id,), rest.not_started)

    def complete(self, topic_id: str) -> DSAProgress:
        rest = self._without(topic_id)
        return DSAProgress(rest.completed + (topic_id,), rest.in_progress, rest.not_started)

    def required_progress_pct(self, topics: Iterable[DSATopic]) -> float:
        required = [t.id for t in topics if t.required]
        if not required:
            return 0.0
        done = sum(1 for topic_id in required if topic_id in self.completed)
        return done / len(required) * 100.0
