"""The live actor roster owned by the host, and the read-only world view over it."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from worldsim.core.models import Actor


class Roster:
    """Mutable list of active actors.

    Loading a save replaces the underlying list wholesale via ``replace()``;
    anything that held on to the old list would then see stale actors, which
    is why ``WorldView`` never stores the list itself.
    """

    __slots__ = ("_actors",)

    def __init__(self, actors: Iterable[Actor] | None = None) -> None:
        self._actors: list[Actor] = list(actors or [])

    @property
    def actors(self) -> list[Actor]:
        return self._actors

    def add(self, actor: Actor) -> None:
        self._actors.append(actor)

    def remove(self, actor_id: str) -> Actor | None:
        for i, a in enumerate(self._actors):
            if a.id == actor_id:
                return self._actors.pop(i)
        return None

    def replace(self, actors: Iterable[Actor]) -> None:
        self._actors = list(actors)

    def __len__(self) -> int:
        return len(self._actors)


@dataclass(slots=True)
class TeamInfo:
    """Summary of a team derived by grouping actors on their team name."""

    name: str
    members: list[Actor] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def total_power(self) -> int:
        return sum(m.power for m in self.members)

    @property
    def average_level(self) -> int:
        if not self.members:
            return 0
        return sum(m.level for m in self.members) // len(self.members)

    @property
    def controls_turf(self) -> bool:
        return any(m.controls_turf for m in self.members)


class WorldView:
    """Read-mostly accessor over the current roster.

    Every call re-reads ``provider()`` so a roster swapped by a load is
    visible immediately; nothing here is cached between calls.
    """

    __slots__ = ("_provider",)

    def __init__(self, provider: Callable[[], Sequence[Actor]]) -> None:
        self._provider = provider

    @classmethod
    def of(cls, roster: Roster) -> WorldView:
        return cls(lambda: roster.actors)

    def all(self) -> list[Actor]:
        return list(self._provider())

    def all_alive(self) -> list[Actor]:
        return [a for a in self._provider() if a.alive]

    def all_dead(self) -> list[Actor]:
        return [a for a in self._provider() if not a.alive]

    def get_by_id(self, actor_id: str) -> Actor | None:
        for a in self._provider():
            if a.id == actor_id:
                return a
        return None

    def filter(self, predicate: Callable[[Actor], bool]) -> list[Actor]:
        return [a for a in self._provider() if predicate(a)]

    def at_location(self, location: str, exclude: Actor | None = None) -> list[Actor]:
        return [
            a for a in self._provider()
            if a.alive and a.location == location and a is not exclude
        ]

    def teams(self) -> dict[str, TeamInfo]:
        """Living actors grouped by team name."""
        groups: dict[str, TeamInfo] = {}
        for a in self._provider():
            if a.team and a.alive:
                groups.setdefault(a.team, TeamInfo(name=a.team)).members.append(a)
        return groups

    def team_members(self, team: str) -> list[Actor]:
        if not team:
            return []
        return [a for a in self._provider() if a.team == team and a.alive]

    def teams_at_location(self, location: str) -> dict[str, list[Actor]]:
        groups: dict[str, list[Actor]] = defaultdict(list)
        for a in self._provider():
            if a.team and a.alive and a.location == location:
                groups[a.team].append(a)
        return dict(groups)
