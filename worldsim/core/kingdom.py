"""Royal court state: ruler, treasury, guards, court members, plots."""

from __future__ import annotations

from dataclasses import dataclass, field

from worldsim.core.enums import CourtFaction, PlotKind


@dataclass(slots=True)
class RoyalGuard:
    name: str
    daily_salary: int
    loyalty: int = 80
    is_active: bool = True
    actor_id: str = ""


@dataclass(slots=True)
class CourtMember:
    name: str
    role: str
    faction: CourtFaction
    influence: int = 50
    loyalty_to_ruler: int = 70
    is_plotting: bool = False


@dataclass(slots=True)
class Plot:
    """A multi-tick conspiracy against the ruler.

    Lives in ``Kingdom.active_plots`` from formation until it is either
    discovered or executed; both outcomes remove it.
    """

    kind: PlotKind
    conspirators: list[str]
    target: str
    progress: int = 0
    discovered: bool = False
    discovered_by: str = ""


@dataclass(slots=True)
class Kingdom:
    ruler: str = "Aldric"
    title: str = "King"
    is_active: bool = True
    treasury: int = 50000
    tax_rate: int = 20
    magic_budget: int = 10000
    guards: list[RoyalGuard] = field(default_factory=list)
    court_members: list[CourtMember] = field(default_factory=list)
    active_plots: list[Plot] = field(default_factory=list)

    def has_guard(self, actor_id: str) -> bool:
        """Guards are matched by actor id; display names repeat across the town."""
        return any(g.actor_id == actor_id for g in self.guards)

    def court_member(self, name: str) -> CourtMember | None:
        for m in self.court_members:
            if m.name == name:
                return m
        return None

    @property
    def styled_ruler(self) -> str:
        return f"{self.title} {self.ruler}"
