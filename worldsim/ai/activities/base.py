"""Base classes for the activity weighting plugin system.

ActivityScorer  — Abstract base class; subclass and implement `weight()`.
ActivityWeight  — A (kind, weight) pair ready for selection.
ActivityPolicy  — Rolls the activity chance, collects weights, selects one.
ACTIVITY_REGISTRY — Module-level list where scorers are registered.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from worldsim.core.enums import ActivityKind, Domain

if TYPE_CHECKING:
    from worldsim.config import SimulationConfig
    from worldsim.core.models import Actor
    from worldsim.core.world_state import WorldView
    from worldsim.systems.rng import SimRandom


# Returns "spouse", "lover" or None for an actor id.
PartnerLookup = Callable[[str], "str | None"]


def experience_for_level(level: int) -> int:
    """Total experience needed to reach *level* (sum of i^1.8 * 50)."""
    if level <= 1:
        return 0
    return sum(int(i ** 1.8 * 50) for i in range(2, level + 1))


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ActivityContext:
    actor: Actor
    world: WorldView
    config: SimulationConfig
    partner_status: str | None = None


@dataclass(frozen=True, slots=True)
class ActivityWeight:
    kind: ActivityKind
    weight: float


# ---------------------------------------------------------------------------
# Abstract scorer
# ---------------------------------------------------------------------------

class ActivityScorer(ABC):
    """Base class for all activity scorers.

    Subclass this and implement:
      - kind:         the ActivityKind this scorer proposes
      - weight(ctx):  additive weight (<= 0 means the activity does not apply)
    """

    @property
    @abstractmethod
    def kind(self) -> ActivityKind:
        """Activity proposed by this scorer."""

    @abstractmethod
    def weight(self, ctx: ActivityContext) -> float:
        """Weight of this activity for the actor in *ctx*."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

ACTIVITY_REGISTRY: list[ActivityScorer] = []


def register_activity(scorer: ActivityScorer) -> ActivityScorer:
    """Register an ActivityScorer instance in the global registry."""
    ACTIVITY_REGISTRY.append(scorer)
    return scorer


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------

class ActivityPolicy:
    """Chooses at most one optional activity per actor per tick.

    Usage::

        policy = ActivityPolicy(config, rng)
        kind = policy.choose_activity(actor, world)

    The policy never mutates the actor; the chosen activity is carried out
    by the activity handlers.
    """

    __slots__ = ("_config", "_rng", "_partners", "_scorers")

    def __init__(
        self,
        config: SimulationConfig,
        rng: SimRandom,
        partners: PartnerLookup | None = None,
        scorers: list[ActivityScorer] | None = None,
    ) -> None:
        self._config = config
        self._rng = rng
        self._partners = partners
        self._scorers = scorers

    def candidates(self, actor: Actor, world: WorldView) -> list[ActivityWeight]:
        """All viable (activity, weight) pairs in registry order."""
        ctx = ActivityContext(
            actor=actor, world=world, config=self._config,
            partner_status=self._partners(actor.id) if self._partners else None,
        )
        scorers = self._scorers if self._scorers is not None else ACTIVITY_REGISTRY
        out: list[ActivityWeight] = []
        for scorer in scorers:
            w = scorer.weight(ctx)
            if w > 0.0:
                out.append(ActivityWeight(scorer.kind, w))
        return out

    @staticmethod
    def select(candidates: list[ActivityWeight], rng_value: float) -> ActivityKind:
        """Walk the cumulative weights with a draw in [0, 1) scaled to the total.

        Falls back to WANDER when nothing qualifies.
        """
        if not candidates:
            return ActivityKind.WANDER
        total = sum(c.weight for c in candidates)
        target = rng_value * total
        cumulative = 0.0
        for c in candidates:
            cumulative += c.weight
            if target < cumulative:
                return c.kind
        return candidates[-1].kind

    def choose_activity(self, actor: Actor, world: WorldView) -> ActivityKind | None:
        """Return an activity for this tick, or None if the actor skips it."""
        if not actor.alive:
            return None
        if not self._rng.chance(Domain.ACTIVITY, self._config.activity_chance):
            return None
        return self.select(self.candidates(actor, world), self._rng.random(Domain.ACTIVITY))
