"""PoliticalIntrigue — royal guard recruitment and court plots.

Plot lifecycle: formed by disloyal court members, advanced every tick,
then either discovered (conspirators expelled) or executed (kingdom
penalised).  Both outcomes remove the plot and clear the plotting flags.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from worldsim.core.enums import CourtFaction, Domain, PlotKind
from worldsim.core.kingdom import CourtMember, Plot, RoyalGuard

if TYPE_CHECKING:
    from worldsim.config import SimulationConfig
    from worldsim.core.kingdom import Kingdom
    from worldsim.core.models import Actor
    from worldsim.core.world_state import WorldView
    from worldsim.systems.rng import SimRandom
    from worldsim.utils.event_log import SafeAnnouncer

logger = logging.getLogger(__name__)


COURT_ROLES: tuple[str, ...] = ("Royal Advisor", "Court Steward", "Marshal", "Spymaster", "Treasurer")
COURT_TITLES: tuple[str, ...] = ("Lord", "Lady", "Sir", "Baron", "Countess", "Duke", "Duchess")
COURT_SURNAMES: tuple[str, ...] = (
    "Blackwood", "Ashford", "Ironside", "Goldstein", "Silverhart",
    "Ravencroft", "Thornwood", "Nightingale", "Stormwind", "Darkhaven",
)

_PLOT_KINDS: tuple[PlotKind, ...] = tuple(PlotKind)
_FACTIONS: tuple[CourtFaction, ...] = tuple(CourtFaction)


class PoliticalIntrigue:
    """Runs the royal court's per-tick politics against a ``Kingdom``."""

    __slots__ = ("_config", "_rng", "_news", "_world", "kingdom")

    def __init__(
        self,
        config: SimulationConfig,
        rng: SimRandom,
        news: SafeAnnouncer,
        world: WorldView,
        kingdom: Kingdom,
    ) -> None:
        self._config = config
        self._rng = rng
        self._news = news
        self._world = world
        self.kingdom = kingdom

    # ------------------------------------------------------------------
    # Per-tick pass
    # ------------------------------------------------------------------

    def update(self) -> None:
        """Recruitment, intrigue and plot progression; never raises."""
        try:
            king = self.kingdom
            if not king.is_active:
                return
            cfg = self._config
            if len(king.guards) < cfg.max_guards and self._rng.chance(Domain.POLITICS, cfg.guard_recruitment_chance):
                self.recruit_guard()
            if self._rng.chance(Domain.POLITICS, cfg.intrigue_chance):
                self.process_intrigue()
            for plot in list(king.active_plots):
                self.advance_plot(plot)
        except Exception:
            logger.exception("Error processing court politics")

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def guard_candidates(self) -> list[Actor]:
        """Top three eligible actors by level."""
        king = self.kingdom

        def eligible(a: Actor) -> bool:
            p = a.personality
            return (
                a.alive and a.level >= 5 and a.days_in_prison <= 0
                and not a.team and not a.is_king and not a.is_story_npc
                and not king.has_guard(a.id)
                and p is not None and (p.trustworthiness > 0.5 or p.loyalty > 0.6)
            )

        pool = sorted(self._world.filter(eligible), key=lambda a: a.level, reverse=True)
        return pool[:3]

    def recruit_guard(self) -> RoyalGuard | None:
        king = self.kingdom
        cfg = self._config
        candidates = self.guard_candidates()
        if not candidates:
            return None
        applicant = self._rng.choice(Domain.POLITICS, candidates)
        if king.treasury < cfg.guard_recruitment_cost:
            logger.debug("Treasury too low to recruit %s (%d)", applicant.name, king.treasury)
            return None

        guard = RoyalGuard(
            name=applicant.name,
            daily_salary=cfg.base_guard_salary,
            loyalty=self._rng.randint(Domain.POLITICS, 70, 100),
            actor_id=applicant.id,
        )
        king.guards.append(guard)
        king.treasury -= cfg.guard_recruitment_cost
        self._news.announce(False, f"{applicant.name} has joined the Royal Guard!")
        logger.info("Royal guard recruited: %s (treasury %d)", applicant.name, king.treasury)
        return guard

    # ------------------------------------------------------------------
    # Court
    # ------------------------------------------------------------------

    def court_member_name(self) -> str:
        """Random "Title Surname" that nobody at court already carries.

        Plots refer to conspirators by name, so names must stay unique.
        """
        taken = {m.name for m in self.kingdom.court_members}
        for _ in range(10):
            name = f"{self._rng.choice(Domain.POLITICS, COURT_TITLES)} {self._rng.choice(Domain.POLITICS, COURT_SURNAMES)}"
            if name not in taken:
                return name
        for title in COURT_TITLES:
            for surname in COURT_SURNAMES:
                name = f"{title} {surname}"
                if name not in taken:
                    return name
        return name

    def initialize_court(self) -> None:
        for role in COURT_ROLES:
            self.kingdom.court_members.append(CourtMember(
                name=self.court_member_name(),
                role=role,
                faction=self._rng.choice(Domain.POLITICS, _FACTIONS),
                influence=self._rng.randint(Domain.POLITICS, 40, 80),
                loyalty_to_ruler=self._rng.randint(Domain.POLITICS, 50, 90),
            ))
        logger.info("Court initialised with %d members", len(self.kingdom.court_members))

    def drift_loyalty(self) -> None:
        for member in self.kingdom.court_members:
            delta = self._rng.randint(Domain.POLITICS, -3, 2)
            member.loyalty_to_ruler = max(0, min(100, member.loyalty_to_ruler + delta))

    def process_intrigue(self) -> Plot | None:
        """Initialise the court if needed, drift loyalty, maybe hatch a plot."""
        king = self.kingdom
        cfg = self._config
        if not king.court_members:
            self.initialize_court()
        self.drift_loyalty()

        unhappy = [
            m for m in king.court_members
            if m.loyalty_to_ruler < cfg.plot_loyalty_threshold and not m.is_plotting
        ]
        if len(unhappy) < 2 or len(king.active_plots) >= cfg.max_active_plots:
            return None

        count = self._rng.randint(Domain.POLITICS, 2, min(4, len(unhappy)))
        conspirators = unhappy[:count]
        plot = Plot(
            kind=self._rng.choice(Domain.POLITICS, _PLOT_KINDS),
            conspirators=[m.name for m in conspirators],
            target=king.ruler,
            progress=self._rng.randint(Domain.POLITICS, 10, 30),
        )
        king.active_plots.append(plot)
        for member in conspirators:
            member.is_plotting = True
        logger.info("New %s plot by %s", plot.kind.value, ", ".join(plot.conspirators))
        return plot

    # ------------------------------------------------------------------
    # Plots
    # ------------------------------------------------------------------

    def advance_plot(self, plot: Plot) -> None:
        if plot.discovered:
            return
        plot.progress += self._rng.randint(Domain.POLITICS, 5, 15)

        discovery = 0.02 + len(plot.conspirators) * 0.01
        if self._rng.chance(Domain.POLITICS, discovery):
            self.discover_plot(plot)
            return
        if plot.progress >= 100:
            self.execute_plot(plot)

    def discover_plot(self, plot: Plot, discovered_by: str = "Royal Spymaster") -> None:
        king = self.kingdom
        plot.discovered = True
        plot.discovered_by = discovered_by
        for name in plot.conspirators:
            member = king.court_member(name)
            if member is not None:
                member.is_plotting = False
                king.court_members.remove(member)
        self._news.announce(
            True, f"A {plot.kind.value.lower()} plot against {king.styled_ruler} was discovered!")
        logger.info("%s plot discovered by %s", plot.kind.value, discovered_by)
        self._remove(plot)

    def execute_plot(self, plot: Plot) -> None:
        king = self.kingdom
        ruler = king.styled_ruler
        if plot.kind is PlotKind.ASSASSINATION:
            king.treasury //= 2
            self._news.announce(
                True, f"ASSASSINATION ATTEMPT! {ruler} narrowly survived an assassination plot!")
        elif plot.kind is PlotKind.COUP:
            king.treasury = max(0, king.treasury - 10000)
            deserters = [g for g in king.guards if g.loyalty < 50]
            king.guards = [g for g in king.guards if g.loyalty >= 50]
            self._news.announce(
                True, f"COUP ATTEMPT! {len(deserters)} guards joined the conspiracy against {ruler}!")
        elif plot.kind is PlotKind.SCANDAL:
            king.tax_rate = max(0, king.tax_rate - 10)
            self._news.announce(True, f"SCANDAL! Shocking revelations about {ruler} rock the kingdom!")
        elif plot.kind is PlotKind.SABOTAGE:
            king.treasury = max(0, king.treasury - 5000)
            king.magic_budget = max(0, king.magic_budget - 2000)
            self._news.announce(True, "SABOTAGE! The royal treasury has been plundered!")

        for name in plot.conspirators:
            member = king.court_member(name)
            if member is not None:
                member.is_plotting = False
        logger.info("%s plot executed against %s", plot.kind.value, ruler)
        self._remove(plot)

    def _remove(self, plot: Plot) -> None:
        self.kingdom.active_plots = [p for p in self.kingdom.active_plots if p is not plot]
