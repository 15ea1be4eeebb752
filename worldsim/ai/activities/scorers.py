"""Built-in ActivityScorer implementations.

Each class is a self-contained weighting unit.  To add a new activity:
  1. Create a new ActivityScorer subclass here (or in a separate file).
  2. Register it in ``registry.py``.
  3. Add a handler for its ActivityKind in ``engine/activities.py``.
"""

from __future__ import annotations

from worldsim.ai.activities.base import ActivityContext, ActivityScorer, experience_for_level
from worldsim.core.enums import ActivityKind


class DungeonActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.DUNGEON

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        return 0.25 if a.hp > a.max_hp * 0.7 and a.level >= 1 else 0.0


class ShopActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.SHOP

    def weight(self, ctx: ActivityContext) -> float:
        return 0.20 if ctx.actor.gold > 100 else 0.0


class TrainActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.TRAIN

    def weight(self, ctx: ActivityContext) -> float:
        return 0.15 if ctx.actor.gold > 50 else 0.0


class LevelUpActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.LEVEL_UP

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        if a.level < ctx.config.max_level and a.experience >= experience_for_level(a.level + 1):
            return 0.30
        return 0.0


class HealActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.HEAL

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        return 0.35 if a.hp < a.max_hp * 0.5 else 0.0


class WanderActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.WANDER

    def weight(self, ctx: ActivityContext) -> float:
        return 0.10


class LoveStreetActivity(ActivityScorer):
    """Romantic, less committed actors with spare gold."""

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.LOVE_STREET

    def weight(self, ctx: ActivityContext) -> float:
        p = ctx.actor.personality
        if ctx.actor.gold <= 500 or p is None:
            return 0.0
        return 0.05 + p.romanticism * 0.10 + (1.0 - p.commitment) * 0.05


class TempleActivity(ActivityScorer):
    """Honourable, peaceful, wise or pious actors visit more often."""

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.TEMPLE

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        p = a.personality
        if p is None:
            return 0.0
        w = 0.05
        if a.chivalry > a.darkness:
            w += 0.08
        w += (1.0 - p.aggression) * 0.05
        if a.wisdom > 50:
            w += 0.05
        w += p.piety * 0.05
        return w


class BankActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.BANK

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        if not (a.gold > 1000 or (a.bank_gold > 0 and a.gold < 100)):
            return 0.0
        w = 0.10
        if a.personality is not None:
            w += a.personality.greed * 0.08
        if a.gold > 5000:
            w += 0.10
        return w


class GoHomeActivity(ActivityScorer):
    """Only for actors partnered with the player."""

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.GO_HOME

    def weight(self, ctx: ActivityContext) -> float:
        if ctx.partner_status not in ("spouse", "lover"):
            return 0.0
        w = 0.35 if ctx.partner_status == "spouse" else 0.20
        p = ctx.actor.personality
        if p is not None:
            w += p.romanticism * 0.15 + p.commitment * 0.10
        return w


class MarketplaceActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.MARKETPLACE

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        if a.gold <= 200 and not a.market_inventory:
            return 0.0
        w = 0.12
        if a.personality is not None:
            w += a.personality.greed * 0.06
        if len(a.market_inventory) > 2:
            w += 0.05
        return w


class CastleActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.CASTLE

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        if a.level < 5 or a.chivalry <= a.darkness:
            return 0.0
        w = 0.05 + min(0.10, a.chivalry / 1000)
        if a.level >= 10:
            w += 0.05
        return w


class TeamRecruitActivity(ActivityScorer):
    """Unaffiliated joiners look for a team; members look for recruits."""

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.TEAM_RECRUIT

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        if a.team:
            return 0.10
        if a.personality is not None and a.personality.likely_to_join_gang():
            return 0.15
        return 0.0


class TeamDungeonActivity(ActivityScorer):

    @property
    def kind(self) -> ActivityKind:
        return ActivityKind.TEAM_DUNGEON

    def weight(self, ctx: ActivityContext) -> float:
        a = ctx.actor
        return 0.20 if a.team and a.hp > a.max_hp * 0.6 else 0.0
