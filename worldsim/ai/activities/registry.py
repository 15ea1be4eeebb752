"""Activity scorer registration.

Call ``register_all_activities()`` once at import time to populate
ACTIVITY_REGISTRY.  Registration order is the order of the cumulative walk.
"""

from __future__ import annotations

from worldsim.ai.activities.base import register_activity
from worldsim.ai.activities.scorers import (
    BankActivity,
    CastleActivity,
    DungeonActivity,
    GoHomeActivity,
    HealActivity,
    LevelUpActivity,
    LoveStreetActivity,
    MarketplaceActivity,
    ShopActivity,
    TeamDungeonActivity,
    TeamRecruitActivity,
    TempleActivity,
    TrainActivity,
    WanderActivity,
)

_registered = False


def register_all_activities() -> None:
    """Register all built-in activity scorers (idempotent)."""
    global _registered
    if _registered:
        return
    _registered = True

    register_activity(DungeonActivity())
    register_activity(ShopActivity())
    register_activity(TrainActivity())
    register_activity(LevelUpActivity())
    register_activity(HealActivity())
    register_activity(WanderActivity())
    register_activity(LoveStreetActivity())
    register_activity(TempleActivity())
    register_activity(BankActivity())
    register_activity(GoHomeActivity())
    register_activity(MarketplaceActivity())
    register_activity(CastleActivity())
    register_activity(TeamRecruitActivity())
    register_activity(TeamDungeonActivity())
