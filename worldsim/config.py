"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for the world simulator."""

    # World
    world_seed: int = 42
    initial_actor_count: int = 60
    default_location: str = "Main Street"

    # Timing
    tick_interval: float = 30.0            # Seconds between simulation steps
    shutdown_timeout: float = 5.0

    # Respawn (live deaths vs. actors found dead right after a load)
    respawn_ticks: int = 5
    load_respawn_ticks: int = 2
    respawn_min_hp_base: int = 20
    respawn_min_hp_per_level: int = 10

    # Activities
    activity_chance: float = 0.15
    max_level: int = 100

    # Combat: round caps and variance divisors are independent per mode
    solo_max_rounds: int = 20
    group_max_rounds: int = 25
    team_max_rounds: int = 15
    solo_variance_divisor: int = 2
    group_variance_divisor: int = 3
    team_variance_divisor: int = 4
    group_damage_bonus: float = 1.10       # Party coordination
    group_damage_mitigation: float = 0.85  # Monsters vs. a supporting party
    group_xp_bonus: float = 1.15
    loot_chance: float = 0.20
    boss_chance: float = 0.05

    # Teams
    max_team_size: int = 5
    join_team_chance: float = 0.6
    form_team_chance: float = 0.3
    join_compatibility: float = 0.4
    form_compatibility: float = 0.35
    betrayal_chance: float = 0.01
    betrayal_loyalty_threshold: int = 30
    team_war_chance: float = 0.02
    turf_claim_chance: float = 0.005
    turf_min_power: int = 100

    # Gangs
    max_gang_size: int = 6
    gang_betrayal_chance: float = 0.02
    gang_formation_chance: float = 0.01

    # Rivalries
    rivalry_chance: float = 0.05

    # World events
    world_event_chance: float = 0.05

    # Politics
    guard_recruitment_chance: float = 0.10
    intrigue_chance: float = 0.05
    max_guards: int = 20
    max_active_plots: int = 3
    plot_loyalty_threshold: int = 40
    guard_recruitment_cost: int = 1000
    base_guard_salary: int = 500
    starting_treasury: int = 50000
    starting_tax_rate: int = 20
    starting_magic_budget: int = 10000

    # Logging
    log_level: str = "INFO"
    engine_log_level: str | None = None    # Overrides worldsim.engine only
