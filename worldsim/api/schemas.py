"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel


# --- Actors ---

class PersonalitySchema(BaseModel):
    aggression: float
    greed: float
    loyalty: float
    trustworthiness: float
    ambition: float
    romanticism: float
    commitment: float
    sociability: float
    piety: float
    impulsiveness: float


class ActorSummary(BaseModel):
    id: str
    name: str
    level: int
    hp: int
    max_hp: int
    alive: bool
    location: str
    gold: int
    team: str = ""
    activity: str = ""


class ActorDetail(ActorSummary):
    experience: int
    strength: int
    defence: int
    agility: int
    wisdom: int
    charisma: int
    weapon_power: int
    armor_power: int
    bank_gold: int
    equipped: dict[str, int]
    market_inventory: list[str]
    controls_turf: bool
    gang_id: str | None = None
    gang_members: list[str]
    relationships: dict[str, int]
    enemies: list[str]
    chivalry: int
    darkness: int
    loyalty: int
    bank_guard: bool
    personality: PersonalitySchema | None = None


# --- Teams ---

class TeamSchema(BaseModel):
    name: str
    member_count: int
    total_power: int
    average_level: int
    controls_turf: bool
    members: list[str]


# --- Court ---

class GuardSchema(BaseModel):
    actor_id: str
    name: str
    daily_salary: int
    loyalty: int


class CourtMemberSchema(BaseModel):
    name: str
    role: str
    faction: str
    influence: int
    loyalty_to_ruler: int
    is_plotting: bool


class PlotSchema(BaseModel):
    kind: str
    conspirators: list[str]
    target: str
    progress: int


class CourtResponse(BaseModel):
    ruler: str
    title: str
    treasury: int
    tax_rate: int
    magic_budget: int
    guards: list[GuardSchema]
    court_members: list[CourtMemberSchema]
    active_plots: list[PlotSchema]


# --- Events ---

class EventSchema(BaseModel):
    seq: int
    tick: int
    significant: bool
    message: str


# --- State ---

class WorldStateResponse(BaseModel):
    tick: int
    running: bool
    actor_count: int
    alive_count: int
    dead_count: int
    team_count: int
    turf_holder: str | None = None
    respawn_queue: int
    status: str


class RespawnEntry(BaseModel):
    actor_id: str
    name: str
    ticks_remaining: int


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int


# --- Config ---

class SimulationConfigResponse(BaseModel):
    world_seed: int
    initial_actor_count: int
    tick_interval: float
    default_location: str
    respawn_ticks: int
    load_respawn_ticks: int
    activity_chance: float
    max_team_size: int
    max_gang_size: int
    solo_max_rounds: int
    group_max_rounds: int
    team_max_rounds: int
    max_guards: int
    max_active_plots: int
