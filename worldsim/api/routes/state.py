"""GET /api/v1/state, /actors, /teams, /court, /respawns, /events — live world data."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from worldsim.api.dependencies import get_engine_manager
from worldsim.api.engine_manager import EngineManager
from worldsim.api.schemas import (
    ActorDetail,
    ActorSummary,
    CourtMemberSchema,
    CourtResponse,
    EventSchema,
    GuardSchema,
    PersonalitySchema,
    PlotSchema,
    RespawnEntry,
    TeamSchema,
    WorldStateResponse,
)

router = APIRouter()


def _serialize_summary(a) -> ActorSummary:
    return ActorSummary(
        id=a.id, name=a.name, level=a.level, hp=a.hp, max_hp=a.max_hp,
        alive=a.alive, location=a.location, gold=a.gold, team=a.team,
        activity=a.activity,
    )


def _serialize_personality(p) -> PersonalitySchema | None:
    if p is None:
        return None
    return PersonalitySchema(
        aggression=p.aggression, greed=p.greed, loyalty=p.loyalty,
        trustworthiness=p.trustworthiness, ambition=p.ambition,
        romanticism=p.romanticism, commitment=p.commitment,
        sociability=p.sociability, piety=p.piety, impulsiveness=p.impulsiveness,
    )


def _serialize_detail(a) -> ActorDetail:
    return ActorDetail(
        id=a.id, name=a.name, level=a.level, hp=a.hp, max_hp=a.max_hp,
        alive=a.alive, location=a.location, gold=a.gold, team=a.team,
        activity=a.activity, experience=a.experience,
        strength=a.strength, defence=a.defence, agility=a.agility,
        wisdom=a.wisdom, charisma=a.charisma,
        weapon_power=a.weapon_power, armor_power=a.armor_power,
        bank_gold=a.bank_gold,
        equipped={slot.value: item_id for slot, item_id in a.equipped.items()},
        market_inventory=[item.name for item in a.market_inventory],
        controls_turf=a.controls_turf,
        gang_id=a.gang_id,
        gang_members=list(a.gang_members),
        relationships=dict(a.relationships),
        enemies=sorted(a.enemies),
        chivalry=a.chivalry, darkness=a.darkness, loyalty=a.loyalty,
        bank_guard=a.bank_guard,
        personality=_serialize_personality(a.personality),
    )


@router.get("/state", response_model=WorldStateResponse)
def get_state(manager: EngineManager = Depends(get_engine_manager)) -> WorldStateResponse:
    with manager.lock:
        actors = manager.world.all()
        alive = sum(1 for a in actors if a.alive)
        sim = manager.simulator
        return WorldStateResponse(
            tick=sim.tick,
            running=manager.running,
            actor_count=len(actors),
            alive_count=alive,
            dead_count=len(actors) - alive,
            team_count=len(manager.world.teams()),
            turf_holder=sim.social.turf_holder(),
            respawn_queue=len(sim.respawn),
            status=sim.status(),
        )


@router.get("/actors", response_model=list[ActorSummary])
def list_actors(
    location: str | None = Query(None, description="Only actors at this location"),
    alive: bool | None = Query(None, description="Filter on alive state"),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[ActorSummary]:
    with manager.lock:
        actors = manager.world.all()
        if location is not None:
            actors = [a for a in actors if a.location == location]
        if alive is not None:
            actors = [a for a in actors if a.alive == alive]
        return [_serialize_summary(a) for a in actors]


@router.get("/actors/{actor_id}", response_model=ActorDetail)
def get_actor(actor_id: str, manager: EngineManager = Depends(get_engine_manager)) -> ActorDetail:
    with manager.lock:
        actor = manager.world.get_by_id(actor_id)
        if actor is None:
            raise HTTPException(status_code=404, detail=f"Actor {actor_id} not found")
        return _serialize_detail(actor)


@router.get("/teams", response_model=list[TeamSchema])
def list_teams(manager: EngineManager = Depends(get_engine_manager)) -> list[TeamSchema]:
    with manager.lock:
        return [
            TeamSchema(
                name=t.name,
                member_count=t.member_count,
                total_power=t.total_power,
                average_level=t.average_level,
                controls_turf=t.controls_turf,
                members=[m.name for m in t.members],
            )
            for t in manager.simulator.active_teams()
        ]


@router.get("/court", response_model=CourtResponse)
def get_court(manager: EngineManager = Depends(get_engine_manager)) -> CourtResponse:
    with manager.lock:
        k = manager.kingdom
        return CourtResponse(
            ruler=k.ruler,
            title=k.title,
            treasury=k.treasury,
            tax_rate=k.tax_rate,
            magic_budget=k.magic_budget,
            guards=[GuardSchema(actor_id=g.actor_id, name=g.name, daily_salary=g.daily_salary, loyalty=g.loyalty) for g in k.guards],
            court_members=[
                CourtMemberSchema(
                    name=m.name, role=m.role, faction=m.faction.value,
                    influence=m.influence, loyalty_to_ruler=m.loyalty_to_ruler,
                    is_plotting=m.is_plotting,
                )
                for m in k.court_members
            ],
            active_plots=[
                PlotSchema(kind=p.kind.value, conspirators=list(p.conspirators), target=p.target, progress=p.progress)
                for p in k.active_plots
            ],
        )


@router.get("/respawns", response_model=list[RespawnEntry])
def list_respawns(manager: EngineManager = Depends(get_engine_manager)) -> list[RespawnEntry]:
    with manager.lock:
        entries = []
        for actor_id, ticks in sorted(manager.simulator.respawn.queue.items()):
            actor = manager.world.get_by_id(actor_id)
            entries.append(RespawnEntry(
                actor_id=actor_id,
                name=actor.name if actor else "",
                ticks_remaining=ticks,
            ))
        return entries


@router.get("/events", response_model=list[EventSchema])
def list_events(
    since_tick: int | None = Query(None, ge=0, description="Only events from this tick on"),
    limit: int = Query(50, ge=1, le=500),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    feed = manager.feed
    events = feed.since_tick(since_tick) if since_tick is not None else feed.latest(limit)
    return [
        EventSchema(seq=e.seq, tick=e.tick, significant=e.significant, message=e.message)
        for e in events[-limit:]
    ]
