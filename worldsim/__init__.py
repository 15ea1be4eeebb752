"""Autonomous world simulation engine: NPC actors, teams, gangs and royal court."""

__version__ = "0.1.0"
