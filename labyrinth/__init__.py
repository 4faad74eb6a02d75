"""
Labyrinth - Maze Exploration Simulation Core

A deterministic, data-driven engine for a turn-based maze survival game.
Given already-parsed encounter, item and status definitions it provides:
- Weighted distribution of encounters across the rooms of a maze
- Requirement checks for encounter choices
- Audited, clamped application of choice and item effects
- Status effect lifecycle (triggers, stacking, ticking, cures)
"""

__version__ = "0.1.0"
