
"""Cell-maze dungeon generation: the grid model, the growth algorithm and text rendering."""

from .render import render, render_ascii, render_raw
from .world.cells import DIRECTIONS, DOOR_MASK, Cell, opposite
from .world.dungeon_grid import DungeonGrid
from .world.neighbors import neighbor
from .world.procgen import (
    DungeonGenerator,
    GenerationStalled,
    GeneratorConfig,
    generate_dungeon,
)

__all__ = [
    "Cell",
    "DIRECTIONS",
    "DOOR_MASK",
    "DungeonGenerator",
    "DungeonGrid",
    "GenerationStalled",
    "GeneratorConfig",
    "generate_dungeon",
    "neighbor",
    "opposite",
    "render",
    "render_ascii",
    "render_raw",
]
