# dungeon/world/procgen.py
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import numpy as np
import structlog

try:
    from dungeon_rng import DungeonRNG, RandomSource
except ImportError as e:
    structlog.get_logger().error("CRITICAL: DungeonRNG not found.", error=str(e))
    raise

from dungeon.world.cells import DIRECTIONS, DOOR_MASK, Cell, describe, opposite
from dungeon.world.dungeon_grid import DungeonGrid, new_cell_array
from dungeon.world.neighbors import neighbor

log = structlog.get_logger(__name__)

# --- Configuration ---
DEFAULT_COVERAGE_RATIO = 0.75
DEFAULT_MAX_PASSES = 1000


class GenerationStalled(RuntimeError):
    """Raised when the pass limit runs out before the coverage target is met."""

    def __init__(self, covered: int, area: int, passes: int):
        super().__init__(
            f"Dungeon generation stalled: {covered}/{area} cells discovered "
            f"after {passes} passes"
        )
        self.covered = covered
        self.area = area
        self.passes = passes


@dataclass(frozen=True)
class GeneratorConfig:
    coverage_ratio: float = DEFAULT_COVERAGE_RATIO
    # None means keep sweeping until the target is reached
    max_passes: Optional[int] = DEFAULT_MAX_PASSES

    def __post_init__(self):
        if not 0.0 < self.coverage_ratio <= 1.0:
            raise ValueError(
                f"coverage_ratio must be in (0, 1], got {self.coverage_ratio!r}"
            )
        if self.max_passes is not None and self.max_passes < 1:
            raise ValueError(f"max_passes must be >= 1, got {self.max_passes!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeneratorConfig":
        """Builds a config from a loaded YAML mapping, ignoring unrelated keys."""
        ratio = data.get("coverage_ratio", DEFAULT_COVERAGE_RATIO)
        max_passes = data.get("max_passes", DEFAULT_MAX_PASSES)
        return cls(
            coverage_ratio=float(ratio),
            max_passes=None if max_passes is None else int(max_passes),
        )


class DungeonGenerator:
    """
    Grows a dungeon outward from a random entrance.

    Every discovered cell sits in the frontier. A pass visits the whole
    frontier, including cells appended during that pass; each visited cell
    draws a random subset of doors and opens the chosen ones toward neighbours
    that are not yet used. Passes repeat with fresh draws until the discovered
    share of the grid reaches ``coverage_ratio``.
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[RandomSource] = None,
        config: Optional[GeneratorConfig] = None,
    ):
        self.cells: np.ndarray = new_cell_array(width, height)
        self.width = width
        self.height = height
        self.area = width * height
        self.rng: RandomSource = rng if rng is not None else DungeonRNG()
        self.config = config if config is not None else GeneratorConfig()
        self.frontier: List[int] = []
        self.entrance: Optional[int] = None
        self.passes = 0

    @property
    def covered(self) -> int:
        return len(self.frontier)

    def _place_entrance(self) -> int:
        entrance = self.rng.next_int(0, self.area)
        self.cells[entrance] = int(Cell.ENTRANCE | Cell.USED)
        self.frontier.append(entrance)
        self.entrance = entrance
        log.debug(
            "Placed entrance",
            index=entrance,
            pos=(entrance % self.width, entrance // self.width),
        )
        return entrance

    def _carve_cell(self, index: int) -> None:
        """Opens random doors from ``index`` and records newly discovered neighbours."""
        potential_doors = self.rng.next_int(0, DOOR_MASK + 1)
        for door in DIRECTIONS:
            if int(self.cells[index]) & door:
                continue
            neighbour = neighbor(self.width, self.height, index, door)
            if neighbour is None or int(self.cells[neighbour]) & Cell.USED:
                continue

            facing = opposite(door)
            if potential_doors & door:
                self.cells[index] = int(self.cells[index]) | int(door)
                self.cells[neighbour] = int(self.cells[neighbour]) | int(facing)

            # A cell holding nothing but the door just opened toward it has
            # never been reached before.
            if int(self.cells[neighbour]) == facing:
                self.frontier.append(neighbour)
                log.debug(
                    "Discovered cell",
                    index=neighbour,
                    via=index,
                    value=describe(int(self.cells[neighbour])),
                    covered=self.covered,
                )

    def _run_pass(self) -> None:
        position = 0
        # The frontier grows while it is walked; new entries join this pass.
        while position < len(self.frontier):
            index = self.frontier[position]
            self._carve_cell(index)
            if not int(self.cells[index]) & Cell.USED:
                self.cells[index] = int(self.cells[index]) | int(Cell.USED)
            position += 1

    def _target_reached(self) -> bool:
        return (
            self.covered == self.area
            or self.covered >= self.config.coverage_ratio * self.area
        )

    def run(self) -> DungeonGrid:
        if self.entrance is not None:
            raise RuntimeError("DungeonGenerator.run() may only be called once")

        log.info(
            "Starting dungeon generation",
            width=self.width,
            height=self.height,
            coverage_ratio=self.config.coverage_ratio,
            max_passes=self.config.max_passes,
        )
        self._place_entrance()

        while True:
            self.passes += 1
            before = self.covered
            self._run_pass()
            log.debug(
                "Pass finished",
                pass_number=self.passes,
                discovered=self.covered - before,
                covered=self.covered,
                area=self.area,
            )
            if self._target_reached():
                break
            if (
                self.config.max_passes is not None
                and self.passes >= self.config.max_passes
            ):
                log.error(
                    "Dungeon generation stalled",
                    covered=self.covered,
                    area=self.area,
                    passes=self.passes,
                    target=self.config.coverage_ratio,
                )
                raise GenerationStalled(self.covered, self.area, self.passes)

        grid = DungeonGrid(
            self.width, self.height, self.cells, self.entrance, self.frontier
        )
        log.info(
            "Dungeon generation complete",
            entrance=grid.position(grid.entrance),
            covered=grid.covered,
            area=grid.area,
            passes=self.passes,
        )
        return grid


def generate_dungeon(
    width: int,
    height: int,
    seed: int | None = None,
    rng: Optional[RandomSource] = None,
    config: Optional[GeneratorConfig] = None,
) -> DungeonGrid:
    """Entry point for dungeon generation; ``rng`` takes precedence over ``seed``."""
    if rng is None:
        rng = DungeonRNG(seed=seed)
    elif seed is not None:
        log.warning("Both rng and seed given; seed ignored", seed=seed)
    return DungeonGenerator(width, height, rng=rng, config=config).run()
