"""Aggregation of participant selections into the poll's read model.

Nothing here is cached: the grid is rebuilt from the current participant
map every time an event is read.
"""

import math
from dataclasses import dataclass

from hsync.scheduling import geometry
from hsync.scheduling.availability import participants_in_order
from hsync.scheduling.events import Event

DEFAULT_BEST_SLOTS_LIMIT = 5
HEAT_LEVELS = 4


@dataclass
class AggregateGrid:
    """Counts and names per cell, both indexed ``[row][day]``."""

    aggregate: list[list[int]]
    who: list[list[list[str]]]
    max_count: int
    slots_per_day: int
    days: int


@dataclass(frozen=True)
class RankedSlot:
    day_index: int
    row_index: int
    count: int
    names: tuple[str, ...]


def aggregate(event: Event) -> AggregateGrid:
    per_day = geometry.slots_per_day(event)
    days = len(event.dates)
    counts = [[0] * days for _ in range(per_day)]
    who: list[list[list[str]]] = [[[] for _ in range(days)] for _ in range(per_day)]
    max_count = 0

    for participant in participants_in_order(event):
        for index in sorted(participant.slots):
            day, row = geometry.decode(index, per_day, days)
            counts[row][day] += 1
            who[row][day].append(participant.name)
            max_count = max(max_count, counts[row][day])

    return AggregateGrid(aggregate=counts, who=who, max_count=max_count, slots_per_day=per_day, days=days)


def rank_best_slots(grid: AggregateGrid, limit: int = DEFAULT_BEST_SLOTS_LIMIT) -> list[RankedSlot]:
    """Top ``limit`` non-empty cells by count.

    Cells are collected day by day, row by row, and the sort is stable on
    the count alone, so equal counts keep that day-major order.
    """
    cells = [
        RankedSlot(day, row, grid.aggregate[row][day], tuple(grid.who[row][day]))
        for day in range(grid.days)
        for row in range(grid.slots_per_day)
        if grid.aggregate[row][day] > 0
    ]
    cells.sort(key=lambda cell: cell.count, reverse=True)
    return cells[:limit]


def heat_level(count: int, max_count: int) -> int:
    """Intensity bucket 0-4; any non-zero count is at least level 1."""
    if max_count == 0:
        return 0
    return math.ceil(count / max_count * HEAT_LEVELS)


def heat_levels(grid: AggregateGrid) -> list[list[int]]:
    return [[heat_level(count, grid.max_count) for count in row] for row in grid.aggregate]
