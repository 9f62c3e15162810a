"""Drone patrol route planning over an estate grid."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import DronePlan, Estate, Tree

logger = logging.getLogger(__name__)

_INVALID_INPUT = "err CalculateDroneDistance: invalid input -- nothing to calculate drone distance"


def _flight_grid(estate: Estate, trees: Iterable[Tree]) -> list[list[int]]:
    # The drone flies at least 1 above ground, and 1 above each tree.
    grid = [[1] * estate.length for _ in range(estate.width)]
    for tree in trees:
        if not (1 <= tree.x <= estate.length and 1 <= tree.y <= estate.width):
            raise ValueError(f"tree at ({tree.x}, {tree.y}) lies outside the estate")
        grid[tree.y - 1][tree.x - 1] = tree.height + 1
    return grid


def calculate_drone_distance(
    estate: Estate | None,
    trees: Iterable[Tree],
    scale_factor: int,
    max_distance: int | None = None,
) -> DronePlan:
    """Plan a zig-zag patrol starting at plot (1, 1).

    Even rows are flown towards increasing X, odd rows back. Each plot step
    costs *scale_factor*; climbing or descending costs the height change; the
    drone takes off from and lands on the ground. With *max_distance* the
    flight stops before the first plot it cannot reach within that budget.
    """
    if estate is None:
        raise ValueError(_INVALID_INPUT)

    if max_distance is None:
        logger.debug("calculating the total drone distance")
    else:
        logger.debug("calculating how far the drone gets within %d", max_distance)

    grid = _flight_grid(estate, trees)
    horizontal = 0
    vertical = 0
    previous = 0
    last_x = last_y = 0
    last_row = estate.width - 1

    for row_index, row in enumerate(grid):
        forward = row_index % 2 == 0
        columns = range(estate.length) if forward else range(estate.length - 1, -1, -1)
        final_column = estate.length - 1 if forward else 0
        for column in columns:
            current = row[column]
            vertical += abs(current - previous)
            if row_index or column:
                horizontal += scale_factor

            if max_distance is not None and max_distance < horizontal + vertical + current:
                return DronePlan(last_x=last_x, last_y=last_y)

            last_x, last_y = column + 1, row_index + 1
            if row_index == last_row and column == final_column:
                vertical += current
            previous = current

    return DronePlan(
        total_distance=horizontal + vertical,
        total_vertical_distance=vertical,
        total_horizontal_distance=horizontal,
        last_x=last_x,
        last_y=last_y,
    )