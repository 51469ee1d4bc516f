"""Curved layout for workflow nodes.

Nodes flow along a gentle S-curve across the viewport. All functions here
are pure: the same arguments always give the same positions, which is what
lets a resize simply recompute the whole layout.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

NODE_WIDTH = 280
NODE_HEIGHT = 100
MARGIN = 50
CONTROL_OFFSET = 50


@dataclass(frozen=True)
class Position:
    x: float
    y: float


def _clamp(value: float, low: float, high: float) -> float:
    # lower bound wins when the viewport is smaller than a node plus margins
    return max(low, min(value, high))


def calculate_node_position(
    index: int, count: int, width: float, height: float
) -> Position:
    """Return the top-left corner of node ``index`` out of ``count``.

    Args:
        index: Zero-based position of the step in the workflow.
        count: Total number of steps.
        width: Viewport width.
        height: Viewport height.

    Raises:
        ValueError: If ``count`` is not positive or ``index`` is out of range.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    if not 0 <= index < count:
        raise ValueError(f"index {index} out of range for {count} steps")

    center_x = width / 2
    center_y = height / 2

    if count == 1:
        return Position(center_x - NODE_WIDTH / 2, center_y - NODE_HEIGHT / 2)

    progress = index / (count - 1)
    angle = (progress - 0.5) * math.pi * 0.8

    radius = min(width * 0.3, height * 0.25)
    x = center_x + math.sin(angle) * radius - NODE_WIDTH / 2
    y = (
        center_y
        + math.cos(angle) * radius * 0.6
        - NODE_HEIGHT / 2
        + progress * height * 0.2
    )

    return Position(
        x=_clamp(x, MARGIN, width - NODE_WIDTH - MARGIN),
        y=_clamp(y, MARGIN, height - NODE_HEIGHT - MARGIN),
    )


def calculate_layout(count: int, width: float, height: float) -> List[Position]:
    """Positions for every node of a ``count``-step workflow."""
    return [calculate_node_position(i, count, width, height) for i in range(count)]


def connection_anchor(position: Position) -> Position:
    """Right-center point of the node at ``position``."""
    return Position(position.x + NODE_WIDTH, position.y + NODE_HEIGHT / 2)


def connection_path(source: Position, target: Position) -> str:
    """SVG path data for the curve joining two node positions."""
    start = connection_anchor(source)
    end = connection_anchor(target)
    return (
        f"M {start.x:g} {start.y:g} "
        f"C {start.x + CONTROL_OFFSET:g} {start.y:g}, "
        f"{end.x - CONTROL_OFFSET:g} {end.y:g}, "
        f"{end.x:g} {end.y:g}"
    )
