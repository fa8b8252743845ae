"""Orientation mapping from authored layout to physical transmission order.

Buttons are authored as the user sees the pad on the desk. The firmware
numbers them in its own fixed order, so a rotated pad needs its grid read
in a different order. The mapping only changes transmission order; it
never alters an action.
"""

from collections.abc import Sequence
from typing import TypeVar

from macropad_tool.models import (
    ButtonAction,
    KnobAction,
    Layer,
    MacropadConfig,
    Orientation,
    PhysicalLayer,
    PhysicalLayout,
)

T = TypeVar("T")

Grid = Sequence[Sequence[T]]


def physical_grid(grid: Grid[T], orientation: Orientation) -> list[tuple[T, ...]]:
    """Reorder an authored grid into physical rows.

    - normal: unchanged
    - upsidedown: each row mirrored
    - clockwise: authored columns become rows, each reversed
    - counterclockwise: clockwise with both axes mirrored

    Args:
        grid: Authored rows (cols x rows when the orientation is transposed).
        orientation: How the pad is rotated.

    Returns:
        Rows in physical order.
    """
    if orientation is Orientation.NORMAL:
        return [tuple(row) for row in grid]
    if orientation is Orientation.UPSIDE_DOWN:
        return [tuple(reversed(row)) for row in grid]

    columns = list(zip(*grid, strict=True))
    if orientation is Orientation.CLOCKWISE:
        return [tuple(reversed(column)) for column in columns]
    return [tuple(column) for column in reversed(columns)]


def physical_knobs(
    knobs: Sequence[KnobAction], orientation: Orientation
) -> tuple[KnobAction, ...]:
    """Reorder knobs; upside-down and counterclockwise pads reverse them."""
    if orientation in (Orientation.UPSIDE_DOWN, Orientation.COUNTER_CLOCKWISE):
        return tuple(reversed(knobs))
    return tuple(knobs)


def physical_layer(layer: Layer, index: int, orientation: Orientation) -> PhysicalLayer:
    """Map one layer to physical order (row-major buttons, then knobs)."""
    rows = physical_grid(layer.buttons, orientation)
    buttons: tuple[ButtonAction, ...] = tuple(
        action for row in rows for action in row
    )
    return PhysicalLayer(
        index=index,
        buttons=buttons,
        knobs=physical_knobs(layer.knobs, orientation),
    )


def physical_order(config: MacropadConfig) -> PhysicalLayout:
    """Produce the firmware transmission order for every layer.

    Layers keep their 1-based index.
    """
    orientation = config.device.orientation
    return PhysicalLayout(
        layers=tuple(
            physical_layer(layer, index, orientation)
            for index, layer in enumerate(config.layers, start=1)
        )
    )
