"""
Map legends rendered as HTML panels.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Sequence, Tuple

from .palette import Palette
from ..exceptions import ValidationError
from ..ML.misclassification import transition_title

CLASS_LEGEND_TITLE = "True Landcover Legend"
ERROR_LEGEND_TITLE = "Misclassifications Legend"

_POSITIONS = {
    "bottom-left": ("bottom", "left"),
    "bottom-right": ("bottom", "right"),
    "top-left": ("top", "left"),
    "top-right": ("top", "right"),
}


@dataclass(frozen=True)
class Legend:
    """A titled list of (label, colour) rows."""

    title: str
    rows: Tuple[Tuple[str, str], ...]
    position: str = "bottom-left"

    def __post_init__(self):
        if self.position not in _POSITIONS:
            raise ValidationError(f"Unknown legend position: {self.position}")

    def labels(self) -> Tuple[str, ...]:
        return tuple(label for label, _ in self.rows)

    def to_html(self, offset_px: int = 0) -> str:
        """Fixed-position panel; ``offset_px`` shifts it up to stack legends."""
        vertical, horizontal = _POSITIONS[self.position]
        position = f"{vertical}: {30 + offset_px}px; {horizontal}: 30px;"
        items = "".join(
            '<div style="display: flex; align-items: center; margin: 2px 0;">'
            f'<i style="background: {html.escape(color)}; width: 16px; height: 16px; '
            'margin: 0 8px 0 0; border: 1px solid black; display: inline-block;"></i>'
            f'<span style="font-size: 12px;">{html.escape(label)}</span></div>'
            for label, color in self.rows
        )
        return (
            f'<div style="position: fixed; {position} z-index: 9999; '
            'background-color: white; padding: 8px 15px; border: 1px solid grey;">'
            f'<div style="font-weight: bold; font-size: 16px; margin: 0 0 4px 0;">'
            f"{html.escape(self.title)}</div>{items}</div>"
        )


def class_legend(palette: Palette, position: str = "bottom-left") -> Legend:
    """Legend of class names and their point colours."""
    return Legend(CLASS_LEGEND_TITLE, tuple(palette.items()), position)


def error_legend(
    descriptors: Sequence[str],
    palette: Palette,
    position: str = "bottom-right",
) -> Legend:
    """Legend of misclassification types, ``"Trees as Shrubs"`` style."""
    palette.require(len(descriptors))
    rows = tuple(
        (transition_title(descriptor), palette.color_for(code))
        for code, descriptor in enumerate(descriptors)
    )
    return Legend(ERROR_LEGEND_TITLE, rows, position)
