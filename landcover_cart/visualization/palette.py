"""
Class code to display colour lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from ..exceptions import PaletteError
from ..ML.encoding import LabelEncoding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Palette:
    """
    Ordered colours indexed by class code.

    Code ``i`` is drawn with ``colors[i]``. Codes outside ``0..len-1``
    (including the unmapped code -1) raise PaletteError.
    """

    colors: Tuple[str, ...]
    names: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.colors:
            raise PaletteError("Palette needs at least one colour")
        if self.names and len(self.names) != len(self.colors):
            raise PaletteError(
                f"Palette has {len(self.colors)} colours but {len(self.names)} names"
            )

    def __len__(self) -> int:
        return len(self.colors)

    def color_for(self, code) -> str:
        if isinstance(code, bool) or int(code) != code:
            raise PaletteError(f"Class code must be an integer, got {code!r}")
        code = int(code)
        if not 0 <= code < len(self.colors):
            raise PaletteError(f"No colour for class code {code} (palette has {len(self.colors)})")
        return self.colors[code]

    def name_for(self, code) -> str:
        self.color_for(code)
        return self.names[int(code)] if self.names else str(int(code))

    def require(self, n_classes: int) -> None:
        """Raise PaletteError unless every code below ``n_classes`` has a colour."""
        if n_classes > len(self.colors):
            raise PaletteError(
                f"Palette has {len(self.colors)} colours for {n_classes} classes"
            )

    def items(self):
        """(name, colour) pairs in code order."""
        names = self.names or tuple(str(i) for i in range(len(self.colors)))
        return list(zip(names, self.colors))

    @classmethod
    def from_colors(cls, colors: Sequence[str], n_classes: Optional[int] = None) -> "Palette":
        palette = cls(tuple(colors))
        if n_classes is not None:
            palette.require(n_classes)
        return palette

    @classmethod
    def for_encoding(
        cls,
        encoding: LabelEncoding,
        label_colors: Optional[Mapping[str, str]] = None,
        fallback: Sequence[str] = (),
    ) -> "Palette":
        """
        Palette covering every code of ``encoding``.

        Labels listed in ``label_colors`` keep their colour; the others take
        the next unused colour of ``fallback`` in code order.
        """
        label_colors = dict(label_colors or {})
        used = {label_colors[label] for label in encoding.labels if label in label_colors}
        spare = [c for c in fallback if c not in used]

        colors = []
        for label in encoding.labels:
            if label in label_colors:
                colors.append(label_colors[label])
            elif spare:
                colors.append(spare.pop(0))
            else:
                raise PaletteError(f"No colour available for class '{label}'")
        if not colors:
            raise PaletteError("Encoding has no classes to colour")
        return cls(tuple(colors), tuple(encoding.labels))
