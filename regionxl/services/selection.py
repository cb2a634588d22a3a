# regionxl/services/selection.py
from __future__ import annotations
import logging
from typing import Optional, Tuple

from regionxl.domain.models import SelectionRect

logger = logging.getLogger(__name__)

IDLE = "idle"
SELECTING = "selecting"


class SelectionTracker:
    """
    Turns pointer drags on the render surface into a SelectionRect.

    idle -> selecting on pointer-down, back to idle on pointer-up/leave.
    The last rectangle survives into idle so it can be exported later.
    """

    def __init__(self):
        self.state = IDLE
        self.rect: Optional[SelectionRect] = None
        self._anchor: Optional[Tuple[float, float]] = None

    @property
    def is_selecting(self) -> bool:
        return self.state == SELECTING

    @property
    def has_selection(self) -> bool:
        return self.rect is not None

    def pointer_down(self, x: float, y: float) -> SelectionRect:
        self._anchor = (x, y)
        self.state = SELECTING
        # a new drag replaces the old selection
        self.rect = SelectionRect(x, y, 0.0, 0.0)
        return self.rect

    def pointer_move(self, x: float, y: float) -> Optional[SelectionRect]:
        if self.state != SELECTING or self._anchor is None:
            return self.rect
        ax, ay = self._anchor
        self.rect = SelectionRect.from_points(ax, ay, x, y)
        return self.rect

    def pointer_up(self) -> Optional[SelectionRect]:
        if self.state == SELECTING:
            logger.debug("Selection finished: %s", self.rect)
        self.state = IDLE
        self._anchor = None
        return self.rect

    # leaving the surface ends the drag the same way a release does
    pointer_leave = pointer_up

    def reset(self) -> None:
        self.state = IDLE
        self._anchor = None
        self.rect = None
