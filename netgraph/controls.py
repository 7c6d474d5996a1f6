"""Key bindings: quit and display-duration zoom."""

from __future__ import annotations

import logging

from netgraph.context import DisplayDuration
from netgraph.keyboard import KEY_DOWN, KEY_UP

logger = logging.getLogger(__name__)

QUIT = "quit"
ZOOM_OUT = "zoom_out"
ZOOM_IN = "zoom_in"

BINDINGS = {
    "q": QUIT,
    "Q": QUIT,
    KEY_UP: ZOOM_OUT,
    "+": ZOOM_OUT,
    KEY_DOWN: ZOOM_IN,
    "-": ZOOM_IN,
}


class InputController:
    """Maps keypresses to actions and applies zoom to the display duration.

    With zoom disabled the Up/Down bindings are ignored, leaving only quit.
    """

    def __init__(self, duration: DisplayDuration, zoom: bool = True):
        self.duration = duration
        self.zoom = zoom
        self.quit_requested = False

    def handle(self, key: str | None) -> str | None:
        """Apply key and return the action it triggered, if any."""
        if key is None:
            return None
        action = BINDINGS.get(key)
        if action == QUIT:
            self.quit_requested = True
        elif action in (ZOOM_OUT, ZOOM_IN):
            if not self.zoom:
                return None
            if action == ZOOM_OUT:
                self.duration.double()
            else:
                self.duration.halve()
            logger.debug("display duration now %r", self.duration)
        return action
