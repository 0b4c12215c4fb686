"""
PanelLayout - Widths and collapse state of the player's side panels.

Kept apart from progression state: nothing here reads or writes the course
or enrollment.
"""

from dataclasses import dataclass


MIN_PANEL_WIDTH = 250
MAX_PANEL_WIDTH = 600
MAX_PANEL_SHARE = 0.4
MINIMIZED_WIDTH = 48


@dataclass
class PanelState:
    width: float
    previous_width: float
    minimized: bool = False

    @property
    def effective_width(self) -> float:
        return MINIMIZED_WIDTH if self.minimized else self.width


def clamp_width(width: float, container_width: float) -> float:
    """Clamp to [250, min(40% of container, 600)]."""
    max_width = min(container_width * MAX_PANEL_SHARE, MAX_PANEL_WIDTH)
    return max(MIN_PANEL_WIDTH, min(width, max_width))


class PanelLayout:
    """Curriculum sidebar (left) and assistant panel (right)."""

    def __init__(self, container_width: float = 1440, sidebar_width: float = 320, assistant_width: float = 400):
        self.container_width = container_width
        self.sidebar = PanelState(sidebar_width, sidebar_width)
        self.assistant = PanelState(assistant_width, assistant_width)

    def _panel(self, name: str) -> PanelState:
        if name == "sidebar":
            return self.sidebar
        if name == "assistant":
            return self.assistant
        raise KeyError(name)

    def resize(self, name: str, width: float) -> float:
        """Drag a panel edge; returns the applied width."""
        panel = self._panel(name)
        panel.width = clamp_width(width, self.container_width)
        panel.previous_width = panel.width
        return panel.width

    def toggle(self, name: str) -> bool:
        """Minimize or restore a panel; returns the new minimized flag."""
        panel = self._panel(name)
        if panel.minimized:
            panel.width = clamp_width(panel.previous_width, self.container_width)
        else:
            panel.previous_width = panel.width
        panel.minimized = not panel.minimized
        return panel.minimized

    def set_container_width(self, width: float):
        self.container_width = width
        for panel in (self.sidebar, self.assistant):
            if not panel.minimized:
                panel.width = clamp_width(panel.width, width)

    def column_ratios(self) -> tuple[float, float, float]:
        """(sidebar, content, assistant) shares of the container."""
        left = self.sidebar.effective_width
        right = self.assistant.effective_width
        content = max(self.container_width - left - right, 1)
        total = left + content + right
        return (left / total, content / total, right / total)
