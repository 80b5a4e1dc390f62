from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Protocol, runtime_checkable


@dataclass
class ChartContainer:
    """Append-only holder for rendered chart elements, in render order."""

    elements: List[Any] = field(default_factory=list)
    hidden: bool = False

    def append(self, element: Any) -> None:
        self.elements.append(element)

    def clear(self) -> None:
        """Drop previous charts before a re-render."""
        self.elements.clear()

    def __len__(self) -> int:
        return len(self.elements)


@runtime_checkable
class UIAdapter(Protocol):
    """Page operations the pipeline is allowed to perform."""

    def append_chart(self, container: Any, element: Any) -> None:
        """Add a rendered chart to the end of a container."""

    def toggle_visibility(self, element: Any) -> bool:
        """Flip an element between shown and hidden; return the new hidden state."""


class InMemoryUIAdapter:
    """Adapter that keeps everything in ChartContainer objects (headless use and tests)."""

    def append_chart(self, container: ChartContainer, element: Any) -> None:
        container.append(element)

    def toggle_visibility(self, element: ChartContainer) -> bool:
        element.hidden = not element.hidden
        return element.hidden
