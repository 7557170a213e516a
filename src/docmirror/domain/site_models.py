from __future__ import annotations

"""
Site Navigation Data Models.

Provides the Node/Entry structures that mirror the input directory
hierarchy. The generator accumulates them while walking the tree and the
index builder consumes them once generation has completed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Entry:
    """
    Represents one rendered document.

    Attributes:
        title: Document title taken from its header.
        path: Output path relative to the output root (POSIX separators).
    """
    title: str
    path: str

    def __post_init__(self) -> None:
        # Exactly one leading separator is stripped, never more
        if self.path.startswith("/"):
            object.__setattr__(self, "path", self.path[1:])

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "path": self.path}


@dataclass
class Node:
    """
    Represents one input directory.

    Attributes:
        title: Directory name.
        children: Subdirectory nodes in listing order.
        entries: Documents rendered directly within this directory.
    """
    title: str
    children: List[Node] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)

    def add(self, node: Node) -> None:
        self.children.append(node)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to plain dictionaries for JSON serialization."""
        return {
            "title": self.title,
            "entries": [e.to_dict() for e in self.entries],
            "children": [c.to_dict() for c in self.children],
        }

    def __str__(self) -> str:
        return self.title
