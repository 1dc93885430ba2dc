"""
Minimal element tree for the player's mount points.

Only what relocation needs: an element knows its parent and children, and
appending a node that already has a parent moves it instead of copying it.
"""

from typing import Any, Dict, List, Optional


class Element:
    def __init__(self, name: str) -> None:
        self.name = name
        self.parent: Optional["Element"] = None
        self.children: List["Element"] = []

    def append_child(self, child: "Element") -> None:
        if child is self or self.is_descendant_of(child):
            raise ValueError(f"cannot append {child.name!r} under itself")
        if child.parent is not None:
            child.parent.remove_child(child)
        self.children.append(child)
        child.parent = self

    def remove_child(self, child: "Element") -> None:
        if child.parent is not self:
            raise ValueError(f"{child.name!r} is not a child of {self.name!r}")
        self.children.remove(child)
        child.parent = None

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.remove_child(self)

    def is_descendant_of(self, other: "Element") -> bool:
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False

    def __repr__(self) -> str:
        return f"<Element {self.name}>"


class Page:
    """
    One page lifetime: a body element, the script tags injected so far and
    the globals those scripts define.
    """

    def __init__(self) -> None:
        self.body = Element("body")
        self.scripts: List[str] = []
        self.globals: Dict[str, Any] = {}

    def has_script(self, src: str) -> bool:
        return src in self.scripts

    def add_script(self, src: str) -> None:
        if src not in self.scripts:
            self.scripts.append(src)
