"""
Data Models Module.

Defines the editor's plain domain entities using Pydantic for validation:
the vertex shapes a user can pick and the entries of the shape menu.
"""
from enum import Enum
from typing import List

from pydantic import BaseModel


class VertexShape(str, Enum):
    """
    Shape used to draw (and hit-test) a vertex handle.
    The order of members is the order of entries in the shape menu.
    """
    CIRCLE = 'circle'
    SQUARE = 'square'
    TRIANGLE = 'triangle'


class ShapeMenuEntry(BaseModel):
    """
    One checkable entry of the shape menu.

    Attributes:
        shape: Vertex shape this entry selects.
        checked: Whether the entry currently shows a check mark.
    """
    shape: VertexShape
    checked: bool = False

    @property
    def label(self) -> str:
        return self.shape.value.capitalize()


class ShapeMenu:
    """Ordered collection of shape entries; at most one is checked."""

    def __init__(self, shapes=None, checked: int = 0):
        shapes = list(shapes) if shapes is not None else list(VertexShape)
        self.entries: List[ShapeMenuEntry] = [ShapeMenuEntry(shape=s) for s in shapes]
        if self.entries:
            self.check_only(checked)

    def __len__(self):
        return len(self.entries)

    def __getitem__(self, index) -> ShapeMenuEntry:
        return self.entries[index]

    def __iter__(self):
        return iter(self.entries)

    def uncheck_all(self):
        for entry in self.entries:
            entry.checked = False

    def check_only(self, index: int):
        # Validate before unchecking so a bad index leaves the menu intact
        entry = self.entries[index]
        self.uncheck_all()
        entry.checked = True

    def index_of(self, shape: VertexShape) -> int:
        for i, entry in enumerate(self.entries):
            if entry.shape == shape:
                return i
        raise ValueError(f"Shape {shape} is not in the menu")

    @property
    def checked_index(self) -> int:
        """Index of the checked entry, -1 if none."""
        for i, entry in enumerate(self.entries):
            if entry.checked:
                return i
        return -1
