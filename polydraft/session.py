from typing import List, Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QColor
from loguru import logger

from .commands.base import CommandHistory
from .config import EditorConfig
from .geometry import Polygon
from .models import ShapeMenu, VertexShape


class Document:
    """
    One open drawing: a polygon, its background and the history stacks it
    owns while another document is active.
    """
    def __init__(self, name: str, polygon: Optional[Polygon] = None, background_color="white"):
        self.name = name
        self.polygon = polygon if polygon is not None else Polygon()
        self.background_color = QColor(background_color)
        self.undo_stack = []
        self.redo_stack = []

    def __repr__(self):
        return f"<Document {self.name!r} ({self.polygon.count} vertices)>"


class EditorSession(QObject):
    """
    Single Source of Truth for the editor: open documents, the chosen vertex
    shape, the shape menu, and the history bound to the active document.
    Signals allow UI components to react to changes.
    """
    history_about_to_change = Signal()
    history_changed = Signal()
    document_switched = Signal(int)  # index
    chosen_shape_changed = Signal(object)  # VertexShape

    def __init__(self, config: Optional[EditorConfig] = None):
        super().__init__()
        self.config = config if config is not None else EditorConfig()
        self.history = CommandHistory(max_len=self.config.history_limit,
                                      on_change=self.history_changed.emit,
                                      before_change=self.history_about_to_change.emit)

        self.menu = ShapeMenu()
        self._chosen_shape = self.config.default_shape
        self.menu.check_only(self.menu.index_of(self._chosen_shape))

        self.documents: List[Document] = []
        self._current = -1
        self.new_document()

    # --- Properties with Signals ---

    @property
    def chosen_shape(self) -> VertexShape:
        return self._chosen_shape

    @chosen_shape.setter
    def chosen_shape(self, value):
        value = VertexShape(value)
        if self._chosen_shape != value:
            self._chosen_shape = value
            self.chosen_shape_changed.emit(value)

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def document(self) -> Document:
        return self.documents[self._current]

    @property
    def polygon(self) -> Polygon:
        return self.document.polygon

    # --- Documents ---

    def new_document(self, name: Optional[str] = None) -> Document:
        polygon = Polygon(vertex_size=self.config.vertex_size,
                          hull_color=self.config.hull_color,
                          vertex_color=self.config.vertex_color)
        doc = Document(name or f"Untitled {len(self.documents) + 1}", polygon,
                       self.config.background_color)
        self.documents.append(doc)
        self.switch_document(len(self.documents) - 1)
        return doc

    def switch_document(self, index: int):
        """Park the active history in its document and load the target's."""
        if index == self._current:
            return
        target = self.documents[index]

        if self._current >= 0:
            leaving = self.document
            leaving.undo_stack, leaving.redo_stack = self.history.snapshot()

        self.history.replace_history(target.undo_stack, target.redo_stack)
        self._current = index
        logger.info(f"Session: switched to {target!r}")
        self.document_switched.emit(index)

    def close_document(self, index: int):
        doc = self.documents[index]
        if index == self._current:
            # Closed document's history goes away with it
            self.history.clear()
            del self.documents[index]
            self._current = -1
            if not self.documents:
                self.new_document()
            else:
                self.switch_document(min(index, len(self.documents) - 1))
        else:
            del self.documents[index]
            if index < self._current:
                self._current -= 1
        logger.info(f"Session: closed {doc!r}")

    # --- History entry points ---

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def clear_history(self):
        self.history.clear()
