"""
Canvas Controller Module.

Turns discrete canvas events (press, move, release, menu picks) into command
batches and records them on the session's history. Nothing is recorded for a
gesture that changed nothing.
"""
from typing import Optional

from loguru import logger
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor

from .commands.actions import (
    AddVertexCommand,
    ChangeBackColorCommand,
    ChangeHullColorCommand,
    ChangeShapeMenuCommand,
    ChangeSizeCommand,
    ChangeVertexColorCommand,
    ChangeVertexShapeCommand,
    DeleteVertexCommand,
    DragDropCommand,
)
from .commands.base import CommandBatch
from .geometry import Vertex
from .models import VertexShape
from .session import EditorSession


class CanvasController:
    def __init__(self, session: EditorSession):
        self.session = session
        self._drag: Optional[DragDropCommand] = None
        # Undo/redo, document switches and other records back out a live drag first
        session.history_about_to_change.connect(self.cancel_drag)

    @property
    def history(self):
        return self.session.history

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    # --- Mouse gestures ---

    def mouse_press(self, x: int, y: int, button=Qt.MouseButton.LeftButton) -> bool:
        """
        Left button drags whatever is hit or inserts a vertex on empty canvas;
        right button deletes the vertex under the cursor.
        Returns True if the press did something.
        """
        if self._drag is not None:
            return False
        polygon = self.session.polygon

        if button == Qt.MouseButton.LeftButton:
            if DragDropCommand.can_drag(polygon, x, y):
                return self.start_drag(x, y) is not None
            return self.insert_vertex(x, y)

        if button == Qt.MouseButton.RightButton:
            return self.delete_vertex(x, y)

        return False

    def mouse_move(self, x: int, y: int):
        if self._drag is not None:
            self._drag.update(x, y)

    def mouse_release(self) -> bool:
        """Finish the active drag; returns True if it was recorded."""
        drag, self._drag = self._drag, None
        if drag is None:
            return False
        drag.end()
        if not drag.has_moved:
            logger.debug("Controller: drag ended where it started, nothing recorded")
            return False
        return self.history.record(CommandBatch([drag], drag.description))

    def start_drag(self, x: int, y: int) -> Optional[DragDropCommand]:
        drag = DragDropCommand(self.session.polygon)
        drag.begin(x, y)
        if drag.is_empty:
            return None
        self._drag = drag
        return drag

    def cancel_drag(self):
        drag, self._drag = self._drag, None
        if drag is not None:
            drag.cancel()
            logger.debug("Controller: drag cancelled")

    def insert_vertex(self, x: int, y: int) -> bool:
        polygon = self.session.polygon
        vertex = Vertex(x, y, self.session.chosen_shape, polygon.vertex_size)
        return self.history.record(AddVertexCommand(vertex, polygon))

    def delete_vertex(self, x: int, y: int) -> bool:
        polygon = self.session.polygon
        if not DeleteVertexCommand.can_delete(polygon, x, y):
            return False
        return self.history.record(DeleteVertexCommand.at_point(polygon, x, y))

    # --- Menu / toolbar actions ---

    def select_vertex_shape(self, shape: VertexShape) -> bool:
        """Shape choice and menu check mark change together as one step."""
        session = self.session
        shape = VertexShape(shape)
        if shape == session.chosen_shape:
            return False
        menu = session.menu
        batch = CommandBatch([
            ChangeVertexShapeCommand(session, session.chosen_shape, shape),
            ChangeShapeMenuCommand(menu, menu.index_of(session.chosen_shape), menu.index_of(shape)),
        ], description=f"Select {shape.value}")
        return self.history.record(batch)

    def change_size(self, size: int) -> bool:
        return self._record_change(ChangeSizeCommand(self.session.polygon, size))

    def change_hull_color(self, color) -> bool:
        return self._record_change(ChangeHullColorCommand(self.session.polygon, QColor(color)))

    def change_vertex_color(self, color) -> bool:
        return self._record_change(ChangeVertexColorCommand(self.session.polygon, QColor(color)))

    def change_back_color(self, color) -> bool:
        return self._record_change(ChangeBackColorCommand(self.session.document, QColor(color)))

    def _record_change(self, command) -> bool:
        if command.is_empty:
            return False
        return self.history.record(command)
