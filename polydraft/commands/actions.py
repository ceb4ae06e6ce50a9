from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .base import Command
from ..geometry import MIN_HULL_POINTS, Polygon, Vertex
from ..models import ShapeMenu, VertexShape

_UNSET = object()


def _refresh_hull(polygon: Polygon):
    if polygon.count >= MIN_HULL_POINTS:
        polygon.make_convex()


class PolygonCommand(Command):
    def __init__(self, polygon: Polygon):
        self.polygon = polygon


# --- DRAG & DROP ---
class DragDropCommand(PolygonCommand):
    """
    Moves every vertex grabbed at the start of a drag.

    Built in three phases before it is recorded: begin() grabs the hit
    vertices, update() follows the cursor, end() snapshots final positions.
    execute/undo only replay the snapshots.
    """
    description = "Move"

    def __init__(self, polygon: Polygon):
        super().__init__(polygon)
        self.dragged: List[Vertex] = []
        self.start_points: List[Tuple[int, int]] = []
        self.end_points: Optional[List[Tuple[int, int]]] = None

    @staticmethod
    def can_drag(polygon: Polygon, x: int, y: int) -> bool:
        return polygon.hit_test(x, y)

    @property
    def is_finished(self) -> bool:
        return self.end_points is not None

    @property
    def is_empty(self) -> bool:
        return not self.dragged

    @property
    def has_moved(self) -> bool:
        return self.is_finished and self.start_points != self.end_points

    def begin(self, x: int, y: int):
        for vertex in self.polygon.hit_vertices(x, y):
            vertex.is_dragged = True
            vertex.dx = x - vertex.x
            vertex.dy = y - vertex.y
            self.dragged.append(vertex)
            self.start_points.append(vertex.pos)
        logger.debug(f"Drag: grabbed {len(self.dragged)} vertices at ({x}, {y})")

    def update(self, x: int, y: int):
        for vertex in self.dragged:
            if vertex.is_dragged:
                vertex.move_to(x - vertex.dx, y - vertex.dy)

    def end(self):
        self.end_points = [v.pos for v in self.dragged]
        self._release()

    def cancel(self):
        """Drop an unfinished drag, putting grabbed vertices back."""
        for vertex, (x, y) in zip(self.dragged, self.start_points):
            vertex.move_to(x, y)
        self._release()
        _refresh_hull(self.polygon)

    def _release(self):
        for vertex in self.polygon:
            vertex.is_dragged = False

    def execute(self):
        if not self.is_finished:
            raise RuntimeError("Drag has not ended yet")
        self._place(self.end_points)

    def undo(self):
        if not self.is_finished:
            raise RuntimeError("Drag has not ended yet")
        self._place(self.start_points)

    def _place(self, points):
        for vertex, (x, y) in zip(self.dragged, points):
            vertex.move_to(x, y)
        _refresh_hull(self.polygon)


# --- ADD VERTEX ---
class AddVertexCommand(PolygonCommand):
    description = "Add vertex"

    def __init__(self, vertex: Vertex, polygon: Polygon):
        super().__init__(polygon)
        self.vertex = vertex

    def execute(self):
        self.polygon.add(self.vertex)
        _refresh_hull(self.polygon)

    def undo(self):
        self.polygon.remove(self.vertex)
        _refresh_hull(self.polygon)


# --- DELETE VERTEX ---
class DeleteVertexCommand(PolygonCommand):
    description = "Delete vertex"

    def __init__(self, polygon: Polygon, vertices: Iterable[Vertex]):
        super().__init__(polygon)
        self.vertices = list(vertices)
        self._indices: Optional[List[int]] = None

    @classmethod
    def at_point(cls, polygon: Polygon, x: int, y: int):
        """
        Delete the vertex under (x, y). With overlapping handles the last
        added one wins.
        """
        vertex = polygon.find_last(x, y)
        if vertex is None:
            raise ValueError(f"No vertex at ({x}, {y})")
        return cls(polygon, [vertex])

    @staticmethod
    def can_delete(polygon: Polygon, x: int, y: int) -> bool:
        return polygon.vertex_hit(x, y)

    @property
    def is_empty(self) -> bool:
        return not self.vertices

    def execute(self):
        self._indices = [self.polygon.index(v) for v in self.vertices]
        self.polygon.remove_range(self.vertices)
        # Stale hull below three points is ignored by Polygon.contains_point
        _refresh_hull(self.polygon)

    def undo(self):
        if self._indices is None:
            self.polygon.add_range(self.vertices)
        else:
            # Ascending order puts every vertex back at its old index
            for index, vertex in sorted(zip(self._indices, self.vertices), key=lambda p: p[0]):
                self.polygon.insert(index, vertex)
        _refresh_hull(self.polygon)


# --- STYLE / STATE ---
class SetAttributeCommand(Command):
    """Swap one attribute of a target object between two values."""
    description = "Change attribute"

    def __init__(self, target, attribute: str, new_value, prev_value=_UNSET):
        self.target = target
        self.attribute = attribute
        self.new_value = new_value
        self.prev_value = getattr(target, attribute) if prev_value is _UNSET else prev_value

    @property
    def is_empty(self) -> bool:
        return self.prev_value == self.new_value

    def execute(self):
        setattr(self.target, self.attribute, self.new_value)

    def undo(self):
        setattr(self.target, self.attribute, self.prev_value)

    def __repr__(self):
        return f"<{type(self).__name__} {self.attribute}: {self.prev_value!r} -> {self.new_value!r}>"


class ChangeSizeCommand(SetAttributeCommand):
    description = "Change vertex size"

    def __init__(self, polygon: Polygon, new_size: int, prev_size=_UNSET):
        super().__init__(polygon, "vertex_size", new_size, prev_size)


class ChangeHullColorCommand(SetAttributeCommand):
    description = "Change hull colour"

    def __init__(self, polygon: Polygon, new_color, prev_color=_UNSET):
        super().__init__(polygon, "hull_color", new_color, prev_color)


class ChangeVertexColorCommand(SetAttributeCommand):
    description = "Change vertex colour"

    def __init__(self, polygon: Polygon, new_color, prev_color=_UNSET):
        super().__init__(polygon, "vertex_color", new_color, prev_color)


class ChangeBackColorCommand(SetAttributeCommand):
    description = "Change background"

    def __init__(self, document, new_color, prev_color=_UNSET):
        super().__init__(document, "background_color", new_color, prev_color)


class ChangeVertexShapeCommand(Command):
    """Switch the shape new vertices are created with."""
    description = "Change vertex shape"

    def __init__(self, session, prev_shape: VertexShape, new_shape: VertexShape):
        self.session = session
        self.prev_shape = prev_shape
        self.new_shape = new_shape

    def execute(self):
        self.session.chosen_shape = self.new_shape

    def undo(self):
        self.session.chosen_shape = self.prev_shape


class ChangeShapeMenuCommand(Command):
    """Move the check mark of the shape menu between two entries."""
    description = "Select shape"

    def __init__(self, menu: ShapeMenu, prev_index: int, new_index: int):
        self.menu = menu
        self.prev_index = prev_index
        self.new_index = new_index

    def execute(self):
        self.menu.check_only(self.new_index)

    def undo(self):
        self.menu.check_only(self.prev_index)
