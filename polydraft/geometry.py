"""
Geometry Module.

Mutable vertex and polygon model edited by the commands. The polygon keeps
its vertices in insertion order and derives a convex hull from them once it
has at least three points.
"""
import math
from typing import Callable, Iterable, List, Optional

from loguru import logger
from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QPolygonF

from .models import VertexShape

DEFAULT_VERTEX_SIZE = 5
MIN_HULL_POINTS = 3


class Vertex:
    """
    A draggable polygon point.

    Attributes:
        x, y: Integer canvas position.
        shape: Handle shape, decides the hit area.
        size: Handle radius in pixels.
        is_dragged: Set while a drag gesture holds this vertex.
        dx, dy: Cursor offset captured when the drag started.
    """
    def __init__(self, x: int, y: int, shape: VertexShape = VertexShape.CIRCLE,
                 size: int = DEFAULT_VERTEX_SIZE):
        self.x = x
        self.y = y
        self.shape = VertexShape(shape)
        self.size = size
        self.is_dragged = False
        self.dx = 0
        self.dy = 0

    @property
    def pos(self):
        return (self.x, self.y)

    def move_to(self, x: int, y: int):
        self.x = x
        self.y = y

    def check(self, x: int, y: int) -> bool:
        """True if (x, y) lies inside this vertex's handle."""
        dx = x - self.x
        dy = y - self.y
        if self.shape == VertexShape.SQUARE:
            return abs(dx) <= self.size and abs(dy) <= self.size
        if self.shape == VertexShape.TRIANGLE:
            return self._handle_polygon().containsPoint(QPointF(x, y), Qt.FillRule.OddEvenFill)
        return dx * dx + dy * dy <= self.size * self.size

    def _handle_polygon(self) -> QPolygonF:
        # Upward triangle inscribed in the circle of radius `size`
        half_width = self.size * math.sqrt(3) / 2
        return QPolygonF([
            QPointF(self.x, self.y - self.size),
            QPointF(self.x + half_width, self.y + self.size / 2),
            QPointF(self.x - half_width, self.y + self.size / 2),
        ])

    def __repr__(self):
        return f"Vertex({self.x}, {self.y}, {self.shape.value})"


def _cross(o: Vertex, a: Vertex, b: Vertex) -> int:
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def convex_hull(vertices: Iterable[Vertex]) -> List[Vertex]:
    """
    Monotone chain hull. Returns vertex references in counter-clockwise
    order (y up), collinear points dropped.
    """
    points = sorted(vertices, key=lambda v: (v.x, v.y))
    if len(points) < MIN_HULL_POINTS:
        return points

    lower: List[Vertex] = []
    for p in points:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: List[Vertex] = []
    for p in reversed(points):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]


class Polygon:
    """
    Ordered, mutable collection of vertices with per-polygon style.
    """
    def __init__(self, vertices: Optional[Iterable[Vertex]] = None,
                 vertex_size: int = DEFAULT_VERTEX_SIZE,
                 hull_color=None, vertex_color=None):
        self.vertices: List[Vertex] = list(vertices) if vertices is not None else []
        self.hull: List[Vertex] = []
        self._vertex_size = vertex_size
        self.hull_color = QColor(hull_color if hull_color is not None else "black")
        self.vertex_color = QColor(vertex_color if vertex_color is not None else "black")
        if len(self.vertices) >= MIN_HULL_POINTS:
            self.make_convex()

    # --- Collection protocol ---

    def __len__(self):
        return len(self.vertices)

    def __iter__(self):
        return iter(self.vertices)

    def __contains__(self, vertex):
        return any(v is vertex for v in self.vertices)

    @property
    def count(self) -> int:
        return len(self.vertices)

    def add(self, vertex: Vertex):
        self.vertices.append(vertex)

    def remove(self, vertex: Vertex):
        """Remove this exact vertex object. Raises ValueError if absent."""
        for i, v in enumerate(self.vertices):
            if v is vertex:
                del self.vertices[i]
                return
        raise ValueError(f"{vertex!r} is not part of the polygon")

    def insert(self, index: int, vertex: Vertex):
        self.vertices.insert(index, vertex)

    def index(self, vertex: Vertex) -> int:
        for i, v in enumerate(self.vertices):
            if v is vertex:
                return i
        raise ValueError(f"{vertex!r} is not part of the polygon")

    def add_range(self, vertices: Iterable[Vertex]):
        self.vertices.extend(vertices)

    def remove_range(self, vertices: Iterable[Vertex]):
        for vertex in vertices:
            self.remove(vertex)

    def exists(self, predicate: Callable[[Vertex], bool]) -> bool:
        return any(predicate(v) for v in self.vertices)

    def find_last(self, x: int, y: int) -> Optional[Vertex]:
        """Last-added vertex whose handle contains (x, y), or None."""
        for vertex in reversed(self.vertices):
            if vertex.check(x, y):
                return vertex
        return None

    # --- Style ---

    @property
    def vertex_size(self) -> int:
        return self._vertex_size

    @vertex_size.setter
    def vertex_size(self, value: int):
        self._vertex_size = value
        for vertex in self.vertices:
            vertex.size = value

    # --- Hull and hit testing ---

    def make_convex(self):
        """Recompute the convex outline from the current vertex positions."""
        self.hull = convex_hull(self.vertices)
        logger.trace(f"Polygon: hull recomputed ({len(self.hull)} of {len(self.vertices)} points)")

    def hull_points(self):
        return [v.pos for v in self.hull]

    def contains_point(self, x: int, y: int) -> bool:
        """True if (x, y) lies in the filled hull region."""
        if len(self.vertices) < MIN_HULL_POINTS or len(self.hull) < MIN_HULL_POINTS:
            return False
        outline = QPolygonF([QPointF(v.x, v.y) for v in self.hull])
        return outline.containsPoint(QPointF(x, y), Qt.FillRule.OddEvenFill)

    def vertex_hit(self, x: int, y: int) -> bool:
        return self.exists(lambda v: v.check(x, y))

    def hit_vertices(self, x: int, y: int) -> List[Vertex]:
        """
        Vertices a press at (x, y) grabs: those whose handle contains the
        point, or every vertex when the press lands on the body and no handle.
        """
        if self.vertex_hit(x, y):
            return [v for v in self.vertices if v.check(x, y)]
        if self.contains_point(x, y):
            return list(self.vertices)
        return []

    def hit_test(self, x: int, y: int) -> bool:
        return self.vertex_hit(x, y) or self.contains_point(x, y)
