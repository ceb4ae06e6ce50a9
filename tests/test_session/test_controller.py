import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from polydraft.controller import CanvasController
from polydraft.models import VertexShape
from polydraft.session import EditorSession

@pytest.fixture
def session():
    return EditorSession()

@pytest.fixture
def controller(session):
    """Controller over a triangle (0,0), (10,0), (5,10) built by clicks."""
    controller = CanvasController(session)
    for x, y in [(0, 0), (10, 0), (5, 10)]:
        controller.mouse_press(x, y)
    session.clear_history()
    return controller

def positions(session):
    return [v.pos for v in session.polygon]

class TestMouseGestures:
    def test_click_on_empty_canvas_inserts_vertex(self, session, controller):
        session.chosen_shape = VertexShape.SQUARE

        assert controller.mouse_press(40, 40) is True

        vertex = session.polygon.vertices[-1]
        assert vertex.pos == (40, 40)
        assert vertex.shape == VertexShape.SQUARE
        assert len(session.history.undo_stack) == 1

        session.undo()
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]

    def test_drag_is_recorded_once(self, session, controller):
        controller.mouse_press(10, 0)
        assert controller.is_dragging
        controller.mouse_move(11, 1)
        controller.mouse_move(12, 2)

        assert controller.mouse_release() is True
        assert positions(session) == [(0, 0), (12, 2), (5, 10)]
        assert len(session.history.undo_stack) == 1

        session.undo()
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]
        session.redo()
        assert positions(session) == [(0, 0), (12, 2), (5, 10)]

    def test_drag_without_movement_not_recorded(self, session, controller):
        controller.mouse_press(10, 0)

        assert controller.mouse_release() is False
        assert session.history.can_undo is False

    def test_drag_on_nothing_records_nothing(self, session, controller):
        """Test that a drag which grabs nothing leaves both stacks unchanged."""
        controller.mouse_press(40, 40)
        session.undo()
        before = session.history.snapshot()

        assert controller.start_drag(100, 100) is None
        controller.mouse_move(120, 120)
        assert controller.mouse_release() is False

        assert session.history.snapshot() == before
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]

    def test_cancel_drag(self, session, controller):
        controller.mouse_press(10, 0)
        controller.mouse_move(30, 30)

        controller.cancel_drag()

        assert not controller.is_dragging
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]
        assert controller.mouse_release() is False
        assert session.history.can_undo is False

    def test_right_click_deletes_vertex(self, session, controller):
        assert controller.mouse_press(10, 0, Qt.MouseButton.RightButton) is True
        assert positions(session) == [(0, 0), (5, 10)]

        session.undo()
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]

    def test_right_click_on_nothing(self, session, controller):
        assert controller.mouse_press(50, 50, Qt.MouseButton.RightButton) is False
        assert session.history.can_undo is False

    def test_new_batch_drops_redo(self, session, controller):
        controller.mouse_press(10, 0)
        controller.mouse_move(12, 2)
        controller.mouse_release()
        session.undo()

        controller.mouse_press(40, 40)

        assert session.redo() is False
        assert positions(session) == [(0, 0), (10, 0), (5, 10), (40, 40)]

class TestMenuActions:
    def test_select_vertex_shape_is_one_step(self, session, controller):
        assert controller.select_vertex_shape(VertexShape.TRIANGLE) is True
        assert session.chosen_shape == VertexShape.TRIANGLE
        assert session.menu.checked_index == 2
        assert len(session.history.undo_stack) == 1

        session.undo()
        assert session.chosen_shape == VertexShape.CIRCLE
        assert session.menu.checked_index == 0

    def test_select_same_shape_ignored(self, session, controller):
        assert controller.select_vertex_shape(VertexShape.CIRCLE) is False
        assert session.history.can_undo is False

    def test_style_changes(self, session, controller):
        controller.change_size(9)
        controller.change_hull_color("red")
        controller.change_vertex_color("#00ff00")
        controller.change_back_color("gray")

        assert session.polygon.vertex_size == 9
        assert session.polygon.hull_color == QColor("red")
        assert session.polygon.vertex_color == QColor("#00ff00")
        assert session.document.background_color == QColor("gray")

        for _ in range(4):
            session.undo()

        assert session.polygon.vertex_size == 5
        assert session.polygon.hull_color == QColor("black")
        assert session.polygon.vertex_color == QColor("black")
        assert session.document.background_color == QColor("white")

    def test_unchanged_style_not_recorded(self, session, controller):
        assert controller.change_size(session.polygon.vertex_size) is False
        assert controller.change_back_color("white") is False
        assert session.history.can_undo is False

class TestDragInterruptions:
    def test_document_switch_cancels_drag(self, session, controller):
        """Test that a drag never lands in another document's history."""
        first = session.document
        controller.mouse_press(10, 0)
        controller.mouse_move(12, 2)

        second = session.new_document()

        assert not controller.is_dragging
        assert controller.mouse_release() is False
        assert session.history.can_undo is False
        assert [v.pos for v in first.polygon] == [(0, 0), (10, 0), (5, 10)]
        assert second.polygon.count == 0

    def test_undo_cancels_drag_of_removed_vertex(self, session, controller):
        """Test that undoing the insert of a held vertex keeps it redoable."""
        controller.mouse_press(40, 40)
        controller.mouse_press(40, 40)
        controller.mouse_move(50, 50)

        session.undo()

        assert not controller.is_dragging
        assert controller.mouse_release() is False
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]
        assert session.history.undo_description == ""
        assert session.redo() is True
        assert positions(session) == [(0, 0), (10, 0), (5, 10), (40, 40)]

    def test_undo_during_drag_restores_previous_move(self, session, controller):
        """Test that the live drag backs out before the earlier move is undone."""
        controller.mouse_press(10, 0)
        controller.mouse_move(12, 2)
        controller.mouse_release()

        controller.mouse_press(12, 2)
        controller.mouse_move(20, 20)
        session.undo()

        assert positions(session) == [(0, 0), (10, 0), (5, 10)]
        assert controller.mouse_release() is False

        session.redo()
        assert positions(session) == [(0, 0), (12, 2), (5, 10)]

    def test_menu_action_during_drag(self, session, controller):
        controller.mouse_press(10, 0)
        controller.mouse_move(30, 30)

        controller.change_size(8)

        assert not controller.is_dragging
        assert positions(session) == [(0, 0), (10, 0), (5, 10)]
        assert session.history.undo_description == "Change vertex size"

class TestShapeMenuWithoutCheck:
    def test_undo_checks_entry_of_previous_shape(self, session, controller):
        """Test that an unchecked menu falls back to the current shape's entry."""
        session.menu.uncheck_all()

        controller.select_vertex_shape(VertexShape.SQUARE)
        assert session.menu.checked_index == 1

        session.undo()
        assert session.chosen_shape == VertexShape.CIRCLE
        assert session.menu.checked_index == 0
