"""Tests for the pointer-driven interaction state machine."""
import pytest

from building.document import GraphDocument
from constants import DEFAULT_NODE_LABEL, DragAction, Mode
from editor.session import EditorSession

from conftest import make_floor, make_node


def drag(engine, start, end, modifier=False, steps=3):
    """Stisk, několik pohybů a puštění mezi dvěma body."""
    engine.pointer_down(*start, modifier=modifier)
    (x0, y0), (x1, y1) = start, end
    for i in range(1, steps + 1):
        engine.pointer_move(x0 + (x1 - x0) * i / steps, y0 + (y1 - y0) * i / steps)
    engine.pointer_up(*end, modifier=modifier)


class TestCreateNode:

    def test_drag_creates_node_on_active_floor(self, session):
        session.set_mode(Mode.ADD_NODE)
        drag(session.interaction, (10, 10), (110, 110))

        (node,) = session.document.nodes
        box = node.bounding_box
        assert (box.x1, box.y1, box.x2, box.y2) == (10, 10, 110, 110)
        assert (box.z1, box.z2) == (0, 300)
        assert node.floor_levels == (0,)
        assert node.label == DEFAULT_NODE_LABEL
        assert session.selection.node_ids == {node.id}
        assert len(session.history) == 2

    def test_reverse_drag_is_normalized(self, session):
        session.set_mode(Mode.ADD_NODE)
        drag(session.interaction, (110, 110), (10, 10))
        box = session.document.nodes[0].bounding_box
        assert (box.x1, box.y1, box.x2, box.y2) == (10, 10, 110, 110)

    def test_node_on_upper_floor_gets_its_z_range(self):
        session = EditorSession(GraphDocument(floors=[make_floor(0), make_floor(2)]))
        session.set_active_floor("floor_2")
        session.set_mode(Mode.ADD_NODE)
        drag(session.interaction, (0, 0), (50, 50))
        box = session.document.nodes[0].bounding_box
        assert (box.z1, box.z2) == (600, 900)
        assert session.document.nodes[0].floor_levels == (2,)

    @pytest.mark.parametrize("end", [(15, 15), (10, 10), (20, 200), (200, 20)])
    def test_small_rectangles_are_discarded(self, session, end):
        session.set_mode(Mode.ADD_NODE)
        drag(session.interaction, (10, 10), end)
        assert session.document.nodes == ()
        assert len(session.history) == 1
        assert session.interaction.preview_rect is None

    def test_preview_follows_pointer(self, session):
        engine = session.interaction
        session.set_mode(Mode.ADD_NODE)
        engine.pointer_down(50, 50)
        engine.pointer_move(20, 80)
        assert engine.preview_rect == (20, 50, 30, 30)
        assert engine.drag_action == DragAction.CREATE

    def test_without_active_floor_nothing_happens(self):
        session = EditorSession()
        session.set_mode(Mode.ADD_NODE)
        assert session.interaction.pointer_down(10, 10) is False
        session.interaction.pointer_up(200, 200)
        assert session.document.nodes == ()


class TestMoveAndResize:

    def test_drag_moves_selection_with_single_commit(self, populated_session):
        s = populated_session
        drag(s.interaction, (50, 50), (80, 60))
        box = s.document.get_node("a").bounding_box
        assert (box.x1, box.y1, box.x2, box.y2) == pytest.approx((30, 10, 130, 110))
        assert s.selection.node_ids == {"a"}
        assert len(s.history) == 2

    def test_group_move_keeps_selection(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"a", "b"})
        drag(s.interaction, (250, 50), (250, 100))
        assert s.document.get_node("a").bounding_box.y1 == pytest.approx(50)
        assert s.document.get_node("b").bounding_box.y1 == pytest.approx(50)
        assert s.document.get_node("c").bounding_box.y1 == 200
        assert len(s.history) == 2

    def test_click_without_movement_does_not_commit(self, populated_session):
        s = populated_session
        s.interaction.pointer_down(50, 50)
        s.interaction.pointer_move(50, 50)
        s.interaction.pointer_up(50, 50)
        assert len(s.history) == 1
        assert s.selection.node_ids == {"a"}

    def test_resize_from_corner_handle(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"a"})
        drag(s.interaction, (100, 100), (150, 130))
        box = s.document.get_node("a").bounding_box
        assert (box.x1, box.y1, box.x2, box.y2) == pytest.approx((0, 0, 150, 130))
        assert len(s.history) == 2

    def test_resize_never_goes_below_minimum(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"a"})
        drag(s.interaction, (100, 100), (-50, -50), steps=5)
        box = s.document.get_node("a").bounding_box
        assert box.width >= 10
        assert box.height >= 10
        assert (box.x1, box.y1) == (0, 0)

    def test_handles_only_for_single_selection_in_select_mode(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"a"})
        assert s.interaction.resize_handles_visible()
        s.selection.set_nodes({"a", "b"})
        assert not s.interaction.resize_handles_visible()
        s.selection.set_nodes({"a"})
        s.set_mode(Mode.ADD_EDGE)
        assert not s.interaction.resize_handles_visible()


class TestSelection:

    def test_click_selects_and_modifier_toggles(self, populated_session):
        s = populated_session
        engine = s.interaction
        engine.pointer_down(50, 50)
        engine.pointer_up(50, 50)
        engine.pointer_down(250, 50, modifier=True)
        engine.pointer_up(250, 50, modifier=True)
        assert s.selection.node_ids == {"a", "b"}
        engine.pointer_down(50, 50, modifier=True)
        engine.pointer_up(50, 50, modifier=True)
        assert s.selection.node_ids == {"b"}

    def test_box_select_replaces_selection(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"c"})
        drag(s.interaction, (-10, -10), (250, 50))
        assert s.selection.node_ids == {"a", "b"}
        assert s.interaction.selection_rect is None

    def test_box_select_with_modifier_unions(self, populated_session):
        s = populated_session
        drag(s.interaction, (-10, -10), (250, 50))
        drag(s.interaction, (-10, 190), (50, 250), modifier=True)
        assert s.selection.node_ids == {"a", "b", "c"}

    def test_click_on_empty_canvas_clears_selection(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"a"})
        s.interaction.pointer_down(500, 500)
        s.interaction.pointer_up(500, 500)
        assert s.selection.is_empty()
        assert len(s.history) == 1

    def test_click_near_edge_selects_it(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"c"})
        s.interaction.pointer_down(150, 52)
        s.interaction.pointer_up(150, 52)
        assert s.selection.edge_id == "ab"
        assert s.selection.node_ids == set()
        assert s.interaction.drag_action == DragAction.IDLE

    def test_clicking_node_clears_edge_selection(self, populated_session):
        s = populated_session
        s.selection.edge_id = "ab"
        s.interaction.pointer_down(50, 50)
        s.interaction.pointer_up(50, 50)
        assert s.selection.edge_id is None


class TestCreateEdge:

    def test_two_clicks_create_edge(self, populated_session):
        s = populated_session
        s.set_mode(Mode.ADD_EDGE)
        s.interaction.pointer_down(50, 250)
        assert s.interaction.edge_source_id == "c"
        assert s.selection.node_ids == {"c"}
        s.interaction.pointer_down(250, 50)

        edge = s.document.edges[-1]
        assert (edge.source, edge.target) == ("c", "b")
        assert edge.traversal_time == 10
        assert edge.capacity == 100
        assert edge.active and edge.bidirectional
        assert s.interaction.edge_source_id is None
        assert len(s.history) == 2

    def test_clicking_source_again_cancels(self, populated_session):
        s = populated_session
        s.set_mode(Mode.ADD_EDGE)
        s.interaction.pointer_down(50, 50)
        s.interaction.pointer_down(50, 50)
        assert len(s.document.edges) == 1
        assert s.interaction.edge_source_id is None
        assert len(s.history) == 1

    def test_deleted_source_is_replaced(self, populated_session):
        s = populated_session
        s.set_mode(Mode.ADD_EDGE)
        s.interaction.pointer_down(50, 250)
        s.delete_nodes(["c"])
        s.interaction.pointer_down(250, 50)
        assert s.interaction.edge_source_id == "b"
        assert len(s.document.edges) == 1

    def test_mode_switch_and_escape_cancel_latch(self, populated_session):
        s = populated_session
        s.set_mode(Mode.ADD_EDGE)
        s.interaction.pointer_down(50, 50)
        s.set_mode(Mode.SELECT)
        assert s.interaction.edge_source_id is None

        s.set_mode(Mode.ADD_EDGE)
        s.interaction.pointer_down(50, 50)
        assert s.interaction.cancel_edge() is True
        assert s.interaction.cancel_edge() is False

    def test_pending_line_redraws_on_move(self, populated_session):
        s = populated_session
        s.set_mode(Mode.ADD_EDGE)
        assert s.interaction.pointer_move(10, 10) is False
        s.interaction.pointer_down(50, 50)
        assert s.interaction.pointer_move(400, 400) is True
        assert s.interaction.pointer_pos == (400, 400)


def test_unknown_mode_is_rejected(session):
    with pytest.raises(ValueError):
        session.set_mode("lasso")


def test_hidden_floor_nodes_are_not_hit(populated_session):
    s = populated_session
    s.document.add_node(make_node("upper", 400, 400, 500, 500, z1=300, z2=600, floor_levels=(1,)))
    s.interaction.pointer_down(450, 450)
    s.interaction.pointer_up(450, 450)
    assert s.selection.is_empty()
