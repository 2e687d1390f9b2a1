"""Tests for EditorSession: history, deletion, property edits, floors and imports."""
import pytest

from ai.graph_import import ExtractionError
from building.document import GraphDocument
from building.models import BoundingBox3D
from editor.session import EditorSession
from persistence.json_io import DocumentFormatError

from conftest import make_floor


class TestHistory:

    def test_fresh_session_has_nothing_to_undo(self, populated_session):
        assert not populated_session.can_undo()
        assert not populated_session.can_redo()
        assert populated_session.undo() is False
        assert populated_session.redo() is False

    def test_undo_restores_node_and_cascaded_edge(self, populated_session):
        s = populated_session
        assert s.delete_nodes(["a"])
        assert not s.document.has_node("a")
        assert s.document.edges == ()

        assert s.undo()
        assert s.document.has_node("a")
        assert [e.id for e in s.document.edges] == ["ab"]
        assert s.can_redo()

        assert s.redo()
        assert not s.document.has_node("a")
        assert s.document.edges == ()

    def test_undo_clears_selection(self, populated_session):
        s = populated_session
        s.update_node_properties("b", label="Lobby")
        s.selection.set_nodes({"a", "b"})
        s.undo()
        assert s.selection.is_empty()

    def test_redo_purges_missing_ids(self, populated_session):
        s = populated_session
        s.delete_nodes(["a"])
        s.undo()
        s.selection.set_nodes({"a", "b"})
        s.selection.edge_id = None
        s.redo()
        assert s.selection.node_ids == {"b"}

    def test_commit_after_undo_drops_redo(self, populated_session):
        s = populated_session
        s.delete_nodes(["a"])
        s.undo()
        s.delete_nodes(["c"])
        assert not s.can_redo()
        assert s.document.has_node("a")

    def test_undo_cancels_pending_edge(self, populated_session):
        s = populated_session
        s.delete_nodes(["c"])
        s.set_mode("add-edge")
        s.interaction.pointer_down(50, 50)
        s.undo()
        assert s.interaction.edge_source_id is None


class TestDelete:

    def test_delete_selected_nodes_is_one_commit(self, populated_session):
        s = populated_session
        s.selection.set_nodes({"a", "b"})
        assert s.delete_selected()
        assert [n.id for n in s.document.nodes] == ["c"]
        assert s.document.edges == ()
        assert s.selection.is_empty()
        assert len(s.history) == 2

    def test_delete_selected_edge(self, populated_session):
        s = populated_session
        s.selection.edge_id = "ab"
        assert s.delete_selected()
        assert s.document.edges == ()
        assert len(s.document.nodes) == 3
        assert s.selection.edge_id is None

    def test_nothing_selected(self, populated_session):
        assert populated_session.delete_selected() is False
        assert len(populated_session.history) == 1

    def test_unknown_ids_are_ignored(self, populated_session):
        assert populated_session.delete_nodes(["zzz"]) is False
        assert populated_session.delete_edge("zzz") is False
        assert len(populated_session.history) == 1


class TestNodeProperties:

    def test_change_commits_once(self, populated_session):
        s = populated_session
        assert s.update_node_properties("a", label="Room 101", capacity=25)
        node = s.document.get_node("a")
        assert (node.label, node.capacity) == ("Room 101", 25)
        assert len(s.history) == 2

    def test_unchanged_value_does_not_commit(self, populated_session):
        assert populated_session.update_node_properties("a", label="A") is False
        assert len(populated_session.history) == 1

    def test_unknown_node(self, populated_session):
        assert populated_session.update_node_properties("zzz", label="x") is False

    def test_box_is_normalized(self, populated_session):
        s = populated_session
        s.update_node_properties("a", bounding_box=BoundingBox3D(x1=100, y1=100, x2=0, y2=0, z1=0, z2=300))
        box = s.document.get_node("a").bounding_box
        assert (box.x1, box.y1, box.x2, box.y2) == (0, 0, 100, 100)
        assert len(s.history) == 1

    def test_z_change_recomputes_floor_levels(self, populated_session):
        s = populated_session
        s.update_node_properties("a", bounding_box=BoundingBox3D(x1=0, y1=0, x2=100, y2=100, z1=0, z2=600))
        assert s.document.get_node("a").floor_levels == (0, 1)

    def test_explicit_floor_levels_are_sorted(self, populated_session):
        s = populated_session
        s.update_node_properties("a", floor_levels=[2, 0])
        assert s.document.get_node("a").floor_levels == (0, 2)

    @pytest.mark.parametrize("fields", [
        {"colour": "red"},
        {"type": "garage"},
        {"capacity": -1},
    ])
    def test_invalid_values(self, populated_session, fields):
        with pytest.raises(ValueError):
            populated_session.update_node_properties("a", **fields)
        assert len(populated_session.history) == 1


class TestEdgeProperties:

    def test_toggle_direction(self, populated_session):
        s = populated_session
        assert s.update_edge_properties("ab", bidirectional=False, traversal_time=3)
        edge = s.document.get_edge("ab")
        assert edge.bidirectional is False
        assert edge.traversal_time == 3
        assert len(s.history) == 2

    def test_unchanged(self, populated_session):
        assert populated_session.update_edge_properties("ab", active=True) is False

    @pytest.mark.parametrize("fields", [
        {"traversal_time": 0},
        {"traversal_time": -2},
        {"capacity": -5},
        {"weight": 1},
    ])
    def test_invalid_values(self, populated_session, fields):
        with pytest.raises(ValueError):
            populated_session.update_edge_properties("ab", **fields)


class TestFloors:

    def test_first_added_floor_becomes_active(self):
        s = EditorSession()
        assert s.active_floor is None
        s.add_floor(make_floor(0))
        s.add_floor(make_floor(1))
        assert s.active_floor_id == "floor_0"

    def test_floors_are_not_in_history(self):
        s = EditorSession()
        s.add_floor(make_floor(0))
        assert len(s.history) == 1
        assert not s.can_undo()

    def test_removing_active_floor(self, populated_session):
        s = populated_session
        assert s.remove_floor("floor_0")
        assert s.active_floor is None
        assert len(s.document.nodes) == 3
        assert s.remove_floor("floor_0") is False

    def test_set_active_floor_ignores_unknown(self, populated_session):
        populated_session.set_active_floor("nope")
        assert populated_session.active_floor_id == "floor_0"

    def test_update_floor_level(self, populated_session):
        s = populated_session
        assert s.update_floor_level("floor_0", 2)
        assert s.active_floor.level == 2
        assert s.update_floor_level("floor_0", 2) is False
        assert s.update_floor_level("nope", 1) is False


class TestImport:

    def test_load_dict_replaces_document_and_resets_history(self, populated_session):
        s = populated_session
        data = s.to_dict()
        s.delete_nodes(["a"])
        s.selection.set_nodes({"b"})

        s.load_dict(data)
        assert [n.id for n in s.document.nodes] == ["a", "b", "c"]
        assert len(s.history) == 1
        assert not s.can_undo()
        assert s.selection.is_empty()
        assert s.active_floor_id == "floor_0"

    def test_invalid_import_leaves_state_untouched(self, populated_session):
        s = populated_session
        s.delete_nodes(["c"])
        with pytest.raises(DocumentFormatError):
            s.load_dict({"floors": [], "nodes": []})
        assert [n.id for n in s.document.nodes] == ["a", "b"]
        assert len(s.history) == 2


class TestMergeExtraction:

    DATA = {
        "nodes": [
            {"label": "Room 101", "type": "classroom", "box_2d": [0, 0, 100, 100]},
            {"label": "Stairs", "type": "staircase", "box_2d": [0, 200, 100, 300]},
        ],
        "connections": [{"source_label": "Room 101", "target_label": "Stairs"}],
    }

    def test_merge_is_single_commit(self, populated_session):
        s = populated_session
        report = s.merge_extraction(self.DATA)
        assert len(report.nodes) == 2
        assert len(s.document.nodes) == 5
        assert len(s.document.edges) == 2
        assert len(s.history) == 2

        s.undo()
        assert len(s.document.nodes) == 3
        assert len(s.document.edges) == 1

    def test_merged_nodes_land_on_target_floor(self):
        s = EditorSession(GraphDocument(floors=[make_floor(0), make_floor(1)]))
        floor = s.document.get_floor("floor_1")
        report = s.merge_extraction(self.DATA, floor)
        assert all(n.floor_levels == (1,) for n in report.nodes)
        assert all(n.bounding_box.z1 == 300 for n in report.nodes)

    @pytest.mark.parametrize("data", [
        None, {}, {"nodes": []}, "nodes", {"nodes": [{"label": "x"}]},
        {"nodes": ["Room 101"]},
        {"nodes": {"Room 101": {}}},
        {"nodes": [{"label": "A", "box_2d": [0, 0, 10, 10]}], "connections": ["A-B"]},
    ])
    def test_unusable_results_change_nothing(self, populated_session, data):
        s = populated_session
        with pytest.raises(ExtractionError):
            s.merge_extraction(data)
        assert len(s.document.nodes) == 3
        assert len(s.history) == 1

    def test_requires_a_floor(self):
        with pytest.raises(ExtractionError):
            EditorSession().merge_extraction(self.DATA)
