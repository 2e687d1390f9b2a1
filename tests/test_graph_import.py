"""Tests for turning AI extraction results into graph elements."""
import itertools

import pytest

from ai.graph_import import (
    ExtractionError, MergeReport, build_graph_from_extraction, map_node_type, normalized_box_to_pixels,
)
from constants import NodeType

from conftest import make_floor


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}_{next(counter)}"


@pytest.mark.parametrize("text,expected", [
    ("Corridor", NodeType.CORRIDOR),
    ("outdoor corridor", NodeType.CORRIDOR),
    ("Staircase", NodeType.STAIRS),
    ("outside terrace", NodeType.OUTDOOR),
    ("Head office", NodeType.OFFICE),
    ("WC", NodeType.BATHROOM),
    ("Restroom", NodeType.BATHROOM),
    ("service", NodeType.SERVICE),
    ("lab", NodeType.CLASSROOM),
    (None, NodeType.CLASSROOM),
    ("", NodeType.CLASSROOM),
])
def test_map_node_type(text, expected):
    assert map_node_type(text) == expected


def test_normalized_box_uses_ymin_xmin_order():
    floor = make_floor(0, width=1000, height=800)
    assert normalized_box_to_pixels([100, 200, 500, 800], floor) == pytest.approx((200, 80, 800, 400))


class TestBuildGraph:

    def test_nodes_get_floor_range_and_defaults(self, ids):
        floor = make_floor(1, width=2000, height=1000)
        report = build_graph_from_extraction(
            {"nodes": [{"label": "Room 101", "type": "classroom", "box_2d": [0, 0, 500, 250]}]},
            floor, id_factory=ids,
        )
        (node,) = report.nodes
        assert node.id == "node_1"
        assert node.label == "Room 101"
        assert node.capacity == 20
        assert node.safety_level == 1
        assert node.floor_levels == (1,)
        box = node.bounding_box
        assert (box.x1, box.y1, box.x2, box.y2) == pytest.approx((0, 0, 500, 500))
        assert (box.z1, box.z2) == (300, 600)

    def test_missing_label_and_inverted_box(self, ids):
        report = build_graph_from_extraction(
            {"nodes": [{"type": "office", "box_2d": [500, 500, 100, 100]}]},
            make_floor(0), id_factory=ids,
        )
        node = report.nodes[0]
        assert node.label == "Unknown"
        assert node.bounding_box.x1 < node.bounding_box.x2
        assert node.bounding_box.y1 < node.bounding_box.y2

    def test_connections_resolved_by_label(self, ids):
        data = {
            "nodes": [
                {"label": "Room 101", "type": "classroom", "box_2d": [0, 0, 100, 100]},
                {"label": "Corridor A", "type": "corridor", "box_2d": [100, 0, 200, 1000]},
            ],
            "connections": [
                {"source_label": "Room 101", "target_label": "Corridor A"},
                {"source_label": "Room 101", "target_label": "Room 999"},
            ],
        }
        report = build_graph_from_extraction(data, make_floor(0), id_factory=ids)
        (edge,) = report.edges
        assert (edge.source, edge.target) == ("node_1", "node_2")
        assert edge.traversal_time == 5
        assert edge.capacity == 100
        assert edge.active and edge.bidirectional
        assert report.dropped_connections == 1
        assert report.summary() == "2 nodes, 1 edges (1 connections dropped)"

    def test_missing_connections_key(self, ids):
        report = build_graph_from_extraction(
            {"nodes": [{"label": "X", "box_2d": [0, 0, 10, 10]}]}, make_floor(0), id_factory=ids)
        assert report.edges == []
        assert report.summary() == "1 nodes, 0 edges"

    def test_missing_box_raises(self, ids):
        with pytest.raises(ExtractionError, match="box_2d"):
            build_graph_from_extraction({"nodes": [{"label": "X"}]}, make_floor(0), id_factory=ids)

    @pytest.mark.parametrize("box", [[0, 0, 10], "0,0,10,10", [0, "0", 10, 10], [0, 0, True, 10], None])
    def test_invalid_box_raises(self, ids, box):
        with pytest.raises(ExtractionError):
            build_graph_from_extraction({"nodes": [{"label": "X", "box_2d": box}]}, make_floor(0), id_factory=ids)

    @pytest.mark.parametrize("data", [
        {"nodes": ["Room 101"]},
        {"nodes": {"Room 101": {}}},
        {"nodes": [{"label": "A", "box_2d": [0, 0, 10, 10]}], "connections": ["A-B"]},
        {"nodes": [{"label": "A", "box_2d": [0, 0, 10, 10]}], "connections": {"A": "B"}},
    ])
    def test_items_must_be_objects(self, ids, data):
        with pytest.raises(ExtractionError, match="list of objects"):
            build_graph_from_extraction(data, make_floor(0), id_factory=ids)

    def test_non_string_labels_are_text(self, ids):
        data = {
            "nodes": [{"label": 101, "box_2d": [0, 0, 10, 10]}, {"label": "  ", "box_2d": [0, 10, 10, 20]}],
            "connections": [{"source_label": 101, "target_label": "101"}],
        }
        report = build_graph_from_extraction(data, make_floor(0), id_factory=ids)
        assert [n.label for n in report.nodes] == ["101", "Unknown"]
        assert [(e.source, e.target) for e in report.edges] == [("node_1", "node_1")]


def test_empty_report_summary():
    assert MergeReport().summary() == "0 nodes, 0 edges"
