"""Tests for JSON persistence of building documents."""
import json

import pytest

from building.document import GraphDocument
from constants import APP_NAME
from persistence.json_io import (
    DocumentFormatError, document_to_dict, load_document_from_json, loads_document,
    parse_document, save_document_as_json,
)

from conftest import make_edge, make_floor, make_node


@pytest.fixture
def document():
    floor = make_floor(0)
    return GraphDocument(
        floors=[floor],
        nodes=[make_node("a", 0, 0, 100, 100, type="corridor", capacity=12, safety_level=3),
               make_node("s", 200, 0, 300, 100, z1=0, z2=600, floor_levels=(0, 1), type="stairs")],
        edges=[make_edge("as", "a", "s", traversal_time=4.5, active=False, bidirectional=False)],
    )


class TestDocumentToDict:

    def test_top_level_keys_and_metadata(self, document):
        data = document_to_dict(document)
        assert set(data) == {"metadata", "floors", "nodes", "edges"}
        assert data["metadata"]["app"] == APP_NAME
        assert "generated" in data["metadata"]

    def test_camel_case_fields(self, document):
        data = document_to_dict(document)
        node = data["nodes"][0]
        assert node["boundingBox"] == {"x1": 0, "y1": 0, "z1": 0.0, "x2": 100, "y2": 100, "z2": 300.0}
        assert node["safetyLevel"] == 3
        assert node["floorLevels"] == [0]
        assert data["edges"][0]["traversalTime"] == 4.5
        assert data["floors"][0]["imageUrl"] == ""


class TestParseDocument:

    def test_round_trip(self, document):
        text = json.dumps(document_to_dict(document))
        floors, nodes, edges = loads_document(text)
        assert floors == document.floors
        assert tuple(nodes) == document.nodes
        assert tuple(edges) == document.edges

    @pytest.mark.parametrize("missing", ["floors", "nodes", "edges"])
    def test_missing_required_field(self, document, missing):
        data = document_to_dict(document)
        del data[missing]
        with pytest.raises(DocumentFormatError, match=missing):
            parse_document(data)

    def test_non_list_field(self):
        with pytest.raises(DocumentFormatError):
            parse_document({"floors": [], "nodes": {}, "edges": []})

    def test_top_level_must_be_object(self):
        with pytest.raises(DocumentFormatError):
            parse_document([1, 2, 3])

    def test_malformed_entry(self):
        with pytest.raises(DocumentFormatError):
            parse_document({"floors": [], "nodes": [{"id": "x"}], "edges": []})

    def test_invalid_json_text(self):
        with pytest.raises(DocumentFormatError):
            loads_document("{not json")

    def test_optional_fields_get_defaults(self):
        floors, nodes, edges = parse_document({
            "floors": [],
            "nodes": [{"id": "n", "boundingBox": {"x1": 0, "y1": 0, "z1": 0, "x2": 1, "y2": 1, "z2": 1}}],
            "edges": [{"id": "e", "source": "n", "target": "n"}],
        })
        assert nodes[0].type == "classroom"
        assert nodes[0].floor_levels == ()
        assert edges[0].traversal_time == 10
        assert edges[0].active and edges[0].bidirectional

    @pytest.mark.parametrize("path,value", [
        (("floors", 0, "level"), "1"),
        (("floors", 0, "level"), True),
        (("floors", 0, "level"), 1.5),
        (("floors", 0, "width"), "1000"),
        (("floors", 0, "name"), None),
        (("nodes", 0, "id"), [1]),
        (("nodes", 0, "boundingBox", "x1"), "0"),
        (("nodes", 0, "boundingBox", "z2"), None),
        (("nodes", 0, "floorLevels"), ["0"]),
        (("nodes", 0, "floorLevels"), "01"),
        (("nodes", 0, "capacity"), "12"),
        (("edges", 0, "traversalTime"), "4.5"),
        (("edges", 0, "active"), "yes"),
        (("edges", 0, "source"), 7),
    ])
    def test_wrong_value_types(self, document, path, value):
        data = document_to_dict(document)
        target = data
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = value
        with pytest.raises(DocumentFormatError, match="Invalid JSON format"):
            parse_document(data)

    def test_integral_float_dimensions_accepted(self, document):
        data = document_to_dict(document)
        data["floors"][0]["width"] = 1000.0
        floors, _, _ = parse_document(data)
        assert floors[0].width == 1000.0


class TestFiles:

    def test_save_and_load(self, document, tmp_path):
        path = tmp_path / "graph.json"
        save_document_as_json(document, str(path))
        floors, nodes, edges = load_document_from_json(str(path))
        assert [n.id for n in nodes] == ["a", "s"]
        assert edges[0].active is False

    def test_session_load_rejects_invalid_file(self, populated_session, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"floors": [], "nodes": []}), encoding="utf-8")
        before = populated_session.document.nodes
        with pytest.raises(DocumentFormatError):
            populated_session.load_file(str(path))
        assert populated_session.document.nodes == before
        assert len(populated_session.document.edges) == 1


    def test_non_utf8_file(self, populated_session, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"floors": [{"name": "P\xf8\xedzem\xed"}], "nodes": [], "edges": []}')
        with pytest.raises(DocumentFormatError, match="UTF-8"):
            load_document_from_json(str(path))
        with pytest.raises(DocumentFormatError):
            populated_session.load_file(str(path))
        assert len(populated_session.document.nodes) == 3

    def test_session_rejects_string_level(self, populated_session):
        s = populated_session
        data = document_to_dict(s.document)
        data["floors"][0]["level"] = "1"
        with pytest.raises(DocumentFormatError, match="level"):
            s.load_dict(data)
        assert s.document.floors[0].level == 0
        assert len(s.document.nodes) == 3
        assert [layer.floor.id for layer in s.projected_layers()] == ["floor_0"]
