"""Tests for the oblique projection and floor layering."""
import pytest

from constants import DEFAULT_CENTER
from geometry.projection import (
    Camera, Projector, apply_affine, build_layers, project_layers, rotation_center,
)

from conftest import make_edge, make_floor, make_node


class TestCamera:

    def test_defaults(self):
        camera = Camera()
        assert (camera.angle, camera.tilt, camera.zoom, camera.separation) == (45.0, 0.5, 0.5, 1.5)

    def test_out_of_range_values_are_clamped(self):
        camera = Camera(angle=400, tilt=0, zoom=5, separation=-1)
        assert camera.angle == pytest.approx(40)
        assert camera.tilt == 0.1
        assert camera.zoom == 2.0
        assert camera.separation == 0.0

    def test_full_turn_is_kept(self):
        assert Camera(angle=360).angle == 360

    def test_with_changes_clamps_too(self):
        camera = Camera().with_changes(tilt=3)
        assert camera.tilt == 1.0
        assert camera.angle == 45.0


class TestProjector:

    def test_identity_camera_only_recenters(self):
        projector = Projector(Camera(angle=0, tilt=1, separation=0), center=(500, 400))
        assert projector.project(600, 450, 0) == (100, 50)
        assert projector.project(600, 450, 900) == (100, 50)

    def test_tilt_applies_to_y_only(self):
        projector = Projector(Camera(angle=0, tilt=0.5, separation=0), center=(0, 0))
        assert projector.project(100, 100, 0) == (100, 50)

    def test_rotation_by_quarter_turn(self):
        projector = Projector(Camera(angle=90, tilt=1, separation=0), center=(0, 0))
        x, y = projector.project(100, 0, 0)
        assert x == pytest.approx(0, abs=1e-9)
        assert y == pytest.approx(100)

    def test_height_lifts_point_by_separation(self):
        projector = Projector(Camera(angle=0, tilt=0.5, separation=1.5), center=(500, 400))
        assert projector.project(500, 400, 300) == (0, -450)

    @pytest.mark.parametrize("angle,tilt,separation", [(0, 1, 0), (37, 0.6, 2), (200, 0.1, 5)])
    def test_floor_transform_matches_point_projection(self, angle, tilt, separation):
        projector = Projector(Camera(angle=angle, tilt=tilt, separation=separation), center=(400, 300))
        matrix = projector.floor_transform(600)
        for x, y in [(0, 0), (800, 0), (123, 456), (800, 600)]:
            assert apply_affine(matrix, x, y) == pytest.approx(projector.project(x, y, 600))

    def test_for_floors_uses_common_center(self):
        floors = [make_floor(0, width=1000, height=800), make_floor(1, width=600, height=1200)]
        assert Projector.for_floors(floors, Camera()).center == (500, 600)


def test_rotation_center_without_floors():
    assert rotation_center([]) == DEFAULT_CENTER


class TestLayers:

    @pytest.fixture
    def building(self):
        floors = [make_floor(1), make_floor(0)]
        nodes = [
            make_node("a", 0, 0, 100, 100, z1=0, z2=300),
            make_node("stairs", 200, 0, 300, 100, z1=250, z2=650, floor_levels=(0, 1, 2)),
            make_node("b", 400, 0, 500, 100, z1=300, z2=600, floor_levels=(1,)),
            make_node("roof", 0, 0, 50, 50, z1=900, z2=1200, floor_levels=(3,)),
        ]
        edges = [
            make_edge("ab", "a", "b"),
            make_edge("a_stairs", "a", "stairs"),
            make_edge("dangling", "a", "missing"),
        ]
        return floors, nodes, edges

    def test_layers_sorted_by_level(self, building):
        layers = build_layers(*building)
        assert [layer.floor.level for layer in layers] == [0, 1]
        assert [layer.z for layer in layers] == [0, 300]

    def test_nodes_assigned_by_vertical_midpoint(self, building):
        ground, first = build_layers(*building)
        assert [n.id for n in ground.nodes] == ["a"]
        assert [n.id for n in first.nodes] == ["stairs", "b"]

    def test_edges_assigned_by_higher_endpoint(self, building):
        ground, first = build_layers(*building)
        assert [e.id for e in ground.edges] == ["a_stairs"]
        assert [e.id for e in first.edges] == ["ab"]

    def test_projected_scene(self, building):
        floors, nodes, edges = building
        camera = Camera(angle=30, tilt=0.7, separation=2)
        projector = Projector.for_floors(floors, camera)
        ground, first = project_layers(floors, nodes, edges, camera)

        assert first.transform == pytest.approx(projector.floor_transform(300))

        b = first.nodes[1]
        assert b.node.id == "b"
        assert b.corners[0] == pytest.approx(projector.project(400, 0, 300))
        assert b.corners[2] == pytest.approx(projector.project(500, 100, 300))
        assert b.label_pos == pytest.approx(projector.project(450, 50, 300))

        (edge,) = first.edges
        assert edge.start == pytest.approx(projector.project(50, 50, 0))
        assert edge.end == pytest.approx(projector.project(450, 50, 300))

    def test_stairs_footprint_drawn_at_layer_height(self, building):
        floors, nodes, edges = building
        camera = Camera()
        projector = Projector.for_floors(floors, camera)
        _, first = project_layers(floors, nodes, edges, camera)
        stairs = first.nodes[0]
        assert stairs.corners[0] == pytest.approx(projector.project(200, 0, 300))

    def test_projection_does_not_touch_document(self, populated_session):
        before = populated_session.document.nodes
        populated_session.set_camera(angle=120, zoom=9)
        layers = populated_session.projected_layers()
        assert populated_session.camera.zoom == 2.0
        assert len(layers) == 1
        assert populated_session.document.nodes == before
