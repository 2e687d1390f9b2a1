import pytest

from building.document import GraphDocument
from building.models import BoundingBox3D, Floor, GraphEdge, GraphNode
from editor.session import EditorSession


def make_floor(level: int = 0, floor_id: str | None = None, width: int = 1000, height: int = 800) -> Floor:
    return Floor(id=floor_id or f"floor_{level}", level=level, name=f"Level {level}",
                 image_url="", width=width, height=height)


def make_node(node_id: str, x1=0.0, y1=0.0, x2=100.0, y2=100.0, z1=0.0, z2=300.0,
              floor_levels=(0,), **kwargs) -> GraphNode:
    return GraphNode(id=node_id, label=node_id.upper(),
                     bounding_box=BoundingBox3D(x1=x1, y1=y1, x2=x2, y2=y2, z1=z1, z2=z2),
                     floor_levels=tuple(floor_levels), **kwargs)


def make_edge(edge_id: str, source: str, target: str, **kwargs) -> GraphEdge:
    return GraphEdge(id=edge_id, source=source, target=target, **kwargs)


@pytest.fixture
def session():
    """Relace s jedním prázdným patrem (level 0)."""
    return EditorSession(GraphDocument(floors=[make_floor(0)]))


@pytest.fixture
def populated_session():
    """Relace se třemi uzly v přízemí: A a B vedle sebe propojené hranou, C pod A."""
    nodes = [
        make_node("a", 0, 0, 100, 100),
        make_node("b", 200, 0, 300, 100),
        make_node("c", 0, 200, 100, 300),
    ]
    edges = [make_edge("ab", "a", "b")]
    return EditorSession(GraphDocument(floors=[make_floor(0)], nodes=nodes, edges=edges))
