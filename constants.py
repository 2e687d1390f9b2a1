"""Globální konstanty pro Building Graph editor."""
from __future__ import annotations

# === Patra a prostorové jednotky ===
FLOOR_HEIGHT = 300  # Výška jednoho patra ve světových jednotkách (z)
MIN_BOX_SIZE = 10  # Minimální šířka/výška boxu uzlu (create i resize)

# === Konstanty pro resize prvků ===
HANDLE_SIZE = 8  # Velikost táhla pro změnu velikosti (v pixelech obrázku)
HANDLE_ROLES = ("nw", "ne", "sw", "se")  # Pouze rohová táhla
EDGE_HIT_TOLERANCE = 7.5  # Polovina šířky „neviditelné“ čáry pro klik na hranu

# === Výchozí hodnoty nových prvků ===
DEFAULT_NODE_LABEL = "New Room"
DEFAULT_NODE_CAPACITY = 30
DEFAULT_SAFETY_LEVEL = 1
DEFAULT_EDGE_CAPACITY = 100
DEFAULT_TRAVERSAL_TIME = 10

# Výchozí hodnoty pro uzly a hrany z AI extrakce
EXTRACTED_NODE_CAPACITY = 20
EXTRACTED_TRAVERSAL_TIME = 5
EXTRACTED_LABEL = "Unknown"

# Měřítko normalizovaných souřadnic z AI (box_2d je v rozsahu 0–1000)
NORMALIZED_SCALE = 1000

# === Kamera 3D pohledu: (min, max, výchozí) ===
CAMERA_ANGLE = (0.0, 360.0, 45.0)
CAMERA_TILT = (0.1, 1.0, 0.5)
CAMERA_ZOOM = (0.1, 2.0, 0.5)
CAMERA_SEPARATION = (0.0, 5.0, 1.5)
DEFAULT_CENTER = (500.0, 500.0)  # Střed rotace, pokud nejsou žádná patra
VIEW_BOX = 2000  # Velikost „viewBoxu“ 3D pohledu
VIEW_OFFSET_Y = 200  # Posun scény dolů ve 3D pohledu
LABEL_ZOOM_THRESHOLD = 0.6  # Popisky uzlů ve 3D jen při větším zoomu

# === Zoom 2D editoru ===
EDITOR_ZOOM_MIN = 0.2
EDITOR_ZOOM_MAX = 3.0

# === Persistence ===
APP_NAME = "Building Graph Architect"
DEFAULT_JSON_NAME = "building_graph.json"

# === AI ===
DEFAULT_AI_MODEL = "gpt-4o"
ENHANCE_THRESHOLD = 210  # Práh pro zvýraznění zdí (tmavší = zeď)
ENHANCE_JPEG_QUALITY = 80


# === Typy uzlů ===
class NodeType:
    """Výčet typů prostorů (uzlů grafu)."""
    CLASSROOM = "classroom"
    CORRIDOR = "corridor"
    STAIRS = "stairs"
    OUTDOOR = "outdoor"
    OFFICE = "office"
    SERVICE = "service"
    BATHROOM = "bathroom"


NODE_TYPES = [
    NodeType.CLASSROOM, NodeType.CORRIDOR, NodeType.STAIRS, NodeType.OUTDOOR,
    NodeType.OFFICE, NodeType.SERVICE, NodeType.BATHROOM,
]


# === Režimy editoru ===
class Mode:
    """Výčet možných režimů interakce v editoru."""
    SELECT = "select"  # Výběr, přesouvání a změna velikosti prvků
    ADD_NODE = "add-node"  # Kreslení nových uzlů tažením
    ADD_EDGE = "add-edge"  # Propojování uzlů hranami


MODES = (Mode.SELECT, Mode.ADD_NODE, Mode.ADD_EDGE)


# === Stavy tažení (drag) ===
class DragAction:
    """Vnitřní stav stroje interakcí během tažení myší."""
    IDLE = "idle"
    MOVE = "move"
    RESIZE = "resize"
    CREATE = "create"
    SELECT_BOX = "select-box"
