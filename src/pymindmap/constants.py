"""Default values shared by the data model and the layout optimizer."""

# Node
NODE_MIN_WIDTH = 200.0
NODE_MIN_HEIGHT = 75.0
NODE_DEFAULT_CORNER_RADIUS = 5
NODE_DEFAULT_COLOR = "#ffffff"
NODE_DEFAULT_TEXT_COLOR = "#000000"

# Mind map document
MIND_MAP_DEFAULT_BACKGROUND_COLOR = "#bbbbbb"
MIND_MAP_DEFAULT_EDGE_COLOR = "#ff0000"
MIND_MAP_DEFAULT_GRID_COLOR = "#aaaaaa"
MIND_MAP_DEFAULT_EDGE_WIDTH = 2.0
MIND_MAP_DEFAULT_TEXT_SIZE = 11

# Layout optimizer
LAYOUT_OVERLAP_WEIGHT = 1.0
LAYOUT_EDGE_LENGTH_WEIGHT = 10.0
LAYOUT_ASPECT_RATIO_WEIGHT = 0.1
LAYOUT_CROSSING_WEIGHT = 100.0
LAYOUT_EDGE_STRETCH_WEIGHT = 0.01
LAYOUT_MAX_SWEEPS = 200
LAYOUT_COOLING = 0.95
LAYOUT_TEMPERATURE_SCALE = 0.1
LAYOUT_MIN_TEMPERATURE_RATIO = 1e-3
LAYOUT_LARGE_GRAPH_THRESHOLD = 500
