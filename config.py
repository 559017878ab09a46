# Density field
# Horizontal warp: (frequency, amplitude) per octave. Axis 1 samples noise A, B, A
# and axis 2 samples B, A, B.
DISTORTION_OCTAVES = ((0.1, 20.0), (0.2, 10.0), (0.4, 5.0))

# Surface detail: (frequency, amplitude) per octave, sources A, B, A.
# Each term is noise*amplitude + amplitude so the net push is upward.
FINE_NOISE_OCTAVES = ((0.01, 0.02), (0.05, 0.01), (0.1, 0.005))

# Skip fine noise below this density (deep inside open sky).
FINE_NOISE_GATE = -0.5

# Height scalar used by fast mode instead of the biome kernel.
FAST_HEIGHT = 0.2

# average_depth * HEIGHT_FACTOR gives the height scalar.
HEIGHT_FACTOR = 0.5

# Island layer coordinates are this many times coarser than biome coordinates.
BIOME_GRID_RATIO = 2

# Columns whose own biome is flatter than this get a height of exactly 0.
ZERO_TERRAIN_CUTOFF = 0.1

# Radius of the biome averaging disc, in biome cells.
HEIGHT_KERNEL_RADIUS = 3

# Island shape
# Upper crust thickness = radius * (ISLAND_TOP_BASE + ISLAND_TOP_SCALE * height).
ISLAND_TOP_BASE = 0.05
ISLAND_TOP_SCALE = 0.5
# Underside depth = radius * ISLAND_BOTTOM_RATIO.
ISLAND_BOTTOM_RATIO = 0.6
# Density at an island core; above 1 so cores saturate.
ISLAND_DENSITY_GAIN = 2.0
ISLAND_MIN_DENSITY = -1.0

# Biomes
BIOME_CELL_SIZE = 24
CLIMATE_STEP = 180.0

# Sector batches
SECTOR_SIZE = 16
SECTOR_SAMPLES = 64

# Preview
PREVIEW_WIDTH = 256
PREVIEW_SAMPLES = 48
PREVIEW_SCALE = 4.0

# Logging
# Enable ANSI colors in logs.
LOG_COLOR = True

# Minimum level printed: DEBUG, INFO, WARN, ERROR.
LOG_LEVEL = "INFO"

# Log generator construction and batch timings.
LOG_TERRAIN = True

# Log every filled column (very chatty).
LOG_COLUMN_TRACE = False

# Seeds are reduced to this many bits before expansion.
SEED_BITS = 64
SEED_MASK = (1 << SEED_BITS) - 1
SUB_SEED_LIMIT = 2 ** 31 - 1

