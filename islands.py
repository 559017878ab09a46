'''
islands.py -- floating island layers

An island layer places islands of one characteristic size and answers density
queries for them. Work is split per column:

    layer.reset_cache()
    layer.refresh_for_column(px, pz)        # placement, once per column
    layer.density(px, py, pz, height)       # cheap, once per vertical sample

Each layer owns its cache; never share a layer between threads.
'''
import math
from collections import namedtuple

import numpy

import config
import util

IslandLayerOptions = namedtuple('IslandLayerOptions', [
    'name',
    'spacing',          # grid cell size, one island per cell at most
    'radius_min',
    'radius_max',
    'center_y',         # average height of island centres
    'height_variation', # centres vary by +/- this much
    'coverage',         # chance that a cell holds an island
    'central_island',   # always put an island of radius_max on the origin
])

LARGE_ISLANDS = IslandLayerOptions('large', 300.0, 50.0, 100.0, 70.0, 10.0, 0.6, False)
MEDIUM_ISLANDS = IslandLayerOptions('medium', 150.0, 25.0, 50.0, 70.0, 20.0, 0.7, True)
SMALL_ISLANDS = IslandLayerOptions('small', 60.0, 10.0, 20.0, 70.0, 30.0, 0.8, False)

DEFAULT_LAYERS = (LARGE_ISLANDS, MEDIUM_ISLANDS, SMALL_ISLANDS)

# salts for the per-cell random draws
_PRESENCE, _RADIUS, _JITTER_X, _JITTER_Z, _HEIGHT = range(5)


def validate_options(options):
    if not options.spacing > 0:
        raise ValueError(f"{options.name}: spacing must be positive, got {options.spacing}")
    if not 0 < options.radius_min <= options.radius_max:
        raise ValueError(f"{options.name}: need 0 < radius_min <= radius_max, "
                         f"got {options.radius_min}, {options.radius_max}")
    if 2 * options.radius_max > options.spacing:
        raise ValueError(f"{options.name}: islands of radius {options.radius_max} "
                         f"do not fit cells of {options.spacing}")
    if not 0.0 <= options.coverage <= 1.0:
        raise ValueError(f"{options.name}: coverage must be in [0, 1], got {options.coverage}")
    if options.height_variation < 0:
        raise ValueError(f"{options.name}: height_variation must not be negative")


class IslandLayer(object):
    '''Per-column island density contract.'''

    def reset_cache(self):
        raise NotImplementedError

    def refresh_for_column(self, px, pz):
        raise NotImplementedError

    def density(self, px, py, pz, height):
        raise NotImplementedError

    def density_column(self, px, py, pz, height):
        '''density() for an array of vertical positions.'''
        py = numpy.asarray(py, dtype=numpy.float64)
        return numpy.array([self.density(px, y, pz, height) for y in py.tolist()],
                           dtype=numpy.float64).reshape(py.shape)


class JitterIslandLayer(IslandLayer):
    '''
    Islands on a jittered square grid.

    Cell (gx, gz) covers [(g-0.5)*spacing, (g+0.5)*spacing) on each axis and
    holds at most one island whose disc stays inside the cell. An island is
    an ellipsoid-like blob: a thin upper crust whose thickness grows with the
    column height scalar, and a deeper rounded underside.
    '''

    def __init__(self, seed, options):
        validate_options(options)
        self.seed = int(seed)
        self.options = options
        # Candidate islands for the current column, None until refreshed.
        self._h = None
        self._cy = None
        self._radius = None
        self._gain = float(getattr(config, 'ISLAND_DENSITY_GAIN', 2.0))
        self._min_density = float(getattr(config, 'ISLAND_MIN_DENSITY', -1.0))
        # islands with h beyond this cannot rise above the minimum density
        self._reach = 1.0 - self._min_density / self._gain

    def __repr__(self):
        return f"JitterIslandLayer({self.options.name!r}, seed={self.seed})"

    def _cell_random(self, gx, gz, salt):
        return util.cell_random(gx, gz, salt, self.seed)

    def cell_of(self, px, pz):
        spacing = self.options.spacing
        return int(math.floor(px / spacing + 0.5)), int(math.floor(pz / spacing + 0.5))

    def cell_island(self, gx, gz):
        '''
        Island placed in cell (gx, gz) as (x, y, z, radius), or None when
        the cell is empty.
        '''
        opts = self.options
        if opts.central_island and gx == 0 and gz == 0:
            return 0.0, float(opts.center_y), 0.0, float(opts.radius_max)
        if self._cell_random(gx, gz, _PRESENCE) >= opts.coverage:
            return None
        radius = opts.radius_min + (opts.radius_max - opts.radius_min) * self._cell_random(gx, gz, _RADIUS)
        slack = 0.5 * opts.spacing - radius
        x = gx * opts.spacing + (2.0 * self._cell_random(gx, gz, _JITTER_X) - 1.0) * slack
        z = gz * opts.spacing + (2.0 * self._cell_random(gx, gz, _JITTER_Z) - 1.0) * slack
        y = opts.center_y + (2.0 * self._cell_random(gx, gz, _HEIGHT) - 1.0) * opts.height_variation
        return x, y, z, radius

    def reset_cache(self):
        self._h = None
        self._cy = None
        self._radius = None

    def refresh_for_column(self, px, pz):
        cx, cz = self.cell_of(px, pz)
        h = []
        cy = []
        radius = []
        # Only need a 3x3 neighborhood of cells to find every island in reach.
        for gx in range(cx - 1, cx + 2):
            for gz in range(cz - 1, cz + 2):
                island = self.cell_island(gx, gz)
                if island is None:
                    continue
                ix, iy, iz, r = island
                dist = math.hypot(px - ix, pz - iz) / r
                if dist >= self._reach:
                    continue
                h.append(dist)
                cy.append(iy)
                radius.append(r)
        self._h = numpy.array(h, dtype=numpy.float64)
        self._cy = numpy.array(cy, dtype=numpy.float64)
        self._radius = numpy.array(radius, dtype=numpy.float64)

    @property
    def candidates(self):
        '''Number of cached islands, None when the cache is empty.'''
        if self._h is None:
            return None
        return len(self._h)

    def density_column(self, px, py, pz, height):
        if self._h is None:
            raise RuntimeError(f"{self!r}: density queried before refresh_for_column")
        py = numpy.asarray(py, dtype=numpy.float64)
        out = numpy.full(py.shape, self._min_density)
        if len(self._h) == 0:
            return out
        top = self._radius * (config.ISLAND_TOP_BASE + config.ISLAND_TOP_SCALE * max(height, 0.0))
        bottom = self._radius * config.ISLAND_BOTTOM_RATIO
        dy = py[..., numpy.newaxis] - self._cy
        v = numpy.where(dy >= 0, dy / top, -dy / bottom)
        d = (1.0 - numpy.sqrt(self._h * self._h + v * v)) * self._gain
        return numpy.maximum(d.max(-1), out)

    def density(self, px, py, pz, height):
        return float(self.density_column(px, numpy.array([py], dtype=numpy.float64), pz, height)[0])


def create_layers(seeds, layer_options=DEFAULT_LAYERS):
    '''One JitterIslandLayer per (seed, options) pair.'''
    if len(seeds) != len(layer_options):
        raise ValueError(f"need one seed per layer, got {len(seeds)} seeds for {len(layer_options)} layers")
    return tuple(JitterIslandLayer(seed, options) for seed, options in zip(seeds, layer_options))
