'''
terrain.py -- density field for floating island terrain

TerrainGenerator.fill_density() computes one column of density samples:
positive values are solid, negative values are air. The field is a pure
function of the seed, the biome source and the query, so repeated calls give
identical buffers.

One generator serves one thread. Its island layers keep per-column caches, so
a parallel pipeline creates one generator per worker; the height kernel can
be shared freely.
'''
#std/external libs
import math
import time
import numpy

#local libs
import config
import logutil
import simplex
import biomes
from biomes import CellBiomeSource, resolve_biome_lookup
from height_kernel import build_height_kernel
from islands import DEFAULT_LAYERS, create_layers
from util import sectorize

BUFFER_DTYPES = (numpy.dtype(numpy.float64), numpy.dtype(numpy.float32))


def expand_seed(seed, count=5):
    '''
    Derive count independent sub-seeds from a 64-bit world seed.
    Order: large, medium, small island layers, then noise A and noise B.
    '''
    rng = numpy.random.default_rng(int(seed) & config.SEED_MASK)
    return [int(s) for s in rng.integers(0, config.SUB_SEED_LIMIT, size=count)]


class TerrainGenerator(object):
    '''Three island layers plus two noise sources combined into one density field.'''

    def __init__(self, seed, biome_source, sampler=None, kernel=None, layer_options=DEFAULT_LAYERS):
        if len(layer_options) != 3:
            raise ValueError(f"expected large, medium and small layer options, got {len(layer_options)}")
        self.seed = seed
        sub_seeds = expand_seed(seed)
        self.large_islands, self.medium_islands, self.small_islands = create_layers(sub_seeds[:3], layer_options)
        self.noise1 = simplex.SimplexNoise(seed=sub_seeds[3])
        self.noise2 = simplex.SimplexNoise(seed=sub_seeds[4])
        self.biome_source = biome_source
        self.sampler = sampler
        # Decided once: direct land lookup when available, climate sampling otherwise.
        self._biome_at = resolve_biome_lookup(biome_source, sampler)
        self.kernel = kernel if kernel is not None else build_height_kernel()
        self._distortion = numpy.array(config.DISTORTION_OCTAVES, dtype=numpy.float64)
        self._fine = numpy.array(config.FINE_NOISE_OCTAVES, dtype=numpy.float64)
        logutil.log("TERRAIN", f"generator seed={seed} layers={[o.name for o in layer_options]} "
                    f"biomes={type(biome_source).__name__} kernel={len(self.kernel)} offsets")

    @property
    def layers(self):
        return (self.large_islands, self.medium_islands, self.small_islands)

    def terrain_height(self, x, z):
        return biomes.terrain_height(self._biome_at(x, z))

    def distort(self, x, z):
        '''
        Warp integer column (x, z) into continuous layer space.
        Axis 1 samples noise A, B, A over the octaves and axis 2 B, A, B, so
        the two offsets are not correlated along the diagonal.
        '''
        freq = self._distortion[:, 0]
        amp = self._distortion[:, 1]
        coords = numpy.stack([x * freq, z * freq], axis=-1)
        na = self.noise1.noise(coords)
        nb = self.noise2.noise(coords)
        distortion1 = na[0] * amp[0] + nb[1] * amp[1] + na[2] * amp[2]
        distortion2 = nb[0] * amp[0] + na[1] * amp[1] + nb[2] * amp[2]
        return distortion1, distortion2

    def average_depth(self, x, z):
        '''Kernel-averaged terrain height around biome cell (x, z).'''
        if self.terrain_height(x, z) < config.ZERO_TERRAIN_CUTOFF:
            return 0.0
        return self.kernel.weighted_height(self.terrain_height, x, z)

    def _check_buffer(self, buffer):
        if not isinstance(buffer, numpy.ndarray):
            raise TypeError(f"buffer must be a numpy array, got {type(buffer).__name__}")
        if buffer.dtype not in BUFFER_DTYPES:
            raise TypeError(f"buffer dtype must be float64 or float32, got {buffer.dtype}")
        if buffer.ndim != 1:
            raise ValueError(f"buffer must be one-dimensional, got shape {buffer.shape}")

    def _check_column(self, samples, scale_xz, scale_y):
        if samples <= 0:
            raise ValueError("buffer has no samples")
        if not (math.isfinite(scale_xz) and scale_xz > 0):
            raise ValueError(f"scale_xz must be a positive finite number, got {scale_xz}")
        if not math.isfinite(scale_y):
            raise ValueError(f"scale_y must be finite, got {scale_y}")

    def density_column(self, samples, pos_x, pos_z, scale_xz, scale_y, fast=False):
        '''
        Density of samples vertical steps of column (pos_x, pos_z) as a
        float64 array. fill_density stores exactly these values.
        '''
        self._check_column(samples, scale_xz, scale_y)
        x = math.floor(pos_x / scale_xz)
        z = math.floor(pos_z / scale_xz)
        return self._cell_column(samples, x, z, scale_xz, scale_y, fast)

    def _cell_column(self, samples, x, z, scale_xz, scale_y, fast):
        '''Column of layer cell (x, z); arguments already checked.'''
        large, medium, small = self.layers
        large.reset_cache()
        medium.reset_cache()
        small.reset_cache()

        distortion1, distortion2 = self.distort(x, z)
        px = x * scale_xz + distortion1
        pz = z * scale_xz + distortion2

        large.refresh_for_column(px, pz)
        medium.refresh_for_column(px, pz)
        small.refresh_for_column(px, pz)

        if fast:
            height = config.FAST_HEIGHT
        else:
            ratio = config.BIOME_GRID_RATIO
            height = self.average_depth(x * ratio, z * ratio) * config.HEIGHT_FACTOR

        py = numpy.arange(samples, dtype=numpy.float64) * scale_y
        dist = large.density_column(px, py, pz, height)
        # values above 1 are already saturated; later layers can only raise them
        dist = numpy.maximum(dist, medium.density_column(px, py, pz, height))
        dist = numpy.maximum(dist, small.density_column(px, py, pz, height))

        if not fast:
            detail = dist > config.FINE_NOISE_GATE
            if detail.any():
                sub = dist[detail]
                for term in self._fine_noise(px, py[detail], pz):
                    sub += term
                dist[detail] = sub

        if logutil.enabled("COLUMN", "DEBUG"):
            logutil.log("COLUMN", f"cell=({x},{z}) p=({px:.2f},{pz:.2f}) "
                        f"height={height:.3f} islands={[layer.candidates for layer in self.layers]} "
                        f"solid={int(numpy.count_nonzero(dist > 0))}/{samples}", level="DEBUG")
        return dist

    def _fine_noise(self, px, py, pz):
        '''The three detail octaves (A, B, A), each biased upward by its amplitude.'''
        sources = (self.noise1, self.noise2, self.noise1)
        n = len(py)
        for (freq, amp), source in zip(self._fine.tolist(), sources):
            coords = numpy.stack([numpy.full(n, px * freq), py * freq, numpy.full(n, pz * freq)], axis=-1)
            yield source.noise(coords) * amp + amp

    def fill_density(self, buffer, pos_x, pos_z, scale_xz, scale_y, fast=False):
        '''
        Write one density value per vertical sample into buffer.

        buffer is a caller-owned 1-D float64 or float32 numpy array; its
        length sets the number of samples. Sample y sits at height
        y*scale_y. fast skips the biome kernel (height 0.2) and the surface
        detail noise. Raises ValueError/TypeError before writing anything if
        the buffer or scales are unusable.
        '''
        self._check_buffer(buffer)
        buffer[:] = self.density_column(len(buffer), pos_x, pos_z, scale_xz, scale_y, fast)

    def sector_density(self, position, size=None, samples=None, scale_xz=1.0, scale_y=1.0,
                       fast=False, dtype=numpy.float32):
        '''
        Densities for the size x size columns of the sector containing
        position, shaped (x, y, z) like sector block arrays.

        Columns are layer cells: position falls in cell
        (floor(x/scale_xz), floor(z/scale_xz)), the sector is the aligned
        size x size block of cells around it and column (i, k) is cell
        (cx0 + i, cz0 + k).
        '''
        size = size if size is not None else config.SECTOR_SIZE
        samples = samples if samples is not None else config.SECTOR_SAMPLES
        self._check_column(samples, scale_xz, scale_y)
        cell = (math.floor(position[0] / scale_xz), 0, math.floor(position[2] / scale_xz))
        cx0, _, cz0 = sectorize(cell, size)
        out = numpy.zeros((size, samples, size), dtype=dtype)
        t = time.time()
        for i in range(size):
            for k in range(size):
                out[i, :, k] = self._cell_column(samples, cx0 + i, cz0 + k, scale_xz, scale_y, fast)
        logutil.log("TERRAIN", f"sector cells ({cx0},{cz0}) {size}x{samples}x{size} fast={fast} "
                    f"in {(time.time() - t) * 1000:.1f}ms", level="DEBUG")
        return out


def initialize_terrain_generator(seed=None, biome_source=None, sampler=None, kernel=None,
                                 layer_options=DEFAULT_LAYERS):
    '''Build a generator with default parts; seed None uses the clock.'''
    if seed is None:
        seed = int(time.time())
    if biome_source is None:
        biome_source = CellBiomeSource(seed=seed)
    return TerrainGenerator(seed, biome_source, sampler=sampler, kernel=kernel, layer_options=layer_options)
