'''
biomes.py -- biome sources consumed by the terrain generator

Two kinds of source exist:

  BiomeSource.noise_biome(x, y, z, sampler)   generic, climate-driven lookup
  LandBiomeSource.land_biome(x, z)            direct lookup of the land biome

resolve_biome_lookup() decides once which path to use for a source and
returns a plain (x, z) -> Biome callable. Coordinates are biome-grid integers.
'''
import math
from collections import namedtuple

import numpy

import config
import simplex
import util

# terrain_height weights how tall islands grow over this biome; 0 means none.
# temperature/humidity place the biome in climate space.
Biome = namedtuple('Biome', ['name', 'terrain_height', 'temperature', 'humidity'], defaults=(0.0, 0.0))

VOID = Biome('void', 0.0, 0.0, -0.6)
SKY_MEADOW = Biome('sky meadow', 0.6, 0.2, 0.3)
CLOUD_FOREST = Biome('cloud forest', 0.8, -0.3, 0.6)
STONE_SPIRES = Biome('stone spires', 1.0, 0.5, -0.2)
DRIFT_SHOALS = Biome('drift shoals', 0.3, -0.5, -0.3)

DEFAULT_BIOMES = (VOID, SKY_MEADOW, CLOUD_FOREST, STONE_SPIRES, DRIFT_SHOALS)


def terrain_height(biome):
    return biome.terrain_height


class ClimateSampler(object):
    '''Temperature and humidity fields, each a simplex noise in [-1, 1].'''
    def __init__(self, seed, step=None):
        self.seed = seed
        self.step = float(step if step is not None else config.CLIMATE_STEP)
        self.temperature = simplex.SimplexNoise(seed=(seed + 301) & 0x7FFFFFFF)
        self.humidity = simplex.SimplexNoise(seed=(seed + 302) & 0x7FFFFFFF)

    def sample(self, x, y, z):
        # y is accepted for interface parity; the climate is two-dimensional
        return (self.temperature.eval(x / self.step, z / self.step),
                self.humidity.eval(x / self.step + 531.0, z / self.step + 531.0))


class BiomeSource(object):
    '''Generic biome source, sampled through a climate sampler.'''
    def __init__(self, biomes=DEFAULT_BIOMES):
        if not biomes:
            raise ValueError("a biome source needs at least one biome")
        self.biomes = tuple(biomes)

    def noise_biome(self, x, y, z, sampler):
        raise NotImplementedError


class ClimateBiomeSource(BiomeSource):
    '''Picks the biome whose (temperature, humidity) is closest to the sampled climate.'''
    def __init__(self, biomes=DEFAULT_BIOMES):
        BiomeSource.__init__(self, biomes)
        self._climate = numpy.array([(b.temperature, b.humidity) for b in self.biomes], dtype=numpy.float64)

    def noise_biome(self, x, y, z, sampler):
        temperature, humidity = sampler.sample(x, y, z)
        d2 = (self._climate[:, 0] - temperature) ** 2 + (self._climate[:, 1] - humidity) ** 2
        return self.biomes[int(numpy.argmin(d2))]


class LandBiomeSource(BiomeSource):
    '''Source that can answer the land biome of a column directly.'''
    def land_biome(self, x, z):
        raise NotImplementedError

    def noise_biome(self, x, y, z, sampler):
        return self.land_biome(x, z)


class CellBiomeSource(LandBiomeSource):
    '''
    Voronoi cells of jittered sites, one biome per cell. Cells are
    cell_size biome units wide and the nearest site wins.
    '''
    def __init__(self, seed, biomes=DEFAULT_BIOMES, cell_size=None):
        LandBiomeSource.__init__(self, biomes)
        self.seed = int(seed)
        self.cell_size = float(cell_size if cell_size is not None else config.BIOME_CELL_SIZE)
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")

    def _cell_hash(self, gx, gz, salt):
        return util.cell_hash(gx, gz, salt, self.seed)

    def _cell_site(self, gx, gz):
        jx = (self._cell_hash(gx, gz, 1) & 0xFFFF) / 65536.0
        jz = (self._cell_hash(gx, gz, 2) & 0xFFFF) / 65536.0
        return (gx + jx) * self.cell_size, (gz + jz) * self.cell_size

    def nearest_cell(self, x, z):
        cx = int(math.floor(x / self.cell_size))
        cz = int(math.floor(z / self.cell_size))
        best = None
        best_d2 = None
        # a site two cells out can beat the own cell site, three cells out cannot
        for gx in range(cx - 2, cx + 3):
            for gz in range(cz - 2, cz + 3):
                sx, sz = self._cell_site(gx, gz)
                d2 = (x - sx) ** 2 + (z - sz) ** 2
                if best_d2 is None or d2 < best_d2:
                    best = (gx, gz)
                    best_d2 = d2
        return best

    def land_biome(self, x, z):
        gx, gz = self.nearest_cell(x, z)
        return self.biomes[self._cell_hash(gx, gz, 3) % len(self.biomes)]


def resolve_biome_lookup(source, sampler=None):
    '''
    Return a (x, z) -> Biome callable for source, preferring the direct land
    lookup when the source offers one.
    '''
    if isinstance(source, LandBiomeSource):
        return source.land_biome
    if sampler is None:
        raise ValueError(f"{type(source).__name__} needs a climate sampler")

    def biome_at(x, z):
        return source.noise_biome(x, 0, z, sampler)
    return biome_at
