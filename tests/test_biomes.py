import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import biomes
from biomes import Biome


class FixedClimate(object):
    def __init__(self, temperature, humidity):
        self.value = (temperature, humidity)
        self.calls = []

    def sample(self, x, y, z):
        self.calls.append((x, y, z))
        return self.value


def test_terrain_height_accessor():
    assert biomes.terrain_height(biomes.STONE_SPIRES) == 1.0
    assert biomes.terrain_height(biomes.VOID) == 0.0
    assert Biome('plain', 0.5).temperature == 0.0


def test_climate_source_picks_nearest_biome():
    source = biomes.ClimateBiomeSource()
    for biome in biomes.DEFAULT_BIOMES:
        sampler = FixedClimate(biome.temperature + 0.01, biome.humidity - 0.01)
        assert source.noise_biome(3, 0, 4, sampler) == biome
        assert sampler.calls == [(3, 0, 4)]


def test_generic_lookup_goes_through_sampler():
    sampler = FixedClimate(biomes.CLOUD_FOREST.temperature, biomes.CLOUD_FOREST.humidity)
    lookup = biomes.resolve_biome_lookup(biomes.ClimateBiomeSource(), sampler)
    assert lookup(7, -2) == biomes.CLOUD_FOREST
    assert sampler.calls == [(7, 0, -2)]


def test_generic_lookup_needs_sampler():
    with pytest.raises(ValueError):
        biomes.resolve_biome_lookup(biomes.ClimateBiomeSource())


def test_land_lookup_is_preferred():
    source = biomes.CellBiomeSource(seed=5)
    sampler = FixedClimate(0.0, 0.0)
    lookup = biomes.resolve_biome_lookup(source, sampler)
    assert lookup == source.land_biome
    lookup(1, 1)
    assert sampler.calls == []


def test_land_source_answers_generic_queries_too():
    source = biomes.CellBiomeSource(seed=5)
    for x, z in [(0, 0), (13, -40), (-99, 7)]:
        assert source.noise_biome(x, 64, z, None) == source.land_biome(x, z)


def test_cell_source_is_deterministic_and_varied():
    a = biomes.CellBiomeSource(seed=42)
    b = biomes.CellBiomeSource(seed=42)
    coords = [(x, z) for x in range(-120, 120, 9) for z in range(-120, 120, 9)]
    found_a = [a.land_biome(x, z) for x, z in coords]
    found_b = [b.land_biome(x, z) for x, z in coords]
    assert found_a == found_b
    assert all(biome in biomes.DEFAULT_BIOMES for biome in found_a)
    assert len(set(found_a)) > 1


def test_cell_source_is_piecewise_constant():
    source = biomes.CellBiomeSource(seed=8, cell_size=32)
    gx, gz = source.nearest_cell(10, 10)
    sx, sz = source._cell_site(gx, gz)
    # a column on top of a site belongs to that site's cell
    assert source.nearest_cell(sx, sz) == (gx, gz)


def test_cell_source_rejects_bad_cell_size():
    with pytest.raises(ValueError):
        biomes.CellBiomeSource(seed=1, cell_size=0)


def test_empty_biome_list_rejected():
    with pytest.raises(ValueError):
        biomes.ClimateBiomeSource(biomes=())


def test_climate_sampler_is_deterministic():
    a = biomes.ClimateSampler(seed=3)
    b = biomes.ClimateSampler(seed=3)
    rng = np.random.RandomState(0)
    for x, z in rng.randint(-1000, 1000, size=(10, 2)):
        assert a.sample(x, 0, z) == b.sample(x, 0, z)
        t, h = a.sample(x, 0, z)
        assert -2.0 < t < 2.0 and -2.0 < h < 2.0


def test_nearest_cell_is_the_closest_site():
    source = biomes.CellBiomeSource(seed=13, cell_size=10)
    rng = np.random.RandomState(2)
    for x, z in rng.uniform(-200, 200, size=(300, 2)):
        cx, cz = int(np.floor(x / 10)), int(np.floor(z / 10))
        cells = [(gx, gz) for gx in range(cx - 4, cx + 5) for gz in range(cz - 4, cz + 5)]
        dists = []
        for gx, gz in cells:
            sx, sz = source._cell_site(gx, gz)
            dists.append((x - sx) ** 2 + (z - sz) ** 2)
        assert source.nearest_cell(x, z) == cells[int(np.argmin(dists))]
