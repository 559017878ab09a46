'''
height_kernel.py -- radial weighting disc used to smooth biome terrain heights

build_height_kernel() is called once during setup; the returned table is
read-only and can be shared by any number of generators and threads.
'''
import math
from collections import namedtuple

import numpy

import config


class HeightKernel(namedtuple('HeightKernel', ['radius', 'offsets', 'weights'])):
    '''
    offsets: (K, 2) int array of (dx, dz) inside the disc
    weights: (K,) float array, sums to 1
    '''
    __slots__ = ()

    def __len__(self):
        return len(self.weights)

    def weighted_height(self, terrain_height, x, z):
        '''
        Sum of terrain_height(x+dx, z+dz) * weight over the disc.
        terrain_height is any callable taking integer biome coordinates.
        '''
        depth = 0.0
        for (dx, dz), weight in zip(self.offsets.tolist(), self.weights.tolist()):
            depth += terrain_height(x + dx, z + dz) * weight
        return depth


def build_height_kernel(radius=None):
    if radius is None:
        radius = config.HEIGHT_KERNEL_RADIUS
    if radius <= 0:
        raise ValueError(f"height kernel radius must be positive, got {radius}")
    offsets = []
    coef = []
    for dx in range(-radius, radius + 1):
        for dz in range(-radius, radius + 1):
            # distance itself is the coefficient: the ring counts more than the centre
            dist = math.hypot(dx, dz) / radius
            if dist <= 1:
                offsets.append((dx, dz))
                coef.append(dist)
    offsets = numpy.array(offsets, dtype=numpy.int64)
    weights = numpy.array(coef, dtype=numpy.float64)
    weights /= weights.sum()
    offsets.setflags(write=False)
    weights.setflags(write=False)
    return HeightKernel(radius, offsets, weights)
