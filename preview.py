'''
preview.py -- render a vertical slice of the island density field to a PNG

    python preview.py --seed 42 --z 0 --out slice.png

Each image column is one fill_density() call at world (x, z); image rows run
from the top sample down. Solid samples (density > 0) are bright, air is dark
and shaded by how far below zero it is.
'''
import argparse
import time

import numpy
from PIL import Image

import config
import logutil
from biomes import ClimateBiomeSource, ClimateSampler
from terrain import initialize_terrain_generator


def render_slice(gen, z, width, samples, scale_xz, scale_y, fast=False, x0=0):
    '''(samples, width) float32 density image, top row highest.'''
    image = numpy.zeros((samples, width), dtype=numpy.float32)
    column = numpy.zeros(samples, dtype=numpy.float32)
    for i in range(width):
        gen.fill_density(column, int(round(x0 + i * scale_xz)), z, scale_xz, scale_y, fast)
        image[:, i] = column[::-1]
    return image


def to_greyscale(image):
    solid = image > 0
    grey = numpy.where(solid,
                       160 + numpy.clip(image, 0, 1) * 95,
                       numpy.clip(image + 1.0, 0, 1) * 100)
    return numpy.array(grey, dtype='u1')


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.split('\n\n')[0].strip())
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--z', type=int, default=0, help='world z of the slice')
    parser.add_argument('--x0', type=int, default=0, help='world x of the left edge')
    parser.add_argument('--width', type=int, default=config.PREVIEW_WIDTH)
    parser.add_argument('--samples', type=int, default=config.PREVIEW_SAMPLES)
    parser.add_argument('--scale', type=float, default=config.PREVIEW_SCALE, help='scale_xz and scale_y')
    parser.add_argument('--fast', action='store_true')
    parser.add_argument('--climate', action='store_true', help='use the climate-sampled biome source')
    parser.add_argument('--out', default='density_slice.png')
    args = parser.parse_args(argv)

    seed = args.seed if args.seed is not None else int(time.time())
    if args.climate:
        gen = initialize_terrain_generator(seed, biome_source=ClimateBiomeSource(), sampler=ClimateSampler(seed))
    else:
        gen = initialize_terrain_generator(seed)

    t = time.time()
    image = render_slice(gen, args.z, args.width, args.samples, args.scale, args.scale,
                         fast=args.fast, x0=args.x0)
    logutil.log("PREVIEW", f"{args.width} columns x {args.samples} samples in {time.time() - t:.2f}s, "
                f"solid {numpy.count_nonzero(image > 0)}, range [{image.min():.2f}, {image.max():.2f}]")
    im = Image.fromarray(to_greyscale(image))
    im.save(args.out)
    logutil.log("PREVIEW", f"wrote {args.out} {im.size}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
