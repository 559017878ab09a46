import math

from config import SECTOR_SIZE

MASK64 = (1 << 64) - 1


def cell_hash(gx, gz, salt, seed):
    """ Splitmix64-style integer hash of a grid cell.

    Parameters
    ----------
    gx, gz : int
        Cell coordinates.
    salt : int
        Selects an independent stream for the same cell.
    seed : int

    Returns
    -------
    hash : int in [0, 2**64)

    """
    h = (int(gx) * 0x632BE59BD9B4E019) ^ (int(gz) * 0x9E3779B97F4A7C15) ^ (salt * 0x94D049BB133111EB) ^ int(seed)
    h &= MASK64
    h = (h ^ (h >> 30)) * 0xbf58476d1ce4e5b9 & MASK64
    h = (h ^ (h >> 27)) * 0x94d049bb133111eb & MASK64
    h ^= (h >> 31)
    return h


def cell_random(gx, gz, salt, seed):
    """ Deterministic float in [0,1) for a grid cell.
    """
    return (cell_hash(gx, gz, salt, seed) & ((1 << 53) - 1)) / float(1 << 53)


def normalize(position):
    """ Accepts `position` of arbitrary precision and returns the block
    containing that position.

    Parameters
    ----------
    position : tuple of len 3

    Returns
    -------
    block_position : tuple of ints of len 3

    """
    x, y, z = position
    return (int(math.floor(x)), int(math.floor(y)), int(math.floor(z)))


def sectorize(position, sector_size=SECTOR_SIZE):
    """ Returns a tuple representing the sector for the given `position`.

    Parameters
    ----------
    position : tuple of len 3
    sector_size : int

    Returns
    -------
    sector : tuple of len 3, the sector's world origin

    """
    x, y, z = normalize(position)
    x, z = x // sector_size, z // sector_size
    return (x*sector_size, 0, z*sector_size)
