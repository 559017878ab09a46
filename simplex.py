#
# N-dimensional simplex noise, vectorised with numpy.
#
# Based on example code by Stefan Gustavson (stegu@itn.liu.se).
# Better rank ordering method by Stefan Gustavson in 2012.
#
# The original code was placed in the public domain by its author,
# Stefan Gustavson. You may use it as you see fit, but
# attribution is appreciated.
#
import numpy
import itertools


p = numpy.array( [151,160,137,91,90,15,
    131,13,201,95,96,53,194,233,7,225,140,36,103,30,69,142,8,99,37,240,21,10,23,
    190, 6,148,247,120,234,75,0,26,197,62,94,252,219,203,117,35,11,32,57,177,33,
    88,237,149,56,87,174,20,125,136,171,168, 68,175,74,165,71,134,139,48,27,166,
    77,146,158,231,83,111,229,122,60,211,133,230,220,105,92,41,55,46,245,40,244,
    102,143,54, 65,25,63,161, 1,216,80,73,209,76,132,187,208, 89,18,169,200,196,
    135,130,116,188,159,86,164,100,109,198,173,186, 3,64,52,217,226,250,124,123,
    5,202,38,147,118,126,255,82,85,212,207,206,59,227,47,16,58,17,182,189,28,42,
    223,183,170,213,119,248,152, 2,44,154,163, 70,221,153,101,155,167, 43,172,9,
    129,22,39,253, 19,98,108,110,79,113,224,232,178,185, 112,104,218,246,97,228,
    251,34,242,193,238,210,144,12,191,179,162,241, 81,51,145,235,249,14,239,107,
    49,192,214, 31,181,199,106,157,184, 84,204,176,115,121,50,45,127, 4,150,254,
    138,236,205,93,222,114,67,29,24,72,243,141,128,195,78,66,215,61,156,180] )

# Output scale that keeps the result close to [-1,1].
NOISE_SCALE = 2.0 ** 6

_gradient_tables = {}


def gradient_table(n):
    '''
    Gradient vectors for n dimensions: every vector of -1/0/1 components
    with at most one zero component.
    '''
    grad = _gradient_tables.get(n)
    if grad is None:
        grad = numpy.array(list(itertools.product((0, -1, 1), repeat=n))[1:])
        grad = grad[numpy.abs(grad).sum(-1) >= n - 1]
        _gradient_tables[n] = grad
    return grad


def fastfloor(x):
    return numpy.floor(x)


class SimplexNoise:
    '''
    Seeded coherent noise source.

    noise(Z) evaluates an (M, N) array of M points in N dimensions and returns
    M values. eval(*coords) evaluates a single point. Both give identical
    values for identical coordinates and seed.
    '''
    def __init__(self, seed=None):
        self.seed = seed
        if seed is not None:
            perm0 = numpy.random.RandomState(seed).permutation(256)
        else:
            perm0 = p
        # To remove the need for index wrapping, double the permutation table length
        self.perm0 = numpy.concatenate([perm0, perm0]).astype(numpy.int64)

    def noise(self, Z):
        Z = numpy.asarray(Z, dtype=numpy.float64)
        if Z.ndim == 1:
            Z = Z[numpy.newaxis, :]
        # Skew the input space to determine which simplex cell we're in
        N = Z.shape[-1] #number of dimensions
        N1 = N+1 # number of simplex corners
        Fn = (N1**0.5 - 1.0)/N
        Gn = (N1 - N1**0.5)/N/N1

        s = Z.sum(-1) * Fn # Factor for skewing
        i = fastfloor(Z + s[:, numpy.newaxis])
        t = i.sum(-1) * Gn # Factor for unskewing
        z0 = Z - (i - t[:, numpy.newaxis])

        # Use magnitude ordering to determine the simplex that z0 is located in
        rank = numpy.zeros(Z.shape, dtype=numpy.int64)
        for l, k in itertools.combinations(range(N), 2):
            rank[:, k] += z0[:, k] >= z0[:, l]
            rank[:, l] += z0[:, k] < z0[:, l]

        # ind holds the skewed offsets of the N+1 corners
        b = numpy.arange(N1)[:, numpy.newaxis, numpy.newaxis]
        ind = rank >= N - b
        # zk holds the unskewed distances to the corners
        zk = z0 - ind + b * Gn

        # Lattice coordinates only wrap for hashing
        indi = ind + numpy.mod(i, 256).astype(numpy.int64)
        grad = gradient_table(N)
        gik = 0
        for x in range(N-1, -1, -1):
            gik = self.perm0[indi[:, :, x] + gik]
        gik = gik % grad.shape[0]

        # Calculate the contribution from the corners
        tk = 0.5 - (zk*zk).sum(-1)
        tp = tk >= 0
        tk = tp * tk * tk
        nk = tp * tk * tk * (grad[gik]*zk).sum(-1)

        return nk.sum(0) * NOISE_SCALE

    def eval(self, *coords):
        return float(self.noise(numpy.array([coords], dtype=numpy.float64))[0])
