"""
Reference states of the D4 model and their dynamic polarizabilities.

Each element carries a short list of reference coordination numbers. Every
reference is described by a single-oscillator polarizability

    alpha(iw) = alpha0 / (1 + (w / w0)^2)

where alpha0 contracts with the reference CN and w0 is fixed per element so
that the free-atom C6 is reproduced (C6 = 3/4 * alpha0^2 * w0). Reference C6
coefficients follow from Casimir-Polder integration on the 23-point
imaginary-frequency grid.
"""

import numpy as np

from d4py.Parameters.d4 import D4_MAX_ELEM


# Imaginary frequencies (a.u.) for the Casimir-Polder integral
FREQ = np.array([
    0.000001, 0.050000, 0.100000, 0.200000, 0.300000, 0.400000,
    0.500000, 0.600000, 0.700000, 0.800000, 0.900000, 1.000000,
    1.200000, 1.400000, 1.600000, 1.800000, 2.000000, 2.500000,
    3.000000, 4.000000, 5.000000, 7.500000, 10.00000,
])
FREQ.setflags(write=False)


def _trapezoid_weights(freq):
    weights = np.zeros(len(freq))
    weights[0] = 0.5 * (freq[1] - freq[0])
    weights[1:-1] = 0.5 * (freq[2:] - freq[:-2])
    weights[-1] = 0.5 * (freq[-1] - freq[-2])
    return weights


FREQ_WEIGHTS = _trapezoid_weights(FREQ)
FREQ_WEIGHTS.setflags(write=False)

THOPI = 3.0 / np.pi

# Static dipole polarizabilities of the free atoms (a0^3, H-Xe)
ATOMIC_ALPHA0 = {
    1: 4.5, 2: 1.38,
    3: 164.2, 4: 38.0, 5: 21.0, 6: 12.0, 7: 7.4, 8: 5.4, 9: 3.8, 10: 2.67,
    11: 162.7, 12: 71.0, 13: 60.0, 14: 37.0, 15: 25.0, 16: 19.6, 17: 15.0, 18: 11.1,
    19: 292.9, 20: 160.0, 21: 120.0, 22: 98.0, 23: 84.0, 24: 78.0, 25: 63.0, 26: 56.0,
    27: 50.0, 28: 48.0, 29: 42.0, 30: 40.0, 31: 60.0, 32: 41.0, 33: 29.0, 34: 25.0,
    35: 20.0, 36: 16.8,
    37: 319.2, 38: 199.0, 39: 126.7, 40: 119.97, 41: 101.6, 42: 88.42, 43: 80.08, 44: 65.9,
    45: 56.1, 46: 23.68, 47: 50.6, 48: 39.7, 49: 70.22, 50: 55.95, 51: 43.67, 52: 37.65,
    53: 35.0, 54: 27.3,
}

# Homonuclear C6 coefficients of the free atoms (Hartree * Bohr^6, H-Xe)
ATOMIC_C6 = {
    1: 6.50, 2: 1.46,
    3: 1393.0, 4: 214.0, 5: 99.5, 6: 46.6, 7: 24.2, 8: 15.6, 9: 9.52, 10: 6.38,
    11: 1556.0, 12: 627.0, 13: 528.0, 14: 305.0, 15: 185.0, 16: 134.0, 17: 94.6, 18: 64.3,
    19: 3897.0, 20: 2221.0, 21: 1383.0, 22: 1044.0, 23: 832.0, 24: 602.0, 25: 552.0, 26: 482.0,
    27: 408.0, 28: 373.0, 29: 253.0, 30: 284.0, 31: 498.0, 32: 354.0, 33: 246.0, 34: 210.0,
    35: 162.0, 36: 129.6,
    37: 4691.0, 38: 3170.0, 39: 1968.0, 40: 1677.0, 41: 1263.0, 42: 1028.0, 43: 1390.0, 44: 609.0,
    45: 469.0, 46: 158.0, 47: 339.0, 48: 452.0, 49: 707.0, 50: 587.0, 51: 459.0, 52: 396.0,
    53: 385.0, 54: 285.9,
}

# Reference coordination numbers by chemical group
_GROUP_REFCN = {
    "hydrogen": (0.0, 1.0),
    "noble": (0.0,),
    "alkali": (0.0, 1.0),
    "alkaline_earth": (0.0, 2.0),
    "triel": (0.0, 3.0),
    "tetrel": (0.0, 2.0, 3.0, 4.0),
    "pnictogen": (0.0, 1.0, 2.0, 3.0),
    "chalcogen": (0.0, 1.0, 2.0),
    "halogen": (0.0, 1.0),
    "transition_metal": (0.0, 4.0, 6.0),
}

_ELEMENT_GROUP = {1: "hydrogen"}
for _z in (2, 10, 18, 36, 54):
    _ELEMENT_GROUP[_z] = "noble"
for _z in (3, 11, 19, 37):
    _ELEMENT_GROUP[_z] = "alkali"
for _z in (4, 12, 20, 38):
    _ELEMENT_GROUP[_z] = "alkaline_earth"
for _z in (5, 13, 31, 49):
    _ELEMENT_GROUP[_z] = "triel"
for _z in (6, 14, 32, 50):
    _ELEMENT_GROUP[_z] = "tetrel"
for _z in (7, 15, 33, 51):
    _ELEMENT_GROUP[_z] = "pnictogen"
for _z in (8, 16, 34, 52):
    _ELEMENT_GROUP[_z] = "chalcogen"
for _z in (9, 17, 35, 53):
    _ELEMENT_GROUP[_z] = "halogen"
for _z in list(range(21, 31)) + list(range(39, 49)):
    _ELEMENT_GROUP[_z] = "transition_metal"

# Contraction of the static polarizability with increasing reference CN
ALPHA_CONTRACTION = 0.15


def reference_cn_pattern(z):
    return _GROUP_REFCN[_ELEMENT_GROUP[z]]


def count_gaussian_weights(refcn):
    """Number of Gaussians per reference, from how many references share a rounded CN"""
    icn = np.rint(np.asarray(refcn)).astype(int)
    cncount = np.zeros(max(icn.max(initial=0), 0) + 1, dtype=int)
    cncount[0] = 1
    for k in icn:
        cncount[k] += 1
    return cncount[icn] * (cncount[icn] + 1) // 2


class ReferenceDatabase:
    """
    Read-only table of reference states for H-Xe.

    Arrays are indexed by atomic number (entry 0 unused) and padded to
    ``max_ref`` references; ``nref[z]`` gives the number of valid entries.
    """

    def __init__(self, max_elem=D4_MAX_ELEM):
        self.max_elem = max_elem
        self.max_ref = max(len(p) for p in _GROUP_REFCN.values())
        self.freq = FREQ
        self.freq_weights = FREQ_WEIGHTS

        size = max_elem + 1
        self.nref = np.zeros(size, dtype=int)
        self.refcn = np.zeros((size, self.max_ref))
        self.refq = np.zeros((size, self.max_ref))
        self.ngw = np.zeros((size, self.max_ref), dtype=int)
        self.alpha = np.zeros((size, self.max_ref, len(FREQ)))

        for z in range(1, size):
            pattern = np.array(reference_cn_pattern(z))
            nref = len(pattern)
            self.nref[z] = nref
            self.refcn[z, :nref] = pattern
            self.ngw[z, :nref] = count_gaussian_weights(pattern)

            alpha0 = ATOMIC_ALPHA0[z]
            # w0 from C6_ii = 3/4 * alpha0^2 * w0
            w0 = 4.0 * ATOMIC_C6[z] / (3.0 * alpha0 * alpha0)
            alpha_ref = alpha0 / (1.0 + ALPHA_CONTRACTION * pattern)
            self.alpha[z, :nref, :] = alpha_ref[:, None] / (1.0 + (FREQ[None, :] / w0) ** 2)

        # Casimir-Polder integration for every pair of elements and references
        self.refc6 = THOPI * np.einsum(
            "arw,bsw,w->abrs", self.alpha, self.alpha, self.freq_weights
        )

        for array in (self.nref, self.refcn, self.refq, self.ngw, self.alpha, self.refc6):
            array.setflags(write=False)

    def reference_mask(self, numbers):
        """Boolean mask (natoms, max_ref) of the valid references of each atom"""
        return np.arange(self.max_ref)[None, :] < self.nref[numbers][:, None]


reference_db = ReferenceDatabase()
