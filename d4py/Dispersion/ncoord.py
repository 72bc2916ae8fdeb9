"""
Coordination numbers from smooth counting functions.

cn_i = sum_{j != i} den_ij * count(k, r_ij, rcov_i + rcov_j)

The D4 flavour weights each pair by the electronegativity difference, the
EEQ flavour uses den = 1 and caps the result smoothly at ``cn_max``.
"""

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np
from scipy.special import erf

from d4py.Parameters.parameter import rcov, pauling_en
from d4py.Utils.calc_tools import neighbor_pairs

logger = logging.getLogger(__name__)

# Electronegativity weighting of the D4 coordination number
K4 = 4.10451
K5 = 19.08857
K6 = 2.0 * 11.28174 ** 2

# Smooth upper limit of the EEQ coordination number
EEQ_CN_MAX = 8.0


@dataclass(frozen=True)
class CountingFunction:
    """Counting function f(k, r, r0) and its derivative with respect to r"""
    name: str
    default_k: float
    value: Callable
    derivative: Callable


def _erf_count(k, r, r0):
    return 0.5 * (1.0 + erf(-k * (r - r0) / r0))


def _derf_count(k, r, r0):
    return -k / (np.sqrt(np.pi) * r0) * np.exp(-(k * (r - r0) / r0) ** 2)


def _exp_count(k, r, r0):
    return 1.0 / (1.0 + np.exp(-k * (r0 / r - 1.0)))


def _dexp_count(k, r, r0):
    expterm = np.exp(-k * (r0 / r - 1.0))
    return -k * r0 / r ** 2 * expterm / (1.0 + expterm) ** 2


erf_count = CountingFunction("erf", 7.5, _erf_count, _derf_count)
exp_count = CountingFunction("exp", 16.0, _exp_count, _dexp_count)


def cut_coordination_number(cn, cn_max=EEQ_CN_MAX):
    """Smooth cap: log(1 + e^cn_max) - log(1 + e^(cn_max - cn)), with d/dcn"""
    capped = np.logaddexp(0.0, cn_max) - np.logaddexp(0.0, cn_max - cn)
    dcapped = 1.0 / (1.0 + np.exp(cn - cn_max))
    return capped, dcapped


def get_coordination_number(mol, cutoff, counting=erf_count, kcn=None,
                            en_weighted=False, cn_max=None, gradient=False):
    """
    Coordination numbers of all atoms.

    Parameters:
    -----------
    mol : Molecule
    cutoff : float
        Pairs beyond this distance (Bohr) contribute nothing
    counting : CountingFunction
        erf_count (default) or exp_count
    kcn : float, optional
        Steepness of the counting function, defaults to counting.default_k
    en_weighted : bool
        Apply the D4 electronegativity weighting
    cn_max : float, optional
        Smoothly cap the coordination numbers at this value
    gradient : bool
        Also return dcndr

    Returns:
    --------
    cn : np.ndarray, shape (n,)
    dcndr : np.ndarray, shape (n, n, 3) or None
        dcndr[i, j, :] = d cn_i / d R_j
    """
    if kcn is None:
        kcn = counting.default_k
    numbers = mol.numbers
    n = len(numbers)

    idx_i, idx_j, vec, dist = neighbor_pairs(mol.positions, cutoff)
    zi, zj = numbers[idx_i], numbers[idx_j]
    r0 = rcov[zi] + rcov[zj]
    if en_weighted:
        den = K4 * np.exp(-(np.abs(pauling_en[zi] - pauling_en[zj]) + K5) ** 2 / K6)
    else:
        den = np.ones(len(dist))

    count = den * counting.value(kcn, dist, r0)
    cn = np.bincount(idx_i, weights=count, minlength=n) + np.bincount(idx_j, weights=count, minlength=n)

    dcndr = None
    if gradient:
        dcount = den * counting.derivative(kcn, dist, r0)
        dvec = (dcount / dist)[:, None] * vec
        dcndr = np.zeros((n, n, 3))
        np.add.at(dcndr, (idx_i, idx_i), dvec)
        np.add.at(dcndr, (idx_j, idx_j), -dvec)
        np.add.at(dcndr, (idx_i, idx_j), -dvec)
        np.add.at(dcndr, (idx_j, idx_i), dvec)

    if cn_max is not None:
        cn, dcut = cut_coordination_number(cn, cn_max)
        if gradient:
            dcndr *= dcut[:, None, None]

    logger.debug("coordination numbers (%s, %d pairs): %s", counting.name, len(dist), cn)
    return cn, dcndr
