"""
Two-body dispersion energy with rational (Becke-Johnson) damping.

E = -sum_{i<j} c6_ij * (s6 / (r^6 + R0^6) + s8 * 3 * Q_ij / (r^8 + R0^8))

with Q_ij = r4r2_i * r4r2_j and R0 = a1 * sqrt(3 * Q_ij) + a2.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from d4py.Parameters.parameter import r4r2
from d4py.Utils.calc_tools import neighbor_pairs

logger = logging.getLogger(__name__)


def critical_radius(param, qq):
    """Damping radius R0 = a1 * sqrt(3 * r4r2_i * r4r2_j) + a2"""
    return param.a1 * np.sqrt(3.0 * qq) + param.a2


def get_dispersion2(mol, c6: np.ndarray, param, cutoff: float = 60.0, gradient: bool = False
                    ) -> Tuple[float, Optional[np.ndarray], Optional[np.ndarray]]:
    """
    Pairwise dispersion energy.

    Parameters:
    -----------
    mol : Molecule
    c6 : np.ndarray, shape (n, n)
        Pairwise C6 coefficients
    param : D4Parameters
    cutoff : float
        Pairs beyond this distance (Bohr) are skipped
    gradient : bool
        Also return dE/dc6 and the gradient at fixed c6

    Returns:
    --------
    energy : float
    dedc6 : np.ndarray, shape (n, n) or None
        Symmetric; entry [i, j] holds dE/dc6_ij of the pair
    gradient : np.ndarray, shape (n, 3) or None
        Derivative with respect to positions at fixed c6
    """
    n = mol.natoms
    idx_i, idx_j, vec, dist = neighbor_pairs(mol.positions, cutoff)
    rr = r4r2[mol.numbers]
    qq = rr[idx_i] * rr[idx_j]
    r0 = critical_radius(param, qq)

    r2 = dist * dist
    r6 = r2 * r2 * r2
    r8 = r6 * r2
    t6 = 1.0 / (r6 + r0 ** 6)
    t8 = 1.0 / (r8 + r0 ** 8)

    pair_c6 = c6[idx_i, idx_j]
    scale = param.s6 * t6 + param.s8 * 3.0 * qq * t8
    energy = -np.sum(pair_c6 * scale)
    logger.debug("two-body energy over %d pairs: %.10f", len(dist), energy)

    if not gradient:
        return float(energy), None, None

    dedc6 = np.zeros((n, n))
    dedc6[idx_i, idx_j] = -scale
    dedc6[idx_j, idx_i] = -scale

    # dE/dr at fixed c6
    dscale = param.s6 * (-6.0 * dist ** 5 * t6 ** 2) + param.s8 * 3.0 * qq * (-8.0 * dist ** 7 * t8 ** 2)
    dedr = -pair_c6 * dscale
    dvec = (dedr / dist)[:, None] * vec
    grad = np.zeros((n, 3))
    np.add.at(grad, idx_i, dvec)
    np.add.at(grad, idx_j, -dvec)

    return float(energy), dedc6, grad
