"""
Axilrod-Teller-Muto three-body dispersion with zero damping.

For every triple i < j < k within the cutoff

    E_ijk = c9 * fdmp * (3/8 * s / (r_ij r_jk r_ik)^5 + 1 / (r_ij r_jk r_ik)^3)

where c9 = s9 * sqrt(|c6_ij c6_jk c6_ik|), s is the product of
(a + b - c)(a - b + c)(-a + b + c) over the squared sides a, b, c, and
fdmp = 1 / (1 + 6 * (R0_ij R0_jk R0_ik / (r_ij r_jk r_ik))^(alp / 3)).

Collinear triples give a finite, attractive contribution and are kept.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from d4py.Parameters.parameter import r4r2
from d4py.Utils.calc_tools import neighbor_pairs, neighbor_triples
from d4py.Dispersion.rational_damping import critical_radius

logger = logging.getLogger(__name__)

# Triples with a side shorter than this (Bohr) are skipped
ATM_MIN_DISTANCE = 1.0e-6


def _triple_sides(positions, i, j):
    vec = positions[i] - positions[j]
    return vec, np.sum(vec * vec, axis=-1)


def get_dispersion3(mol, c6: np.ndarray, param, cutoff: float = 40.0, gradient: bool = False
                    ) -> Tuple[float, Optional[np.ndarray], Optional[np.ndarray]]:
    """
    Three-body ATM energy.

    Parameters:
    -----------
    mol : Molecule
    c6 : np.ndarray, shape (n, n)
        Pairwise C6 coefficients (zero-charge reference weights)
    param : D4Parameters
    cutoff : float
        All three sides of a triple must be within this distance (Bohr)
    gradient : bool
        Also return dE/dc6 and the gradient at fixed c6

    Returns:
    --------
    energy : float
    dedc6 : np.ndarray, shape (n, n) or None
    gradient : np.ndarray, shape (n, 3) or None
    """
    n = mol.natoms
    positions = mol.positions
    dedc6 = np.zeros((n, n)) if gradient else None
    grad = np.zeros((n, 3)) if gradient else None
    if n < 3 or param.s9 == 0.0:
        return 0.0, dedc6, grad

    idx_i, idx_j, _, _ = neighbor_pairs(positions, cutoff)
    triples = neighbor_triples(n, idx_i, idx_j)
    if len(triples) == 0:
        return 0.0, dedc6, grad
    ii, jj, kk = triples[:, 0], triples[:, 1], triples[:, 2]

    vij, a = _triple_sides(positions, ii, jj)
    vjk, b = _triple_sides(positions, jj, kk)
    vik, c = _triple_sides(positions, ii, kk)
    keep = np.minimum(np.minimum(a, b), c) >= ATM_MIN_DISTANCE ** 2
    if not np.all(keep):
        logger.debug("skipping %d triples with coincident atoms", int(np.sum(~keep)))
        ii, jj, kk = ii[keep], jj[keep], kk[keep]
        vij, vjk, vik = vij[keep], vjk[keep], vik[keep]
        a, b, c = a[keep], b[keep], c[keep]

    rr = r4r2[mol.numbers]
    r0 = (
        critical_radius(param, rr[ii] * rr[jj])
        * critical_radius(param, rr[jj] * rr[kk])
        * critical_radius(param, rr[ii] * rr[kk])
    )

    c6ij, c6jk, c6ik = c6[ii, jj], c6[jj, kk], c6[ii, kk]
    c9 = param.s9 * np.sqrt(np.abs(c6ij * c6jk * c6ik))

    abc = a * b * c
    r1 = np.sqrt(abc)
    r3 = abc * r1
    r5 = r3 * abc
    p = param.alp / 3.0
    t = 6.0 * (r0 / r1) ** p
    fdmp = 1.0 / (1.0 + t)

    p1 = a + b - c
    p2 = a - b + c
    p3 = -a + b + c
    s = p1 * p2 * p3
    ang = 0.375 * s / r5 + 1.0 / r3

    e_triple = c9 * fdmp * ang
    energy = np.sum(e_triple)
    logger.debug("three-body energy over %d triples: %.10f", len(e_triple), energy)

    if not gradient:
        return float(energy), None, None

    dsides = []
    for side, dsdx in (
        (a, p2 * p3 + p1 * p3 - p1 * p2),
        (b, p2 * p3 - p1 * p3 + p1 * p2),
        (c, -p2 * p3 + p1 * p3 + p1 * p2),
    ):
        dfdmp = p * t / (2.0 * side * (1.0 + t) ** 2)
        dang = 0.375 * (dsdx / r5 - 2.5 * s / (r5 * side)) - 1.5 / (r3 * side)
        dsides.append(c9 * (dfdmp * ang + fdmp * dang))
    deda, dedb, dedc = dsides

    # d(side^2)/dR = 2 * (R_first - R_second)
    ga = (2.0 * deda)[:, None] * vij
    gb = (2.0 * dedb)[:, None] * vjk
    gc = (2.0 * dedc)[:, None] * vik
    np.add.at(grad, ii, ga + gc)
    np.add.at(grad, jj, gb - ga)
    np.add.at(grad, kk, -gb - gc)

    # dc9/dc6_ab = c9 / (2 c6_ab)
    for (x, y), c6pair in (((ii, jj), c6ij), ((jj, kk), c6jk), ((ii, kk), c6ik)):
        nonzero = c6pair != 0.0
        contrib = np.where(nonzero, e_triple / (2.0 * np.where(nonzero, c6pair, 1.0)), 0.0)
        np.add.at(dedc6, (x, y), contrib)
        np.add.at(dedc6, (y, x), contrib)

    return float(energy), dedc6, grad
