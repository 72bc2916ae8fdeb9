"""
Electronegativity equilibration (EEQ) charges.

The charges minimise a second-order energy expression with Gaussian charge
densities under the constraint sum(q) = total charge, which gives the
bordered linear system

    | A  1 | | q |   | b |
    | 1  0 | | l | = | Q |

with A_ii = gam_i + sqrt(2/pi) / alp_i,
     A_ij = erf(r_ij / sqrt(alp_i^2 + alp_j^2)) / r_ij,
     b_i  = -chi_i + kcn_i * sqrt(cn_i).
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.special import erf

from d4py.errors import InvalidGeometryError, SingularMatrixError, SingularSystemError
from d4py.Parameters.parameter import eeq_chi, eeq_gam, eeq_kcn, eeq_alp
from d4py.Utils.calc_tools import distance_vectors
from d4py.Utils.linalg import invert, matvec
from d4py.Dispersion.ncoord import get_coordination_number, erf_count, EEQ_CN_MAX

logger = logging.getLogger(__name__)

SQRT2PI = np.sqrt(2.0 / np.pi)
SQRTPI = np.sqrt(np.pi)


@dataclass
class EEQResult:
    """Charges and the intermediates needed for their derivatives"""
    charges: np.ndarray
    cn: np.ndarray
    dcndr: Optional[np.ndarray]
    amat_inv: np.ndarray
    solution: np.ndarray
    dbdcn: np.ndarray


class EEQChargeCalculator:
    """
    EEQ charge model on top of the dense linear-algebra substrate.

    Parameters:
    -----------
    cutoff : float
        Cutoff (Bohr) of the coordination number entering the right-hand side
    counting : CountingFunction
        Counting function of the coordination number
    cn_max : float
        Smooth upper limit of the coordination number
    """

    def __init__(self, cutoff=25.0, counting=erf_count, cn_max=EEQ_CN_MAX):
        self.cutoff = cutoff
        self.counting = counting
        self.cn_max = cn_max

    def _coulomb_matrix(self, mol):
        n = mol.natoms
        numbers = mol.numbers
        _, dist = distance_vectors(mol.positions)
        alp = eeq_alp[numbers]
        gam = eeq_gam[numbers]

        amat = np.zeros((n + 1, n + 1))
        gamma = 1.0 / np.sqrt(alp[:, None] ** 2 + alp[None, :] ** 2)
        offdiag = ~np.eye(n, dtype=bool)
        r = np.where(offdiag, dist, 1.0)
        amat[:n, :n] = np.where(offdiag, erf(gamma * r) / r, 0.0)
        amat[np.arange(n), np.arange(n)] = gam + SQRT2PI / alp
        amat[:n, n] = 1.0
        amat[n, :n] = 1.0
        return amat

    def calculate_charges(self, mol, charge=0.0, gradient=False):
        """
        Solve the EEQ system for the partial charges of ``mol``.

        Returns:
        --------
        EEQResult
        """
        if not np.isfinite(charge):
            raise InvalidGeometryError(f"total charge must be finite, got {charge}", stage="eeq")
        n = mol.natoms
        numbers = mol.numbers

        cn, dcndr = get_coordination_number(
            mol, self.cutoff, counting=self.counting, cn_max=self.cn_max, gradient=gradient
        )

        kcn = eeq_kcn[numbers]
        sqrt_cn = np.sqrt(np.maximum(cn, 0.0))
        xvec = np.zeros(n + 1)
        xvec[:n] = -eeq_chi[numbers] + kcn * sqrt_cn
        xvec[n] = charge
        dbdcn = 0.5 * kcn / (sqrt_cn + 1.0e-14)

        amat = self._coulomb_matrix(mol)
        try:
            invert(amat)
        except SingularMatrixError as e:
            logger.debug("EEQ matrix for %d atoms is singular: %s", n, e)
            raise SingularSystemError(
                "EEQ linear system is singular; check for degenerate geometry", stage="eeq"
            ) from e

        solution = np.zeros(n + 1)
        matvec(solution, amat, xvec)
        charges = solution[:n].copy()

        logger.debug("EEQ charges (total %.6f): %s", charges.sum(), charges)
        return EEQResult(
            charges=charges,
            cn=cn,
            dcndr=dcndr,
            amat_inv=amat,
            solution=solution,
            dbdcn=dbdcn,
        )

    def charge_gradient_contraction(self, mol, result, dedq):
        """
        Contract dE/dq with the charge derivatives: sum_i dE/dq_i * dq_i/dR.

        Uses the adjoint w = A^-1 u with u = (dE/dq, 0), so that
        dE/dR = w . db/dR - w . (dA/dR) x.

        Returns:
        --------
        gradient : np.ndarray, shape (n, 3)
        """
        if result.dcndr is None:
            raise ValueError("EEQ result was computed without derivatives")
        n = mol.natoms
        numbers = mol.numbers

        uvec = np.zeros(n + 1)
        uvec[:n] = dedq
        wvec = np.zeros(n + 1)
        matvec(wvec, result.amat_inv, uvec)
        w = wvec[:n]
        x = result.solution[:n]

        # right-hand side through the coordination number
        gradient = np.einsum("i,ijx->jx", w * result.dbdcn, result.dcndr)

        # Coulomb matrix
        rij, dist = distance_vectors(mol.positions)
        alp = eeq_alp[numbers]
        gamma = 1.0 / np.sqrt(alp[:, None] ** 2 + alp[None, :] ** 2)
        offdiag = ~np.eye(n, dtype=bool)
        r = np.where(offdiag, dist, 1.0)
        arg = gamma * r
        dadr = np.where(
            offdiag,
            (2.0 * gamma / SQRTPI * np.exp(-arg ** 2) - erf(arg) / r) / r,
            0.0,
        )
        # w_i x_j counted for both orderings of the pair
        pref = dadr * (w[:, None] * x[None, :] + x[:, None] * w[None, :])
        gradient -= np.einsum("ij,ijx->ix", pref / r, rij)

        return gradient
