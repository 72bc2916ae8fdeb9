"""
Reference-state interpolation of the D4 model.

Atomic C6 coefficients are built from the reference C6 table by weighting
each reference state of an atom with a Gaussian in the coordination number
and a charge scaling function.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from d4py.Parameters.parameter import (
    reference_db,
    ReferenceDatabase,
    chemical_hardness,
    effective_nuclear_charge,
    r4r2,
)

logger = logging.getLogger(__name__)


@dataclass
class D4Model:
    """D4 model constants and the reference database"""
    ga: float = 3.0  # charge scaling height
    gc: float = 2.0  # charge scaling steepness
    wf: float = 6.0  # weighting factor of the CN Gaussians
    reference: ReferenceDatabase = field(default=reference_db, repr=False)

    def _zeta(self, numbers, q):
        """Charge scaling zeta(q) of every reference and its derivative with respect to q"""
        ref = self.reference
        zeff = effective_nuclear_charge[numbers][:, None]
        gam = chemical_hardness[numbers][:, None] * self.gc
        qmod = q[:, None] + zeff
        qref = ref.refq[numbers] + zeff

        positive = qmod > 0.0
        safe_qmod = np.where(positive, qmod, 1.0)
        expterm = np.exp(gam * (1.0 - qref / safe_qmod))
        zeta = np.where(positive, np.exp(self.ga * (1.0 - expterm)), np.exp(self.ga))
        dzeta = np.where(
            positive,
            -self.ga * zeta * expterm * gam * qref / safe_qmod ** 2,
            0.0,
        )
        return zeta, dzeta

    def weight_references(self, mol, cn, q, gradient=False):
        """
        Weights of the reference states of every atom.

        Parameters:
        -----------
        mol : Molecule
        cn : np.ndarray, shape (n,)
            D4 coordination numbers
        q : np.ndarray, shape (n,)
            Partial charges
        gradient : bool
            Also return derivatives with respect to cn and q

        Returns:
        --------
        gwvec : np.ndarray, shape (n, max_ref)
        dgwdcn : np.ndarray, shape (n, max_ref) or None
        dgwdq : np.ndarray, shape (n, max_ref) or None
        """
        ref = self.reference
        numbers = mol.numbers
        mask = ref.reference_mask(numbers)
        refcn = ref.refcn[numbers]
        ngw = ref.ngw[numbers]

        kk = np.arange(1, max(int(ngw.max()), 1) + 1)
        diff = cn[:, None] - refcn
        # (n, max_ref, ngauss)
        terms = np.exp(-kk[None, None, :] * self.wf * diff[:, :, None] ** 2)
        terms = np.where((kk[None, None, :] <= ngw[:, :, None]) & mask[:, :, None], terms, 0.0)
        expw = terms.sum(axis=2)
        expd = (-2.0 * self.wf * kk[None, None, :] * diff[:, :, None] * terms).sum(axis=2)

        norm = expw.sum(axis=1)
        dnorm = expd.sum(axis=1)

        zeta, dzeta = self._zeta(numbers, q)

        # divide directly, 1/norm alone overflows for tiny norms
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            gw = expw / norm[:, None]
            dgw = (expd - gw * dnorm[:, None]) / norm[:, None]
        exceptional = ~(
            (np.isfinite(norm) & (norm > 0.0))
            & np.all(np.isfinite(gw), axis=1)
            & np.all(np.isfinite(dgw), axis=1)
        )
        for i in np.flatnonzero(exceptional):
            distance = np.where(mask[i], np.abs(cn[i] - refcn[i]), np.inf)
            nearest = int(np.argmin(distance))
            logger.warning(
                "atom %d: CN %.3f far from every reference, using reference %d only",
                i, cn[i], nearest,
            )
            gw[i] = 0.0
            dgw[i] = 0.0
            gw[i, nearest] = 1.0

        gwvec = zeta * gw
        if not gradient:
            return gwvec, None, None
        dgwdcn = zeta * dgw
        dgwdq = dzeta * gw
        return gwvec, dgwdcn, dgwdq

    def get_atomic_c6(self, mol, gwvec, dgwdcn=None, dgwdq=None):
        """
        Pairwise C6 coefficients c6_ij = sum_ab w_ia w_jb refc6_ab.

        Returns:
        --------
        c6 : np.ndarray, shape (n, n)
        dc6dcn : np.ndarray, shape (n, n) or None
            dc6dcn[i, j] = d c6_ij / d cn_i
        dc6dq : np.ndarray, shape (n, n) or None
            dc6dq[i, j] = d c6_ij / d q_i
        """
        ref = self.reference
        numbers = mol.numbers
        n = len(numbers)
        c6 = np.zeros((n, n))
        dc6dcn = np.zeros((n, n)) if dgwdcn is not None else None
        dc6dq = np.zeros((n, n)) if dgwdq is not None else None

        species = np.unique(numbers)
        members = {z: np.flatnonzero(numbers == z) for z in species}
        for za in species:
            ia = members[za]
            for zb in species:
                ib = members[zb]
                refc6 = ref.refc6[za, zb]
                block = np.ix_(ia, ib)
                wb = gwvec[ib] @ refc6.T
                c6[block] = gwvec[ia] @ wb.T
                if dc6dcn is not None:
                    dc6dcn[block] = dgwdcn[ia] @ wb.T
                if dc6dq is not None:
                    dc6dq[block] = dgwdq[ia] @ wb.T

        return c6, dc6dcn, dc6dq

    def get_polarizabilities(self, mol, gwvec):
        """Static dipole polarizabilities of the atoms in their environment"""
        alpha0 = self.reference.alpha[mol.numbers, :, 0]
        return np.sum(gwvec * alpha0, axis=1)

    @staticmethod
    def get_c8(mol, c6):
        """c8_ij = 3 * c6_ij * r4r2_i * r4r2_j"""
        qq = r4r2[mol.numbers]
        return 3.0 * c6 * qq[:, None] * qq[None, :]
