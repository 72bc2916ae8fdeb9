"""
DFT-D4 dispersion energy and analytic gradient.

Pipeline:
    geometry -> EEQ coordination numbers -> EEQ charges
    geometry -> D4 coordination numbers
    (cn, q) -> reference weights -> C6 -> two-body energy
    (cn, q = 0) -> reference weights -> C6 -> three-body energy

Reference:
- Caldeweyher et al., J. Chem. Phys. 150, 154122 (2019)
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from d4py.errors import MissingParametersError
from d4py.Parameters.parameter import D4Parameters, get_damping_parameters, UnitValueLib
from d4py.Dispersion.geometry import Molecule
from d4py.Dispersion.cutoff import RealSpaceCutoff
from d4py.Dispersion.ncoord import get_coordination_number, erf_count
from d4py.Dispersion.eeq_charges import EEQChargeCalculator
from d4py.Dispersion.d4_model import D4Model
from d4py.Dispersion.rational_damping import get_dispersion2
from d4py.Dispersion.atm_energy import get_dispersion3

logger = logging.getLogger(__name__)


@dataclass
class DispersionResult:
    """Dispersion energy (Hartree), gradient (Hartree/Bohr) and intermediates"""
    energy: float
    energy_two_body: float
    energy_three_body: float
    gradient: Optional[np.ndarray]
    cn: np.ndarray
    charges: np.ndarray
    c6: np.ndarray


def resolve_parameters(param: Optional[D4Parameters] = None,
                       functional: Optional[str] = None) -> D4Parameters:
    """Damping parameters from an explicit set or a functional name"""
    if param is not None and functional is not None:
        raise ValueError("give either damping parameters or a functional name, not both")
    if param is not None:
        return param
    if functional is not None:
        return get_damping_parameters(functional)
    raise MissingParametersError("no damping parameters or functional given", stage="parameters")


def _as_molecule(numbers, positions) -> Molecule:
    if isinstance(numbers, Molecule):
        return numbers
    return Molecule(numbers, positions)


def get_dispersion(numbers, positions, charge: float = 0.0,
                   param: Optional[D4Parameters] = None, functional: Optional[str] = None,
                   gradient: bool = False, cutoff: Optional[RealSpaceCutoff] = None,
                   counting=erf_count, model: Optional[D4Model] = None) -> DispersionResult:
    """
    DFT-D4 dispersion energy of a molecule.

    Parameters:
    -----------
    numbers : array_like of int, shape (n,)
        Atomic numbers
    positions : array_like, shape (n, 3)
        Cartesian coordinates in Bohr
    charge : float
        Total molecular charge
    param : D4Parameters, optional
        Damping parameters
    functional : str, optional
        Look up the damping parameters of this functional instead
    gradient : bool
        Also compute the analytic gradient
    cutoff : RealSpaceCutoff, optional
    counting : CountingFunction
        Counting function of both coordination numbers
    model : D4Model, optional

    Returns:
    --------
    DispersionResult
    """
    param = resolve_parameters(param, functional)
    cutoff = cutoff if cutoff is not None else RealSpaceCutoff()
    model = model if model is not None else D4Model()
    mol = _as_molecule(numbers, positions)
    n = mol.natoms
    logger.debug("D4 dispersion: %d atoms, total charge %.3f, %s", n, charge, param)

    eeq = EEQChargeCalculator(cutoff=cutoff.cn_eeq, counting=counting)
    eeq_result = eeq.calculate_charges(mol, charge, gradient=gradient)
    q = eeq_result.charges

    cn, dcndr = get_coordination_number(
        mol, cutoff.cn, counting=counting, en_weighted=True, gradient=gradient
    )

    gwvec, dgwdcn, dgwdq = model.weight_references(mol, cn, q, gradient=gradient)
    c6, dc6dcn, dc6dq = model.get_atomic_c6(mol, gwvec, dgwdcn, dgwdq)
    e2, dedc6_2, grad2 = get_dispersion2(mol, c6, param, cutoff=cutoff.disp2, gradient=gradient)

    gw0, dgw0dcn, _ = model.weight_references(mol, cn, np.zeros(n), gradient=gradient)
    c6_0, dc60dcn, _ = model.get_atomic_c6(mol, gw0, dgw0dcn)
    e3, dedc6_3, grad3 = get_dispersion3(mol, c6_0, param, cutoff=cutoff.disp3, gradient=gradient)

    energy = e2 + e3
    logger.debug("E(2) = %.10f  E(3) = %.10f  E(disp) = %.10f", e2, e3, energy)

    grad = None
    if gradient:
        dedcn = np.sum(dedc6_2 * dc6dcn, axis=1) + np.sum(dedc6_3 * dc60dcn, axis=1)
        dedq = np.sum(dedc6_2 * dc6dq, axis=1)
        grad = grad2 + grad3
        grad += np.einsum("i,ijx->jx", dedcn, dcndr)
        grad += eeq.charge_gradient_contraction(mol, eeq_result, dedq)

    return DispersionResult(
        energy=energy,
        energy_two_body=e2,
        energy_three_body=e3,
        gradient=grad,
        cn=cn,
        charges=q,
        c6=c6,
    )


def get_properties(numbers, positions, charge: float = 0.0,
                   cutoff: Optional[RealSpaceCutoff] = None, counting=erf_count,
                   model: Optional[D4Model] = None) -> Dict[str, np.ndarray]:
    """
    Intermediate quantities of the D4 model.

    Returns:
    --------
    dict with keys
        "cn" : D4 coordination numbers
        "charges" : EEQ partial charges
        "c6" : pairwise C6 coefficients
        "polarizabilities" : static dipole polarizabilities
    """
    cutoff = cutoff if cutoff is not None else RealSpaceCutoff()
    model = model if model is not None else D4Model()
    mol = _as_molecule(numbers, positions)

    eeq = EEQChargeCalculator(cutoff=cutoff.cn_eeq, counting=counting)
    q = eeq.calculate_charges(mol, charge).charges
    cn, _ = get_coordination_number(mol, cutoff.cn, counting=counting, en_weighted=True)
    gwvec, _, _ = model.weight_references(mol, cn, q)
    c6, _, _ = model.get_atomic_c6(mol, gwvec)

    return {
        "cn": cn,
        "charges": q,
        "c6": c6,
        "polarizabilities": model.get_polarizabilities(mol, gwvec),
    }


class D4DispersionEnergyCalculator:
    """
    D4 dispersion energy calculator

    Provides energy, gradient and Hessian for a fixed functional and total
    charge; coordinates are given in ``unit`` while gradients are returned in
    Hartree/Bohr and Hessians in Hartree/Bohr^2.
    """

    def __init__(self, functional: str = "pbe0", charge: float = 0.0, unit: str = "angstrom",
                 param: Optional[D4Parameters] = None, cutoff: Optional[RealSpaceCutoff] = None,
                 counting=erf_count):
        """
        Parameters:
        -----------
        functional : str
            Density functional whose damping parameters are used
        charge : float
            Total molecular charge
        unit : str
            Length unit of the coordinates, "angstrom" or "bohr"
        param : D4Parameters, optional
            Explicit damping parameters, overriding ``functional``
        cutoff : RealSpaceCutoff, optional
        counting : CountingFunction
        """
        self.params = param if param is not None else get_damping_parameters(functional)
        self.charge = charge
        self.unit = unit
        self.to_bohr = UnitValueLib().length_to_bohr(unit)
        self.cutoff = cutoff if cutoff is not None else RealSpaceCutoff()
        self.counting = counting
        self.model = D4Model()

    def _run(self, coords: np.ndarray, atomic_numbers: np.ndarray, gradient: bool) -> DispersionResult:
        positions = np.asarray(coords, dtype=np.float64) * self.to_bohr
        return get_dispersion(
            atomic_numbers,
            positions,
            charge=self.charge,
            param=self.params,
            gradient=gradient,
            cutoff=self.cutoff,
            counting=self.counting,
            model=self.model,
        )

    def calculate_energy(self, coords: np.ndarray, atomic_numbers: np.ndarray) -> float:
        """D4 dispersion energy in Hartree"""
        return self._run(coords, atomic_numbers, gradient=False).energy

    def calculate_gradient(self, coords: np.ndarray, atomic_numbers: np.ndarray) -> np.ndarray:
        """Analytic D4 dispersion gradient in Hartree/Bohr, shape (n_atoms, 3)"""
        return self._run(coords, atomic_numbers, gradient=True).gradient

    def calculate_energy_gradient(self, coords: np.ndarray,
                                  atomic_numbers: np.ndarray) -> Tuple[float, np.ndarray]:
        result = self._run(coords, atomic_numbers, gradient=True)
        return result.energy, result.gradient

    def calculate_hessian(self, coords: np.ndarray, atomic_numbers: np.ndarray,
                          delta: float = 1.0e-4) -> np.ndarray:
        """
        Numerical Hessian from central differences of the analytic gradient

        Parameters:
        -----------
        coords : np.ndarray, shape (n_atoms, 3)
            Coordinates in ``self.unit``
        atomic_numbers : np.ndarray, shape (n_atoms,)
        delta : float
            Finite difference step in Bohr

        Returns:
        --------
        hessian : np.ndarray, shape (3*n_atoms, 3*n_atoms)
            Hartree/Bohr^2
        """
        coords = np.asarray(coords, dtype=np.float64)
        n_coords = coords.size
        hessian = np.zeros((n_coords, n_coords))
        step = delta / self.to_bohr

        for i in range(n_coords):
            atom_i, coord_i = divmod(i, 3)
            coords_plus = coords.copy()
            coords_plus[atom_i, coord_i] += step
            grad_plus = self.calculate_gradient(coords_plus, atomic_numbers)

            coords_minus = coords.copy()
            coords_minus[atom_i, coord_i] -= step
            grad_minus = self.calculate_gradient(coords_minus, atomic_numbers)

            hessian[i, :] = (grad_plus - grad_minus).reshape(-1) / (2.0 * delta)

        return 0.5 * (hessian + hessian.T)

    def set_damping_parameters(self, s6: Optional[float] = None, s8: Optional[float] = None,
                               a1: Optional[float] = None, a2: Optional[float] = None,
                               s9: Optional[float] = None) -> None:
        """Override individual damping parameters"""
        changes = {k: v for k, v in dict(s6=s6, s8=s8, a1=a1, a2=a2, s9=s9).items() if v is not None}
        self.params = dataclasses.replace(self.params, **changes)

    def get_dispersion_coefficients(self, coords: np.ndarray,
                                    atomic_numbers: np.ndarray) -> Dict[str, np.ndarray]:
        """
        C6/C8 coefficients, charges and coordination numbers of a structure

        Returns:
        --------
        coefficients : dict
            "c6", "c8", "charges", "cn", "polarizabilities"
        """
        positions = np.asarray(coords, dtype=np.float64) * self.to_bohr
        mol = Molecule(atomic_numbers, positions)
        props = get_properties(mol, None, charge=self.charge, cutoff=self.cutoff,
                               counting=self.counting, model=self.model)
        props["c8"] = D4Model.get_c8(mol, props["c6"])
        return props

    def calculate_coordination_numbers(self, coords: np.ndarray, atomic_numbers: np.ndarray) -> np.ndarray:
        """D4 coordination numbers"""
        positions = np.asarray(coords, dtype=np.float64) * self.to_bohr
        mol = Molecule(atomic_numbers, positions)
        cn, _ = get_coordination_number(mol, self.cutoff.cn, counting=self.counting, en_weighted=True)
        return cn

    def get_cutoff_radii(self) -> Tuple[float, float]:
        """Two-body and coordination-number cutoffs in ``self.unit``"""
        return self.cutoff.disp2 / self.to_bohr, self.cutoff.cn / self.to_bohr
