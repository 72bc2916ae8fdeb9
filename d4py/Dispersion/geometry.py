import logging
from dataclasses import dataclass

import numpy as np

from d4py.errors import InvalidGeometryError
from d4py.Parameters.parameter import UnitValueLib, element_number, check_supported_elements
from d4py.Utils.calc_tools import neighbor_pairs

logger = logging.getLogger(__name__)

# Atoms closer than this (Bohr) are treated as duplicates
DUPLICATE_DISTANCE = 1.0e-8


@dataclass(frozen=True)
class Molecule:
    """
    Atomic numbers and Cartesian positions (Bohr) of a molecular system.

    Arrays are copied on construction and made read-only.
    """
    numbers: np.ndarray
    positions: np.ndarray

    def __post_init__(self):
        try:
            raw = np.asarray(self.numbers).reshape(-1)
            positions = np.array(self.positions, dtype=np.float64, copy=True)
        except (TypeError, ValueError) as e:
            raise InvalidGeometryError(f"cannot interpret input arrays: {e}", stage="geometry") from e

        if raw.dtype.kind not in "iuf":
            raise InvalidGeometryError(
                f"atomic numbers must be integers, got dtype {raw.dtype}", stage="geometry"
            )
        if raw.dtype.kind == "f":
            bad = np.flatnonzero(~(np.isfinite(raw) & (raw == np.rint(raw))))
            if len(bad) > 0:
                raise InvalidGeometryError(
                    f"non-integer atomic number(s) {raw[bad].tolist()} for atom(s) {bad.tolist()}",
                    stage="geometry",
                    atoms=bad,
                )
        numbers = raw.astype(int)

        if len(numbers) == 0:
            raise InvalidGeometryError("molecule has no atoms", stage="geometry")
        if positions.ndim == 1 and positions.size == 3 * len(numbers):
            positions = positions.reshape(-1, 3)
        if positions.shape != (len(numbers), 3):
            raise InvalidGeometryError(
                f"positions have shape {positions.shape}, expected ({len(numbers)}, 3)",
                stage="geometry",
            )
        bad = np.flatnonzero(~np.all(np.isfinite(positions), axis=1))
        if len(bad) > 0:
            raise InvalidGeometryError(
                f"non-finite coordinates for atom(s) {bad.tolist()}", stage="geometry", atoms=bad
            )

        check_supported_elements(numbers)

        idx_i, idx_j, _, dist = neighbor_pairs(positions, DUPLICATE_DISTANCE)
        if len(idx_i) > 0:
            atoms = sorted(set(idx_i.tolist()) | set(idx_j.tolist()))
            logger.debug("duplicate positions: %s", list(zip(idx_i.tolist(), idx_j.tolist())))
            raise InvalidGeometryError(
                f"atoms {idx_i[0]} and {idx_j[0]} share a position (r = {dist[0]:.2e} Bohr)",
                stage="geometry",
                atoms=atoms,
            )

        numbers.setflags(write=False)
        positions.setflags(write=False)
        object.__setattr__(self, "numbers", numbers)
        object.__setattr__(self, "positions", positions)

    @property
    def natoms(self):
        return len(self.numbers)

    def __len__(self):
        return len(self.numbers)

    @classmethod
    def from_symbols(cls, symbols, positions, unit="bohr"):
        """Build a molecule from element symbols, converting positions to Bohr"""
        try:
            numbers = [element_number(s) for s in symbols]
        except ValueError as e:
            raise InvalidGeometryError(str(e), stage="geometry") from e
        factor = UnitValueLib().length_to_bohr(unit)
        return cls(numbers, np.asarray(positions, dtype=np.float64) * factor)
