"""
Exception types raised by the dispersion pipeline.

Every failure carries the name of the stage that detected it and, when
identifiable, the indices of the atoms involved, so that a caller can report
which part of the input was rejected instead of printing a wrong energy.
"""


class DispersionError(Exception):
    """Base class for all failures of the dispersion pipeline"""

    def __init__(self, message, stage=None, atoms=()):
        self.stage = stage
        self.atoms = tuple(int(a) for a in atoms)
        if stage is not None:
            message = f"[{stage}] {message}"
        super().__init__(message)


class DimensionMismatchError(DispersionError, ValueError):
    """Linear-algebra operand shapes are incompatible"""


class SingularMatrixError(DispersionError, ArithmeticError):
    """LU factorization failed or the matrix is numerically singular"""


class SingularSystemError(SingularMatrixError):
    """The EEQ linear system could not be solved (degenerate geometry)"""


class InvalidGeometryError(DispersionError, ValueError):
    """Empty input, malformed arrays, non-finite or duplicate coordinates"""


class MissingParametersError(DispersionError, KeyError):
    """Unsupported atomic number or unknown density functional"""

    def __str__(self):
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
