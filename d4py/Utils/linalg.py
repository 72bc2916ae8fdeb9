"""
Dense linear-algebra substrate used by the charge model.

Operations validate operand shapes before touching any output, so a failed
call leaves its output array exactly as it was.
"""

import logging

import numpy as np
from scipy.linalg.lapack import dgetrf, dgetri, dgecon

from d4py.errors import DimensionMismatchError, SingularMatrixError

logger = logging.getLogger(__name__)

# Reciprocal condition number below which a matrix is treated as singular
RCOND_THRESHOLD = 1.0e-14


def _check_rank(name, array, rank):
    if not isinstance(array, np.ndarray) or array.ndim != rank:
        ndim = getattr(array, "ndim", None)
        raise DimensionMismatchError(
            f"{name} must be a {rank}-D array, got ndim={ndim}", stage="linalg"
        )


def matvec(c, a, v, transpose=False, alpha=1.0):
    """
    Accumulate c += alpha * op(a) @ v in place.

    Parameters:
    -----------
    c : np.ndarray, shape (m,)
        Output vector, updated in place
    a : np.ndarray, shape (m, k) or (k, m) if transpose
    v : np.ndarray, shape (k,)
    transpose : bool
        Use a.T instead of a
    alpha : float
        Scaling of the product

    Returns:
    --------
    c : np.ndarray
    """
    _check_rank("c", c, 1)
    _check_rank("a", a, 2)
    _check_rank("v", v, 1)
    op_a = a.T if transpose else a
    if op_a.shape != (c.shape[0], v.shape[0]):
        raise DimensionMismatchError(
            f"matvec: op(a) is {op_a.shape}, expected ({c.shape[0]}, {v.shape[0]})",
            stage="linalg",
        )
    c += alpha * (op_a @ v)
    return c


# (rows of op(a), cols of op(a)) for each transpose flag
def _op_shape(array, transpose):
    rows, cols = array.shape
    return (cols, rows) if transpose else (rows, cols)


def matmul(c, a, b, transpose_a=False, transpose_b=False, alpha=1.0):
    """
    Accumulate c += alpha * op(a) @ op(b) in place.

    NN: a.cols == b.rows, a.rows == c.rows, b.cols == c.cols
    NT: a.cols == b.cols, a.rows == c.rows, b.rows == c.cols
    TN: a.rows == b.rows, a.cols == c.rows, b.cols == c.cols
    TT: a.rows == b.cols, a.cols == c.rows, b.rows == c.cols
    """
    _check_rank("c", c, 2)
    _check_rank("a", a, 2)
    _check_rank("b", b, 2)
    if min(a.size, b.size, c.size) == 0:
        raise DimensionMismatchError(
            f"matmul: zero-sized operand (a {a.shape}, b {b.shape}, c {c.shape})",
            stage="linalg",
        )
    a_rows, a_cols = _op_shape(a, transpose_a)
    b_rows, b_cols = _op_shape(b, transpose_b)
    if a_cols != b_rows or a_rows != c.shape[0] or b_cols != c.shape[1]:
        mode = ("T" if transpose_a else "N") + ("T" if transpose_b else "N")
        raise DimensionMismatchError(
            f"matmul ({mode}): cannot form {(a_rows, a_cols)} @ {(b_rows, b_cols)} "
            f"into {c.shape}",
            stage="linalg",
        )
    op_a = a.T if transpose_a else a
    op_b = b.T if transpose_b else b
    c += alpha * (op_a @ op_b)
    return c


def invert(a):
    """
    Invert a square matrix in place by LU factorization (getrf + getri).

    The factorization runs on a copy; ``a`` is overwritten only when the
    inverse is obtained and the matrix is well conditioned.

    Raises:
    -------
    DimensionMismatchError
        ``a`` is not a square 2-D array
    SingularMatrixError
        Zero pivot, failed inversion, or rcond below RCOND_THRESHOLD
    """
    _check_rank("a", a, 2)
    if a.shape[0] != a.shape[1] or a.shape[0] == 0:
        raise DimensionMismatchError(
            f"invert: matrix must be square and non-empty, got {a.shape}", stage="linalg"
        )
    work = np.array(a, dtype=np.float64, order="F", copy=True)
    anorm = np.linalg.norm(work, ord=1)

    lu, piv, info = dgetrf(work, overwrite_a=1)
    if info != 0:
        logger.debug("getrf failed with info=%d", info)
        raise SingularMatrixError(
            f"LU factorization failed (info={info})", stage="linalg"
        )

    rcond, info = dgecon(lu, anorm, norm="1")
    if info != 0 or not np.isfinite(rcond) or rcond < RCOND_THRESHOLD:
        logger.debug("matrix is ill-conditioned, rcond=%g", rcond)
        raise SingularMatrixError(
            f"matrix is singular to working precision (rcond={rcond:.3e})", stage="linalg"
        )

    inv, info = dgetri(lu, piv, overwrite_lu=1)
    if info != 0:
        logger.debug("getri failed with info=%d", info)
        raise SingularMatrixError(f"matrix inversion failed (info={info})", stage="linalg")

    a[...] = inv
    return a
