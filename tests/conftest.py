import numpy as np
import pytest

from d4py.Dispersion.geometry import Molecule


@pytest.fixture
def chloromethanol():
    # distorted C/H/H/O/Cl cluster in Bohr, no symmetry
    numbers = np.array([6, 1, 1, 8, 17])
    positions = np.array([
        [0.000, 0.000, 0.000],
        [1.190, 1.190, 1.190],
        [-1.190, -1.190, 1.190],
        [-1.300, 1.250, -1.100],
        [1.500, -1.700, -1.900],
    ])
    return numbers, positions


@pytest.fixture
def water_dimer():
    numbers = np.array([8, 1, 1, 8, 1, 1])
    positions = np.array([
        [-1.551007, -0.114520, 0.000000],
        [-1.934259, 0.762503, 0.000000],
        [-0.599677, 0.040712, 0.000000],
        [1.350625, 0.111469, 0.000000],
        [1.680398, -0.373741, -0.758561],
        [1.680398, -0.373741, 0.758561],
    ]) * 1.8897261246  # Angstrom -> Bohr
    return numbers, positions


@pytest.fixture
def chloromethanol_mol(chloromethanol):
    return Molecule(*chloromethanol)


@pytest.fixture
def rotation():
    rng = np.random.default_rng(7)
    q, r = np.linalg.qr(rng.normal(size=(3, 3)))
    q = q * np.sign(np.diag(r))
    if np.linalg.det(q) < 0.0:
        q[:, 0] = -q[:, 0]
    return q
