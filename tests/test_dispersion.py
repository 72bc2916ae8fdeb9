import numpy as np
import pytest

from d4py.errors import MissingParametersError, InvalidGeometryError
from d4py.Parameters.parameter import D4Parameters, get_damping_parameters, r4r2
from d4py.Dispersion.geometry import Molecule
from d4py.Dispersion.cutoff import RealSpaceCutoff
from d4py.Dispersion.ncoord import exp_count
from d4py.Dispersion.atm_energy import get_dispersion3
from d4py.Dispersion.d4_dispersion_energy import (
    get_dispersion,
    get_properties,
    D4DispersionEnergyCalculator,
)

PBE0 = get_damping_parameters("pbe0")


def test_neon_dimer_reference_energy():
    # free-atom Ne C6 from the 23-point Casimir-Polder grid and the PBE0 BJ energy at 5.8 Bohr
    result = get_dispersion([10, 10], [[0.0, 0.0, 0.0], [0.0, 0.0, 5.8]], param=PBE0)

    assert result.c6[0, 1] == pytest.approx(6.41264, rel=1e-4)
    assert result.energy_three_body == 0.0
    assert result.energy == pytest.approx(-7.81162e-5, rel=1e-4)


def test_single_atom_has_no_dispersion():
    result = get_dispersion([6], [[0.0, 0.0, 0.0]], functional="pbe", gradient=True)
    assert result.energy == 0.0
    np.testing.assert_array_equal(result.gradient, 0.0)


def test_energy_split(chloromethanol):
    result = get_dispersion(*chloromethanol, functional="b3lyp")
    assert result.energy == pytest.approx(result.energy_two_body + result.energy_three_body)
    assert result.energy_two_body < 0.0
    assert result.energy_three_body != 0.0


def test_permutation_invariance(chloromethanol):
    numbers, positions = chloromethanol
    perm = np.array([3, 0, 4, 2, 1])
    ref = get_dispersion(numbers, positions, param=PBE0, gradient=True)
    res = get_dispersion(numbers[perm], positions[perm], param=PBE0, gradient=True)
    assert res.energy == pytest.approx(ref.energy, rel=1e-10)
    np.testing.assert_allclose(res.gradient, ref.gradient[perm], atol=1e-12)
    np.testing.assert_allclose(res.charges, ref.charges[perm], atol=1e-10)


def test_translation_and_rotation_invariance(chloromethanol, rotation):
    numbers, positions = chloromethanol
    ref = get_dispersion(numbers, positions, param=PBE0, gradient=True)

    shifted = get_dispersion(numbers, positions + np.array([3.0, -7.5, 11.0]), param=PBE0)
    assert shifted.energy == pytest.approx(ref.energy, rel=1e-10)

    rotated = get_dispersion(numbers, positions @ rotation.T, param=PBE0, gradient=True)
    assert rotated.energy == pytest.approx(ref.energy, rel=1e-10)
    np.testing.assert_allclose(rotated.gradient, ref.gradient @ rotation.T, atol=1e-12)


@pytest.mark.parametrize("charge", [0.0, -1.0])
def test_gradient_sums_to_zero(chloromethanol, charge):
    result = get_dispersion(*chloromethanol, charge=charge, param=PBE0, gradient=True)
    np.testing.assert_allclose(result.gradient.sum(axis=0), 0.0, atol=1e-12)


@pytest.mark.parametrize("counting", [None, exp_count])
def test_gradient_matches_finite_difference(chloromethanol, counting):
    numbers, positions = chloromethanol
    kwargs = {"param": PBE0, "charge": 0.0}
    if counting is not None:
        kwargs["counting"] = counting
    analytic = get_dispersion(numbers, positions, gradient=True, **kwargs).gradient

    h = 1e-5
    numeric = np.zeros_like(positions)
    for i in range(len(numbers)):
        for x in range(3):
            plus = positions.copy()
            plus[i, x] += h
            minus = positions.copy()
            minus[i, x] -= h
            e_p = get_dispersion(numbers, plus, **kwargs).energy
            e_m = get_dispersion(numbers, minus, **kwargs).energy
            numeric[i, x] = (e_p - e_m) / (2 * h)

    np.testing.assert_allclose(analytic, numeric, atol=1e-9)


def test_gradient_of_water_dimer_matches_finite_difference(water_dimer):
    numbers, positions = water_dimer
    analytic = get_dispersion(numbers, positions, functional="tpssh", gradient=True).gradient
    h = 1e-5
    for i, x in [(0, 0), (3, 1), (5, 2)]:
        plus = positions.copy()
        plus[i, x] += h
        minus = positions.copy()
        minus[i, x] -= h
        numeric = (
            get_dispersion(numbers, plus, functional="tpssh").energy
            - get_dispersion(numbers, minus, functional="tpssh").energy
        ) / (2 * h)
        assert analytic[i, x] == pytest.approx(numeric, abs=1e-9)


def test_collinear_triple_is_finite_and_attractive():
    mol = Molecule([10, 10, 10], [[0.0, 0.0, 0.0], [0.0, 0.0, 5.0], [0.0, 0.0, 10.0]])
    c6 = np.full((3, 3), 6.0)
    energy, dedc6, grad = get_dispersion3(mol, c6, PBE0, gradient=True)
    assert np.isfinite(energy)
    assert energy < 0.0
    assert np.all(np.isfinite(grad))
    np.testing.assert_allclose(grad.sum(axis=0), 0.0, atol=1e-14)


def test_compact_lithium_cluster_gradient_is_finite():
    # centred icosahedron, 2.9 Angstrom centre-surface distance
    phi = (1.0 + np.sqrt(5.0)) / 2.0
    vertices = []
    for s1 in (1.0, -1.0):
        for s2 in (phi, -phi):
            vertices += [[0.0, s1, s2], [s1, s2, 0.0], [s2, 0.0, s1]]
    vertices = np.array(vertices)
    vertices *= 2.9 * 1.8897261246 / np.linalg.norm(vertices[0])
    positions = np.vstack([np.zeros((1, 3)), vertices])

    result = get_dispersion([3] * 13, positions, functional="pbe0", gradient=True)
    assert result.cn[0] > result.cn[1]
    assert np.isfinite(result.energy)
    assert result.energy < 0.0
    assert np.all(np.isfinite(result.gradient))
    np.testing.assert_allclose(result.gradient.sum(axis=0), 0.0, atol=1e-10)


def test_equilateral_triple_is_repulsive():
    side = 6.0
    h = side * np.sqrt(3.0) / 2.0
    mol = Molecule([18, 18, 18], [[0.0, 0.0, 0.0], [side, 0.0, 0.0], [side / 2, h, 0.0]])
    energy, _, _ = get_dispersion3(mol, np.full((3, 3), 64.0), PBE0)
    assert energy > 0.0


def test_three_body_cutoff():
    mol = Molecule([10, 10, 10], [[0.0, 0.0, 0.0], [0.0, 0.0, 5.0], [0.0, 0.0, 50.0]])
    energy, _, _ = get_dispersion3(mol, np.full((3, 3), 6.0), PBE0, cutoff=40.0)
    assert energy == 0.0


def test_three_body_switched_off_with_s9_zero(chloromethanol):
    param = D4Parameters(s8=PBE0.s8, a1=PBE0.a1, a2=PBE0.a2, s9=0.0)
    result = get_dispersion(*chloromethanol, param=param)
    assert result.energy_three_body == 0.0


def test_two_body_cutoff_drops_distant_pairs():
    positions = [[0.0, 0.0, 0.0], [0.0, 0.0, 70.0]]
    result = get_dispersion([10, 10], positions, param=PBE0)
    assert result.energy == 0.0
    result = get_dispersion([10, 10], positions, param=PBE0, cutoff=RealSpaceCutoff(disp2=80.0))
    assert result.energy < 0.0


def test_parameters_must_be_given(chloromethanol):
    with pytest.raises(MissingParametersError):
        get_dispersion(*chloromethanol)
    with pytest.raises(MissingParametersError):
        get_dispersion(*chloromethanol, functional="not-a-functional")


def test_unsupported_element_names_atom():
    with pytest.raises(MissingParametersError) as excinfo:
        get_dispersion([1, 55], [[0.0, 0.0, 0.0], [0.0, 0.0, 5.0]], param=PBE0)
    assert excinfo.value.atoms == (1,)
    assert "Cs" in str(excinfo.value)


def test_duplicate_atoms_are_rejected():
    with pytest.raises(InvalidGeometryError):
        get_dispersion([6, 1], [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]], param=PBE0)


def test_fractional_atomic_numbers_are_rejected():
    with pytest.raises(InvalidGeometryError):
        get_dispersion([6.7, 1], [[0.0, 0.0, 0.0], [0.0, 0.0, 2.0]], param=PBE0)
    with pytest.raises(InvalidGeometryError):
        Molecule(["C"], [[0.0, 0.0, 0.0]])


def test_get_properties(chloromethanol):
    props = get_properties(*chloromethanol, charge=1.0)
    assert set(props) == {"cn", "charges", "c6", "polarizabilities"}
    assert props["charges"].sum() == pytest.approx(1.0, abs=1e-8)
    assert np.all(props["polarizabilities"] > 0.0)


def test_calculator_units(chloromethanol):
    numbers, positions = chloromethanol
    bohr = D4DispersionEnergyCalculator(functional="pbe0", unit="bohr")
    ang = D4DispersionEnergyCalculator(functional="pbe0", unit="angstrom")
    positions_ang = positions * 0.52917721067

    e_bohr, g_bohr = bohr.calculate_energy_gradient(positions, numbers)
    e_ang, g_ang = ang.calculate_energy_gradient(positions_ang, numbers)
    assert e_ang == pytest.approx(e_bohr, rel=1e-10)
    np.testing.assert_allclose(g_ang, g_bohr, atol=1e-12)
    assert ang.calculate_energy(positions_ang, numbers) == pytest.approx(e_bohr, rel=1e-10)


def test_calculator_hessian_is_symmetric(chloromethanol):
    numbers, positions = chloromethanol
    calc = D4DispersionEnergyCalculator(functional="pbe", unit="bohr")
    hessian = calc.calculate_hessian(positions, numbers)
    assert hessian.shape == (15, 15)
    np.testing.assert_allclose(hessian, hessian.T)
    # translations leave the energy unchanged
    np.testing.assert_allclose(hessian @ np.tile([1.0, 0.0, 0.0], 5), 0.0, atol=1e-6)


def test_calculator_set_damping_parameters():
    calc = D4DispersionEnergyCalculator(functional="pbe0", unit="bohr")
    calc.set_damping_parameters(s8=0.0)
    assert calc.params.s8 == 0.0
    assert calc.params.a1 == PBE0.a1


def test_calculator_dispersion_coefficients(chloromethanol):
    numbers, positions = chloromethanol
    calc = D4DispersionEnergyCalculator(functional="pbe0", unit="bohr")
    coeffs = calc.get_dispersion_coefficients(positions, numbers)
    qq = r4r2[numbers]
    np.testing.assert_allclose(coeffs["c8"], 3.0 * coeffs["c6"] * np.outer(qq, qq))
