import logging

import numpy as np
import pytest

from d4py.Dispersion.d4_model import D4Model
from d4py.Dispersion.geometry import Molecule
from d4py.Parameters.parameter import reference_db, r4r2
from d4py.Parameters.reference import count_gaussian_weights, FREQ_WEIGHTS


def test_gaussian_weight_counts():
    np.testing.assert_array_equal(count_gaussian_weights([0.0, 1.0]), [3, 1])
    np.testing.assert_array_equal(count_gaussian_weights([0.0]), [3])
    np.testing.assert_array_equal(count_gaussian_weights([0.0, 2.0, 3.0, 4.0]), [3, 1, 1, 1])


def test_trapezoid_weights():
    assert FREQ_WEIGHTS[0] == pytest.approx(0.0249995)
    assert FREQ_WEIGHTS[1] == pytest.approx(0.0499995)
    assert FREQ_WEIGHTS[-1] == pytest.approx(1.25)


def test_free_atom_c6_is_reproduced():
    # carbon reference with CN 0 is the free atom
    assert reference_db.refc6[6, 6, 0, 0] == pytest.approx(46.6, rel=0.05)
    assert reference_db.refc6[6, 1, 0, 0] == pytest.approx(reference_db.refc6[1, 6, 0, 0])


def test_neutral_weights_are_normalized(chloromethanol_mol):
    model = D4Model()
    cn = np.array([3.2, 0.9, 1.1, 1.5, 0.8])
    gw, dgwdcn, dgwdq = model.weight_references(chloromethanol_mol, cn, np.zeros(5), gradient=True)
    np.testing.assert_allclose(gw.sum(axis=1), 1.0)
    np.testing.assert_allclose(dgwdcn.sum(axis=1), 0.0, atol=1e-12)
    assert dgwdq.shape == gw.shape


def test_weights_fall_back_to_nearest_reference(caplog):
    mol = Molecule([6], [[0.0, 0.0, 0.0]])
    model = D4Model()
    caplog.set_level(logging.WARNING)
    gw, dgwdcn, _ = model.weight_references(mol, np.array([50.0]), np.zeros(1), gradient=True)
    nearest = int(np.argmax(reference_db.refcn[6, :reference_db.nref[6]]))
    expected = np.zeros(reference_db.max_ref)
    expected[nearest] = 1.0
    np.testing.assert_allclose(gw[0], expected)
    assert np.all(dgwdcn == 0.0)
    assert any("atom 0" in r.message for r in caplog.records)


def test_weight_derivatives_match_finite_difference(chloromethanol_mol):
    model = D4Model()
    cn = np.array([3.2, 0.9, 1.1, 1.5, 0.8])
    q = np.array([0.1, 0.05, 0.04, -0.15, -0.04])
    _, dgwdcn, dgwdq = model.weight_references(chloromethanol_mol, cn, q, gradient=True)
    h = 1e-6
    gw_p, _, _ = model.weight_references(chloromethanol_mol, cn + h, q)
    gw_m, _, _ = model.weight_references(chloromethanol_mol, cn - h, q)
    np.testing.assert_allclose(dgwdcn, (gw_p - gw_m) / (2 * h), atol=1e-7)
    gw_p, _, _ = model.weight_references(chloromethanol_mol, cn, q + h)
    gw_m, _, _ = model.weight_references(chloromethanol_mol, cn, q - h)
    np.testing.assert_allclose(dgwdq, (gw_p - gw_m) / (2 * h), atol=1e-7)


def test_c6_is_symmetric_and_positive(chloromethanol_mol):
    model = D4Model()
    cn = np.array([3.2, 0.9, 1.1, 1.5, 0.8])
    gw, dgwdcn, dgwdq = model.weight_references(chloromethanol_mol, cn, np.zeros(5), gradient=True)
    c6, dc6dcn, dc6dq = model.get_atomic_c6(chloromethanol_mol, gw, dgwdcn, dgwdq)
    np.testing.assert_allclose(c6, c6.T)
    assert np.all(c6 > 0.0)
    assert dc6dcn.shape == dc6dq.shape == (5, 5)


def test_c8_from_c6(chloromethanol_mol):
    c6 = np.full((5, 5), 10.0)
    c8 = D4Model.get_c8(chloromethanol_mol, c6)
    qq = r4r2[chloromethanol_mol.numbers]
    assert c8[0, 3] == pytest.approx(30.0 * qq[0] * qq[3])


def test_polarizability_decreases_with_coordination():
    mol = Molecule([6], [[0.0, 0.0, 0.0]])
    model = D4Model()
    gw_free, _, _ = model.weight_references(mol, np.array([0.0]), np.zeros(1))
    gw_bound, _, _ = model.weight_references(mol, np.array([4.0]), np.zeros(1))
    assert model.get_polarizabilities(mol, gw_bound)[0] < model.get_polarizabilities(mol, gw_free)[0]


@pytest.mark.parametrize("cn", [9.0, 11.0])
def test_weights_stay_finite_far_above_single_reference(cn):
    # the Gaussian norm of neon is tiny but positive here
    mol = Molecule([10], [[0.0, 0.0, 0.0]])
    model = D4Model()
    gw, dgwdcn, dgwdq = model.weight_references(mol, np.array([cn]), np.zeros(1), gradient=True)
    expected = np.zeros(reference_db.max_ref)
    expected[0] = 1.0
    np.testing.assert_allclose(gw[0], expected)
    assert np.all(np.isfinite(dgwdcn))
    assert np.all(np.isfinite(dgwdq))
    np.testing.assert_allclose(dgwdcn, 0.0, atol=1e-12)


def test_weight_derivative_stays_finite_above_alkali_references():
    mol = Molecule([3], [[0.0, 0.0, 0.0]])
    model = D4Model()
    gw, dgwdcn, _ = model.weight_references(mol, np.array([9.887]), np.zeros(1), gradient=True)
    assert np.all(np.isfinite(gw))
    assert np.all(np.isfinite(dgwdcn))
    assert gw[0].sum() == pytest.approx(1.0)
