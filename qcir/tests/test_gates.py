"""
Tests for gate objects and the named gate factory.

Matrices are checked against numpy references; state updates are checked
against full 2**n operators built basis state by basis state; Clifford
classification and tableau application are checked through stim.
"""

from __future__ import annotations

import numpy as np
import pytest
import stim

from qcir import (
    DenseMatrixGate,
    PauliGate,
    PauliRotationGate,
    QuantumState,
    PAULI_I,
    PAULI_X,
    PAULI_Y,
    PAULI_Z,
)
from qcir import gate_factory as gf

# ── Numpy gate matrices ───────────────────────────────────────────────────────

_I2 = np.eye(2, dtype=complex)
_H = np.array([[1, 1], [1, -1]], dtype=complex) / np.sqrt(2)
_X = np.array([[0, 1], [1, 0]], dtype=complex)
_Y = np.array([[0, -1j], [1j, 0]], dtype=complex)
_Z = np.diag([1.0, -1.0]).astype(complex)
_S = np.diag([1.0, 1j]).astype(complex)


def _RX(theta: float) -> np.ndarray:
    return np.cos(theta / 2) * _I2 - 1j * np.sin(theta / 2) * _X


def _RZ(theta: float) -> np.ndarray:
    return np.diag([np.exp(-1j * theta / 2), np.exp(1j * theta / 2)])


# ── Matrices ──────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "gate, expected",
    [
        (gf.X(0), _X),
        (gf.Y(0), _Y),
        (gf.Z(0), _Z),
        (gf.H(0), _H),
        (gf.S(0), _S),
        (gf.Sdag(0), _S.conj().T),
        (gf.T(0), np.diag([1.0, np.exp(1j * np.pi / 4)])),
        (gf.RX(0, 0.3), _RX(0.3)),
        (gf.RZ(0, 1.1), _RZ(1.1)),
        (gf.U1(0, 0.7), np.diag([1.0, np.exp(0.7j)])),
    ],
)
def test_named_gate_matrices(gate, expected):
    assert np.allclose(gate.get_matrix(), expected)


def test_sqrt_gates_square_to_paulis():
    sx = gf.sqrtX(0).get_matrix()
    sy = gf.sqrtY(0).get_matrix()
    assert np.allclose(sx @ sx, _X)
    assert np.allclose(sy @ sy, _Y)
    assert np.allclose(sx @ gf.sqrtXdag(0).get_matrix(), _I2)
    assert np.allclose(sy @ gf.sqrtYdag(0).get_matrix(), _I2)


def test_u3_special_cases():
    """U3(theta, -pi/2, pi/2) = RX(theta); U2(0, pi) = H."""
    theta = 0.8
    assert np.allclose(gf.U3(0, theta, -np.pi / 2, np.pi / 2).get_matrix(), _RX(theta))
    assert np.allclose(gf.U2(0, 0.0, np.pi).get_matrix(), _H)


def test_pauli_rotation_matrix():
    """exp(-i a X0 Z1) = cos(a) I - i sin(a) (Z ⊗ X) with qubit 0 least significant."""
    a = 0.37
    gate = PauliRotationGate([0, 1], [PAULI_X, PAULI_Z], a)
    pauli = np.kron(_Z, _X)
    expected = np.cos(a) * np.eye(4) - 1j * np.sin(a) * pauli
    assert np.allclose(gate.get_matrix(), expected)


def test_pauli_rotation_z_is_half_angle_rz():
    theta = 0.9
    rot = PauliRotationGate([0], [PAULI_Z], theta / 2)
    assert np.allclose(rot.get_matrix(), _RZ(theta))


# ── Capability queries ────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "gate, clifford",
    [
        (gf.X(0), True),
        (gf.H(0), True),
        (gf.S(0), True),
        (gf.Sdag(0), True),
        (gf.sqrtX(0), True),
        (gf.sqrtYdag(0), True),
        (gf.CNOT(0, 1), True),
        (gf.CZ(1, 0), True),
        (gf.SWAP(0, 1), True),
        (gf.RZ(0, np.pi / 2), True),
        (gf.T(0), False),
        (gf.Tdag(0), False),
        (gf.RX(0, 0.3), False),
        (gf.P0(0), False),
        (gf.P1(0), False),
    ],
)
def test_is_clifford(gate, clifford: bool):
    assert gate.is_clifford() is clifford


@pytest.mark.parametrize(
    "angle, clifford",
    [(0.0, True), (np.pi / 4, True), (np.pi / 2, True), (-3 * np.pi / 4, True),
     (np.pi / 8, False), (0.1, False)],
)
def test_pauli_rotation_clifford_angles(angle: float, clifford: bool):
    gate = PauliRotationGate([0, 1], [PAULI_X, PAULI_Y], angle)
    assert gate.is_clifford() is clifford


_OFF_GRID_ANGLES = [0.05, 0.3, 1.0, np.pi / 3, 2.5, -0.7]


@pytest.mark.parametrize("make", [gf.RX, gf.RY, gf.RZ])
@pytest.mark.parametrize("theta", _OFF_GRID_ANGLES)
def test_rotation_off_quarter_turn_not_clifford(make, theta: float):
    assert not make(0, theta).is_clifford()


@pytest.mark.parametrize("make", [gf.RX, gf.RY, gf.RZ])
@pytest.mark.parametrize("theta", [np.pi / 2, np.pi, -np.pi / 2, 3 * np.pi / 2])
def test_rotation_on_quarter_turn_is_clifford(make, theta: float):
    assert make(0, theta).is_clifford()


@pytest.mark.parametrize(
    "theta, phi, lam",
    [(0.3, 0.0, 0.0), (np.pi / 2, 0.2, 0.0), (1.1, 0.4, -0.9), (np.pi, np.pi / 3, 0.0)],
)
def test_u3_generic_angles_not_clifford(theta: float, phi: float, lam: float):
    assert not gf.U3(0, theta, phi, lam).is_clifford()


def test_controlled_small_rotation_not_clifford():
    rz = gf.RZ(0, 0.2).get_matrix()
    assert not gf.DenseMatrix([0], rz, [1]).is_clifford()


def test_identity_pauli_rotation_is_clifford():
    assert PauliRotationGate([0], [PAULI_I], 0.123).is_clifford()


@pytest.mark.parametrize(
    "gate, diagonal",
    [
        (gf.Z(0), True),
        (gf.RZ(0, 0.4), True),
        (gf.T(0), True),
        (gf.CZ(0, 1), True),
        (gf.P1(0), True),
        (gf.X(0), False),
        (gf.CNOT(0, 1), False),
        (PauliGate([0, 1], [PAULI_Z, PAULI_I]), True),
        (PauliRotationGate([0, 1], [PAULI_Z, PAULI_Z], 0.5), True),
        (PauliRotationGate([0, 1], [PAULI_X, PAULI_Z], 0.5), False),
    ],
)
def test_is_diagonal(gate, diagonal: bool):
    assert gate.is_diagonal() is diagonal


def test_gaussian_flags():
    assert gf.H(0).is_gaussian()
    assert gf.CNOT(0, 1).is_gaussian()
    assert gf.RY(0, 0.2).is_gaussian()
    assert PauliRotationGate([0], [PAULI_X], 0.2).is_gaussian()
    assert not gf.P0(0).is_gaussian()
    assert not gf.DenseMatrix(0, _H).is_gaussian()
    assert gf.DenseMatrix(0, _H, gaussian=True).is_gaussian()


# ── Construction errors ───────────────────────────────────────────────────────


def test_duplicate_qubits_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        DenseMatrixGate('CX', _X, [1], [1])


def test_no_targets_rejected():
    with pytest.raises(ValueError, match="at least one target"):
        PauliGate([], [])


def test_matrix_shape_checked():
    with pytest.raises(ValueError, match="shape"):
        DenseMatrixGate('bad', np.eye(4), [0])


def test_pauli_id_count_checked():
    with pytest.raises(ValueError, match="Pauli ids"):
        PauliGate([0, 1], [PAULI_X])
    with pytest.raises(ValueError, match="Pauli id"):
        PauliRotationGate([0], [7], 0.1)


# ── State-vector application ──────────────────────────────────────────────────


def test_x_on_second_qubit():
    state = QuantumState(2)
    gf.X(1).update_quantum_state(state)
    assert np.allclose(state.get_vector(), [0, 0, 1, 0])


@pytest.mark.parametrize(
    "gate, start, end",
    [
        (gf.CNOT(0, 1), 0b01, 0b11),
        (gf.CNOT(1, 0), 0b10, 0b11),
        (gf.CNOT(0, 1), 0b10, 0b10),
        (gf.SWAP(0, 1), 0b01, 0b10),
    ],
)
def test_two_qubit_basis_action(gate, start: int, end: int):
    state = QuantumState(2)
    state.set_computational_basis(start)
    gate.update_quantum_state(state)
    expected = np.zeros(4)
    expected[end] = 1.0
    assert np.allclose(state.get_vector(), expected)


@pytest.mark.parametrize(
    "targets, controls",
    [([0], []), ([2], []), ([1], [0]), ([2, 0], []), ([0, 2], [1]), ([3, 1], [0, 2])],
)
def test_dense_gate_matches_reference(targets, controls, random_state, reference_operator):
    n = 4
    rng = np.random.default_rng(len(targets) * 10 + len(controls))
    dim = 1 << len(targets)
    matrix = rng.normal(size=(dim, dim)) + 1j * rng.normal(size=(dim, dim))
    gate = DenseMatrixGate('M', matrix, targets, controls)

    state = random_state(n, seed=3)
    before = state.get_vector()
    gate.update_quantum_state(state)

    expected = reference_operator(n, matrix, targets, controls) @ before
    assert np.allclose(state.get_vector(), expected)


def test_pauli_gate_on_state(random_state, reference_operator):
    state = random_state(3, seed=5)
    before = state.get_vector()
    PauliGate([2, 0], [PAULI_Y, PAULI_X]).update_quantum_state(state)
    expected = reference_operator(3, np.kron(_X, _Y), [2, 0]) @ before
    assert np.allclose(state.get_vector(), expected)


# ── Tableau application ───────────────────────────────────────────────────────


def test_bell_state_on_tableau():
    sim = stim.TableauSimulator()
    gf.H(0).update_quantum_state(sim)
    gf.CNOT(0, 1).update_quantum_state(sim)
    assert sim.peek_observable_expectation(stim.PauliString("ZZ")) == 1
    assert sim.peek_observable_expectation(stim.PauliString("XX")) == 1
    assert sim.peek_observable_expectation(stim.PauliString("ZI")) == 0


def test_cnot_direction_on_tableau():
    """X on qubit 1 then CNOT(1 → 0) flips qubit 0."""
    sim = stim.TableauSimulator()
    gf.X(1).update_quantum_state(sim)
    gf.CNOT(1, 0).update_quantum_state(sim)
    assert sim.peek_observable_expectation(stim.PauliString("Z_")) == -1
    assert sim.peek_observable_expectation(stim.PauliString("_Z")) == -1


def test_pauli_gate_on_tableau():
    sim = stim.TableauSimulator()
    PauliGate([1], [PAULI_X]).update_quantum_state(sim)
    assert sim.peek_observable_expectation(stim.PauliString("_Z")) == -1


def test_clifford_rotation_on_tableau():
    """exp(-i pi/4 X)|0> = |-i>: <Y> = -1."""
    sim = stim.TableauSimulator()
    PauliRotationGate([0], [PAULI_X], np.pi / 4).update_quantum_state(sim)
    assert sim.peek_observable_expectation(stim.PauliString("Y")) == -1


def test_non_clifford_on_tableau_rejected():
    sim = stim.TableauSimulator()
    with pytest.raises(ValueError, match="not Clifford"):
        gf.T(0).update_quantum_state(sim)


@pytest.mark.parametrize("gate", [gf.RX(0, 0.3), gf.RY(0, 0.3), gf.RZ(0, 0.3), gf.U1(0, 0.1)])
def test_small_rotation_on_tableau_rejected(gate):
    sim = stim.TableauSimulator()
    with pytest.raises(ValueError, match="not Clifford"):
        gate.update_quantum_state(sim)
    assert sim.peek_observable_expectation(stim.PauliString("Z")) == 1


def test_dense_non_clifford_on_tableau_rejected():
    rx = gf.RX(0, 0.3).get_matrix()
    with pytest.raises(ValueError, match="not Clifford"):
        gf.DenseMatrix([0], rx).to_tableau()


def test_unsupported_state_type():
    with pytest.raises(TypeError, match="Unsupported state"):
        gf.H(0).update_quantum_state(np.zeros(2))


# ── Copy / formatting ─────────────────────────────────────────────────────────


def test_copy_is_independent():
    gate = gf.RX(2, 0.5)
    dup = gate.copy()
    assert dup is not gate
    assert dup.target_qubit_list == [2]
    assert np.allclose(dup.get_matrix(), gate.get_matrix())
    dup.get_matrix()[0, 0] = 99.0
    assert not np.isclose(gate.get_matrix()[0, 0], 99.0)


def test_copy_keeps_pauli_rotation_fields():
    gate = PauliRotationGate([0, 1], [PAULI_Z, PAULI_X], 0.25)
    dup = gate.copy()
    assert dup.angle == 0.25
    assert dup.pauli_id_list == [PAULI_Z, PAULI_X]


@pytest.mark.parametrize(
    "gate, text",
    [
        (gf.H(0), "H 0"),
        (gf.CNOT(0, 1), "CNOT 0 1"),
        (gf.RX(2, 0.5), "RX(0.5) 2"),
        (PauliGate([0, 3], [PAULI_X, PAULI_Z]), "Pauli X0*Z3"),
        (PauliRotationGate([0, 1], [PAULI_X, PAULI_Z], 0.25), "PauliRotation(0.25) X0*Z1"),
    ],
)
def test_gate_str(gate, text: str):
    assert str(gate) == text
