"""
Named gate constructors.

Every function returns a new, unowned gate; hand it to Circuit.add_gate()
(which takes ownership) or use the Circuit.add_*_gate shortcuts.

── Matrices ─────────────────────────────────────────────────────────────────

    RX(theta) = exp(-i theta X / 2)     RY, RZ analogous
    U1(lam)             = diag(1, e^{i lam})
    U2(phi, lam)        = U3(pi/2, phi, lam)
    U3(theta, phi, lam) = [[cos(theta/2),          -e^{i lam} sin(theta/2)],
                           [e^{i phi} sin(theta/2), e^{i(phi+lam)} cos(theta/2)]]
    sqrtX = exp(-i pi X / 4) up to phase, sqrtY likewise.
    PauliRotation(angle) = exp(-i angle P)   (angle not halved)

── Gaussian flag ────────────────────────────────────────────────────────────

    Set for every named unitary gate and for Pauli / PauliRotation.
    Cleared for the projections P0, P1 and for DenseMatrix (unless the
    caller passes gaussian=True).
"""

from __future__ import annotations

import numpy as np

from .gates import DenseMatrixGate, PauliGate, PauliRotationGate


_I2 = np.eye(2, dtype=complex)
_X = np.array([[0, 1], [1, 0]], dtype=complex)
_Y = np.array([[0, -1j], [1j, 0]], dtype=complex)
_Z = np.diag([1.0, -1.0]).astype(complex)
_H = np.array([[1, 1], [1, -1]], dtype=complex) / np.sqrt(2)
_S = np.diag([1.0, 1j]).astype(complex)
_T = np.diag([1.0, np.exp(1j * np.pi / 4)])
_SQRT_X = 0.5 * np.array([[1 + 1j, 1 - 1j], [1 - 1j, 1 + 1j]])
_SQRT_Y = 0.5 * np.array([[1 + 1j, -1 - 1j], [1 + 1j, 1 + 1j]])
_P0 = np.diag([1.0, 0.0]).astype(complex)
_P1 = np.diag([0.0, 1.0]).astype(complex)
_SWAP = np.array(
    [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]], dtype=complex
)


def _named(name: str, matrix: np.ndarray, target: int, *, params=()) -> DenseMatrixGate:
    return DenseMatrixGate(name, matrix, [target], gaussian=True, params=params)


# ── Fixed one-qubit gates ─────────────────────────────────────────────────────

def Identity(target: int) -> DenseMatrixGate:
    return _named('I', _I2, target)


def X(target: int) -> DenseMatrixGate:
    return _named('X', _X, target)


def Y(target: int) -> DenseMatrixGate:
    return _named('Y', _Y, target)


def Z(target: int) -> DenseMatrixGate:
    return _named('Z', _Z, target)


def H(target: int) -> DenseMatrixGate:
    return _named('H', _H, target)


def S(target: int) -> DenseMatrixGate:
    return _named('S', _S, target)


def Sdag(target: int) -> DenseMatrixGate:
    return _named('Sdag', _S.conj().T, target)


def T(target: int) -> DenseMatrixGate:
    return _named('T', _T, target)


def Tdag(target: int) -> DenseMatrixGate:
    return _named('Tdag', _T.conj().T, target)


def sqrtX(target: int) -> DenseMatrixGate:
    return _named('sqrtX', _SQRT_X, target)


def sqrtXdag(target: int) -> DenseMatrixGate:
    return _named('sqrtXdag', _SQRT_X.conj().T, target)


def sqrtY(target: int) -> DenseMatrixGate:
    return _named('sqrtY', _SQRT_Y, target)


def sqrtYdag(target: int) -> DenseMatrixGate:
    return _named('sqrtYdag', _SQRT_Y.conj().T, target)


def P0(target: int) -> DenseMatrixGate:
    """Projection onto |0> (not unitary)."""
    return DenseMatrixGate('P0', _P0, [target])


def P1(target: int) -> DenseMatrixGate:
    """Projection onto |1> (not unitary)."""
    return DenseMatrixGate('P1', _P1, [target])


# ── Two-qubit gates ───────────────────────────────────────────────────────────

def CNOT(control: int, target: int) -> DenseMatrixGate:
    return DenseMatrixGate('CNOT', _X, [target], [control], gaussian=True)


def CZ(control: int, target: int) -> DenseMatrixGate:
    return DenseMatrixGate('CZ', _Z, [target], [control], gaussian=True)


def SWAP(target1: int, target2: int) -> DenseMatrixGate:
    return DenseMatrixGate('SWAP', _SWAP, [target1, target2], gaussian=True)


# ── Rotations ─────────────────────────────────────────────────────────────────

def RX(target: int, theta: float) -> DenseMatrixGate:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return _named('RX', np.array([[c, -1j * s], [-1j * s, c]]), target, params=(theta,))


def RY(target: int, theta: float) -> DenseMatrixGate:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return _named('RY', np.array([[c, -s], [s, c]], dtype=complex), target, params=(theta,))


def RZ(target: int, theta: float) -> DenseMatrixGate:
    mat = np.diag([np.exp(-1j * theta / 2), np.exp(1j * theta / 2)])
    return _named('RZ', mat, target, params=(theta,))


def _u3_matrix(theta: float, phi: float, lam: float) -> np.ndarray:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([
        [c, -np.exp(1j * lam) * s],
        [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c],
    ])


def U1(target: int, lam: float) -> DenseMatrixGate:
    return _named('U1', np.diag([1.0, np.exp(1j * lam)]), target, params=(lam,))


def U2(target: int, phi: float, lam: float) -> DenseMatrixGate:
    return _named('U2', _u3_matrix(np.pi / 2, phi, lam), target, params=(phi, lam))


def U3(target: int, theta: float, phi: float, lam: float) -> DenseMatrixGate:
    return _named('U3', _u3_matrix(theta, phi, lam), target, params=(theta, phi, lam))


# ── General gates ─────────────────────────────────────────────────────────────

def DenseMatrix(
    target_qubit_list: int | list[int],
    matrix,
    control_qubit_list=(),
    *,
    gaussian: bool = False,
) -> DenseMatrixGate:
    """Arbitrary matrix gate; a single int target is accepted."""
    targets = [target_qubit_list] if isinstance(target_qubit_list, int) else target_qubit_list
    return DenseMatrixGate('DenseMatrix', matrix, targets, control_qubit_list, gaussian=gaussian)


def Pauli(target_qubit_list: list[int], pauli_id_list: list[int]) -> PauliGate:
    return PauliGate(target_qubit_list, pauli_id_list)


def PauliRotation(
    target_qubit_list: list[int], pauli_id_list: list[int], angle: float
) -> PauliRotationGate:
    return PauliRotationGate(target_qubit_list, pauli_id_list, angle)
