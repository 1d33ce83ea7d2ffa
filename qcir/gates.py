"""
Gate objects owned by a Circuit.

Every gate exposes the same small surface:

    target_qubit_list / control_qubit_list   ordered qubit indices
    get_matrix()                             matrix over the targets only
    update_quantum_state(state)              in-place application
    copy()                                   independent deep copy
    is_clifford() / is_gaussian() / is_diagonal()

Matrix convention: target_qubit_list[0] is the least significant bit of the
matrix row/column index (little endian, same as stim's endian='little').
A control qubit conditions the gate on that qubit being |1>.

Supported states:
    - qcir.QuantumState          dense state vector; any gate.
    - stim.TableauSimulator      stabilizer state; Clifford gates only,
                                 applied via do_tableau().

Gate kinds:
    - DenseMatrixGate     explicit matrix; backs every named gate in gate_factory.
    - PauliGate           tensor product of Paulis.
    - PauliRotationGate   exp(-i * angle * P) for a Pauli string P.
"""

from __future__ import annotations

import copy as _copy

import numpy as np
import stim

from .state import QuantumState


# ── Pauli ids (same numbering as stim.PauliString item access) ───────────────
PAULI_I, PAULI_X, PAULI_Y, PAULI_Z = 0, 1, 2, 3
_PAULI_CHARS = 'IXYZ'

# exp(-i*angle*P) is Clifford iff angle is a multiple of pi/4
_CLIFFORD_ANGLE_TOL = 1e-10

# |<U_tableau, U>| must equal dim (equality up to global phase). Relative,
# since stim returns complex64 matrices.
_CLIFFORD_MATRIX_RTOL = 1e-5


def _check_qubit_lists(targets: tuple[int, ...], controls: tuple[int, ...]) -> None:
    if not targets:
        raise ValueError("A gate needs at least one target qubit")
    every = targets + controls
    for q in every:
        if q < 0:
            raise ValueError(f"Qubit index must be non-negative, got {q}")
    if len(set(every)) != len(every):
        raise ValueError(
            f"Duplicate qubit in targets {list(targets)} / controls {list(controls)}"
        )


def _check_pauli_ids(pauli_ids: tuple[int, ...], n_targets: int) -> None:
    if len(pauli_ids) != n_targets:
        raise ValueError(
            f"Got {len(pauli_ids)} Pauli ids for {n_targets} target qubits"
        )
    for pid in pauli_ids:
        if pid not in (PAULI_I, PAULI_X, PAULI_Y, PAULI_Z):
            raise ValueError(f"Pauli id must be 0 (I), 1 (X), 2 (Y) or 3 (Z), got {pid}")


def _controlled_matrix(matrix: np.ndarray, n_controls: int) -> np.ndarray:
    """Full unitary over (targets..., controls...) with controls in the high bits."""
    if n_controls == 0:
        return matrix
    dim = matrix.shape[0]
    full = np.eye(dim << n_controls, dtype=complex)
    full[-dim:, -dim:] = matrix
    return full


def _pauli_label(targets: tuple[int, ...], pauli_ids: tuple[int, ...]) -> str:
    return '*'.join(f'{_PAULI_CHARS[p]}{q}' for q, p in zip(targets, pauli_ids))


# ── Base interface ────────────────────────────────────────────────────────────

class QuantumGate:
    """
    Base class for every gate kind.

    Subclasses implement get_matrix() and the three capability queries.
    Application to a state, copying and tableau conversion are shared.
    """

    def __init__(
        self,
        name: str,
        target_qubit_list,
        control_qubit_list=(),
    ) -> None:
        targets = tuple(int(q) for q in target_qubit_list)
        controls = tuple(int(q) for q in control_qubit_list)
        _check_qubit_lists(targets, controls)
        self.name = name
        self._targets = targets
        self._controls = controls
        self._tableau: stim.Tableau | None = None
        self._clifford: bool | None = None

    @property
    def target_qubit_list(self) -> list[int]:
        return list(self._targets)

    @property
    def control_qubit_list(self) -> list[int]:
        return list(self._controls)

    @property
    def qubits(self) -> tuple[int, ...]:
        """Controls followed by targets (the Stim argument order, e.g. CNOT c t)."""
        return self._controls + self._targets

    # ── Capability queries ────────────────────────────────────────────────────

    def get_matrix(self) -> np.ndarray:
        raise NotImplementedError

    def is_clifford(self) -> bool:
        raise NotImplementedError

    def is_gaussian(self) -> bool:
        raise NotImplementedError

    def is_diagonal(self) -> bool:
        raise NotImplementedError

    # ── Application ───────────────────────────────────────────────────────────

    def to_tableau(self) -> stim.Tableau:
        """
        Clifford tableau over (targets..., controls...).

        Raises:
            ValueError: if the gate is not Clifford.
        """
        if self._tableau is None:
            if not self.is_clifford():
                raise ValueError(f"Gate '{self}' is not Clifford; it has no tableau")
            self._tableau = self._build_tableau()
        return self._tableau

    def _build_tableau(self) -> stim.Tableau:
        full = _controlled_matrix(self.get_matrix(), len(self._controls))
        return stim.Tableau.from_unitary_matrix(full, endian='little')

    def update_quantum_state(self, state) -> None:
        """
        Apply this gate to `state` in place.

        Args:
            state: QuantumState (any gate) or stim.TableauSimulator
                   (Clifford gates only).
        """
        if isinstance(state, QuantumState):
            state.apply_matrix(self.get_matrix(), self._targets, self._controls)
        elif isinstance(state, stim.TableauSimulator):
            state.do_tableau(self.to_tableau(), list(self._targets + self._controls))
        else:
            raise TypeError(
                f"Unsupported state type '{type(state).__name__}'; "
                "expected QuantumState or stim.TableauSimulator"
            )

    def copy(self) -> 'QuantumGate':
        new = _copy.copy(self)
        new._tableau = None
        return new

    # ── Formatting ────────────────────────────────────────────────────────────

    def _param_str(self) -> str:
        return ''

    def __str__(self) -> str:
        qubits = ' '.join(str(q) for q in self.qubits)
        return f'{self.name}{self._param_str()} {qubits}'

    def __repr__(self) -> str:
        return f'<{type(self).__name__} {self}>'


# ── Dense matrix gate ─────────────────────────────────────────────────────────

class DenseMatrixGate(QuantumGate):
    """
    A gate given by an explicit matrix over its target qubits.

    Clifford-ness is decided by stim: the full controlled unitary is converted
    with stim.Tableau.from_unitary_matrix, and the tableau's own unitary must
    match the gate up to global phase. Non-unitary matrices (projections)
    are never Clifford.

    Args:
        name:               Display name ('H', 'CNOT', 'RX', ...).
        matrix:             (2**k, 2**k) matrix for k = len(target_qubit_list).
        target_qubit_list:  Target qubits; element 0 is the least significant bit.
        control_qubit_list: Control qubits (condition on |1>).
        gaussian:           Value reported by is_gaussian().
        params:             Rotation parameters, only used for display.
    """

    def __init__(
        self,
        name: str,
        matrix,
        target_qubit_list,
        control_qubit_list=(),
        *,
        gaussian: bool = False,
        params: tuple[float, ...] = (),
    ) -> None:
        super().__init__(name, target_qubit_list, control_qubit_list)
        mat = np.array(matrix, dtype=complex)
        dim = 1 << len(self._targets)
        if mat.shape != (dim, dim):
            raise ValueError(
                f"Matrix shape {mat.shape} does not match {len(self._targets)} "
                f"target qubit(s); expected ({dim}, {dim})"
            )
        self._matrix = mat
        self._gaussian = gaussian
        self.params = tuple(float(p) for p in params)

    def get_matrix(self) -> np.ndarray:
        return self._matrix.copy()

    def copy(self) -> 'DenseMatrixGate':
        new = super().copy()
        new._matrix = self._matrix.copy()
        return new

    def is_unitary(self) -> bool:
        m = self._matrix
        return bool(np.allclose(m @ m.conj().T, np.eye(m.shape[0])))

    def is_clifford(self) -> bool:
        if self._clifford is None:
            self._clifford = self._compute_clifford()
        return self._clifford

    def _compute_clifford(self) -> bool:
        if not self.is_unitary():
            return False
        try:
            tableau = self._build_tableau()
        except ValueError:
            return False
        # from_unitary_matrix can round a near-Clifford matrix to the closest
        # Clifford; only accept a tableau that reproduces the gate.
        full = _controlled_matrix(self._matrix, len(self._controls))
        rebuilt = tableau.to_unitary_matrix(endian='little')
        dim = full.shape[0]
        if abs(abs(np.vdot(rebuilt, full)) - dim) > _CLIFFORD_MATRIX_RTOL * dim:
            return False
        self._tableau = tableau
        return True

    def is_gaussian(self) -> bool:
        return self._gaussian

    def is_diagonal(self) -> bool:
        m = self._matrix
        return bool(np.allclose(m, np.diag(np.diag(m))))

    def _param_str(self) -> str:
        if not self.params:
            return ''
        return '(' + ','.join(f'{p:.6g}' for p in self.params) + ')'


# ── Pauli gates ───────────────────────────────────────────────────────────────

class PauliGate(QuantumGate):
    """
    Tensor product of Pauli operators, one per target qubit.

        PauliGate([0, 2], [PAULI_X, PAULI_Z])   →   X on qubit 0, Z on qubit 2
    """

    def __init__(self, target_qubit_list, pauli_id_list) -> None:
        super().__init__('Pauli', target_qubit_list)
        self._pauli_ids = tuple(int(p) for p in pauli_id_list)
        _check_pauli_ids(self._pauli_ids, len(self._targets))

    @property
    def pauli_id_list(self) -> list[int]:
        return list(self._pauli_ids)

    def pauli_string(self) -> stim.PauliString:
        """The Pauli string over the targets (stim qubit i = target i)."""
        ps = stim.PauliString(len(self._targets))
        for i, pid in enumerate(self._pauli_ids):
            ps[i] = pid
        return ps

    def get_matrix(self) -> np.ndarray:
        return np.asarray(self.pauli_string().to_unitary_matrix(endian='little'), dtype=complex)

    def _build_tableau(self) -> stim.Tableau:
        return self.pauli_string().to_tableau()

    def is_clifford(self) -> bool:
        return True

    def is_gaussian(self) -> bool:
        return True

    def is_diagonal(self) -> bool:
        return all(p in (PAULI_I, PAULI_Z) for p in self._pauli_ids)

    def __str__(self) -> str:
        return f'{self.name} {_pauli_label(self._targets, self._pauli_ids)}'


class PauliRotationGate(PauliGate):
    """
    Multi-qubit Pauli rotation exp(-i * angle * P).

    Note the angle is not halved: PauliRotationGate(t, [PAULI_Z], theta) equals
    RZ(2 * theta) from gate_factory. This is the form produced when lowering
    exp(-i * angle * H) term by term.
    """

    def __init__(self, target_qubit_list, pauli_id_list, angle: float) -> None:
        super().__init__(target_qubit_list, pauli_id_list)
        self.name = 'PauliRotation'
        self.angle = float(angle)

    def get_matrix(self) -> np.ndarray:
        pauli = super().get_matrix()
        identity = np.eye(pauli.shape[0], dtype=complex)
        return np.cos(self.angle) * identity - 1j * np.sin(self.angle) * pauli

    def _build_tableau(self) -> stim.Tableau:
        return QuantumGate._build_tableau(self)

    def is_clifford(self) -> bool:
        if all(p == PAULI_I for p in self._pauli_ids):
            return True
        quarter_turns = self.angle / (np.pi / 4)
        return bool(abs(quarter_turns - round(quarter_turns)) < _CLIFFORD_ANGLE_TOL)

    def __str__(self) -> str:
        return f'{self.name}({self.angle:.6g}) {_pauli_label(self._targets, self._pauli_ids)}'
