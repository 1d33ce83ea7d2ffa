"""
Hamiltonians as weighted sums of Pauli strings.

    H = sum_i coef[i] * P_i

Each term is a PauliOperator: the qubits it acts on nontrivially
(index_list), one Pauli id per index (pauli_id_list, 0=I 1=X 2=Y 3=Z) and a
coefficient. Terms keep their insertion order; decomposition passes walk
them in that order.

Two input spellings are accepted:
    - dense labels, one character per qubit, qubit 0 leftmost: 'ZIX'
    - sparse strings, pairs of Pauli and index: 'Z 0 X 2'
"""

from __future__ import annotations

import numpy as np
import stim

from .gates import PauliGate
from .state import QuantumState


_PAULI_IDS: dict[str, int] = {'I': 0, 'X': 1, 'Y': 2, 'Z': 3}


class PauliOperator:
    """
    A single weighted Pauli string.

    Args:
        index_list:    Qubits acted on.
        pauli_id_list: One Pauli id per entry of index_list.
        coef:          Real or complex weight.

    Example:
        >>> op = PauliOperator([0, 2], [3, 1], 0.5)      # 0.5 * Z0 X2
        >>> op = PauliOperator.from_string('Z 0 X 2', 0.5)
    """

    def __init__(self, index_list, pauli_id_list, coef: complex = 1.0) -> None:
        self._indices = tuple(int(i) for i in index_list)
        self._pauli_ids = tuple(int(p) for p in pauli_id_list)
        if len(self._indices) != len(self._pauli_ids):
            raise ValueError(
                f"index_list has {len(self._indices)} entries but "
                f"pauli_id_list has {len(self._pauli_ids)}"
            )
        if len(set(self._indices)) != len(self._indices):
            raise ValueError(f"Duplicate qubit index in {list(self._indices)}")
        for i in self._indices:
            if i < 0:
                raise ValueError(f"Qubit index must be non-negative, got {i}")
        for p in self._pauli_ids:
            if p not in (0, 1, 2, 3):
                raise ValueError(f"Pauli id must be in 0..3, got {p}")
        self.coef = complex(coef)

    @classmethod
    def from_string(cls, text: str, coef: complex = 1.0) -> 'PauliOperator':
        """
        Parse a sparse Pauli string such as 'X 0 Y 3 Z 1'.

        Whitespace is optional between a Pauli and its index ('X0 Z1').
        """
        tokens = text.replace(',', ' ').split()
        indices: list[int] = []
        paulis: list[int] = []
        pending: str | None = None
        for token in tokens:
            if pending is None:
                head = token[0].upper()
                if head not in _PAULI_IDS:
                    raise ValueError(f"Expected a Pauli letter, got '{token}' in '{text}'")
                if len(token) > 1:
                    indices.append(int(token[1:]))
                    paulis.append(_PAULI_IDS[head])
                else:
                    pending = head
            else:
                indices.append(int(token))
                paulis.append(_PAULI_IDS[pending])
                pending = None
        if pending is not None:
            raise ValueError(f"Pauli '{pending}' has no qubit index in '{text}'")
        return cls(indices, paulis, coef)

    @classmethod
    def from_label(cls, label: str, coef: complex = 1.0) -> 'PauliOperator':
        """Dense label, qubit 0 leftmost; identity positions are dropped."""
        indices, paulis = [], []
        for q, char in enumerate(label.upper()):
            if char not in _PAULI_IDS:
                raise ValueError(f"Invalid Pauli character '{char}' in '{label}'")
            if char != 'I':
                indices.append(q)
                paulis.append(_PAULI_IDS[char])
        return cls(indices, paulis, coef)

    @property
    def index_list(self) -> list[int]:
        return list(self._indices)

    @property
    def pauli_id_list(self) -> list[int]:
        return list(self._pauli_ids)

    def to_pauli_string(self, n_qubits: int) -> stim.PauliString:
        """Unweighted stim.PauliString of length n_qubits."""
        if self._indices and max(self._indices) >= n_qubits:
            raise ValueError(
                f"Term acts on qubit {max(self._indices)} but n_qubits={n_qubits}"
            )
        ps = stim.PauliString(n_qubits)
        for q, p in zip(self._indices, self._pauli_ids):
            ps[q] = p
        return ps

    def __str__(self) -> str:
        body = ' '.join(f"{'IXYZ'[p]}{q}" for q, p in zip(self._indices, self._pauli_ids))
        return f"{self.coef:+.3f}*({body or 'I'})"

    def __repr__(self) -> str:
        return f"PauliOperator({self})"


class Hamiltonian:
    """
    A Hermitian operator expressed as a weighted sum of Pauli strings.

        H = sum_i terms[i].coef * P_i

    Args:
        qubit_count: Number of qubits in the system.
        terms:       Optional list of PauliOperator objects or
                     (dense_label, coefficient) pairs.

    Example:
        >>> ham = Hamiltonian(2, [('ZI', 1.0), ('IZ', 1.0), ('XX', 0.5)])
        >>> ham = Hamiltonian.single_z(qubit_count=3, qubit=0)
    """

    def __init__(self, qubit_count: int, terms=None) -> None:
        if qubit_count < 1:
            raise ValueError("qubit_count must be >= 1")
        self.qubit_count = qubit_count
        self._terms: list[PauliOperator] = []
        for term in terms or ():
            if isinstance(term, PauliOperator):
                self.add_operator(term)
            else:
                label, coef = term
                self.add_pauli_string(label, coef)

    # ── Building ──────────────────────────────────────────────────────────────

    def add_operator(self, operator: PauliOperator) -> 'Hamiltonian':
        for q in operator.index_list:
            if q >= self.qubit_count:
                raise ValueError(
                    f"Term {operator} acts on qubit {q} but the Hamiltonian "
                    f"has {self.qubit_count} qubits."
                )
        self._terms.append(operator)
        return self

    def add_pauli_string(self, label: str, coef: complex = 1.0) -> 'Hamiltonian':
        """Add a dense-label term, padded with I to qubit_count."""
        if len(label) > self.qubit_count:
            raise ValueError(
                f"Pauli string '{label}' has length {len(label)} "
                f"but the Hamiltonian has {self.qubit_count} qubits."
            )
        return self.add_operator(PauliOperator.from_label(label, coef))

    # ── Factory methods ───────────────────────────────────────────────────────

    @classmethod
    def single_pauli(
        cls, qubit_count: int, qubit: int, pauli: str, coef: complex = 1.0
    ) -> 'Hamiltonian':
        """
        Hamiltonian consisting of a single Pauli operator on one qubit.

        Example: single_pauli(3, 1, 'Z') → IZI
        """
        if pauli not in ('X', 'Y', 'Z'):
            raise ValueError(f"pauli must be 'X', 'Y', or 'Z', got '{pauli}'")
        return cls(qubit_count, [PauliOperator([qubit], [_PAULI_IDS[pauli]], coef)])

    @classmethod
    def single_z(cls, qubit_count: int, qubit: int) -> 'Hamiltonian':
        return cls.single_pauli(qubit_count, qubit, 'Z')

    @classmethod
    def single_x(cls, qubit_count: int, qubit: int) -> 'Hamiltonian':
        return cls.single_pauli(qubit_count, qubit, 'X')

    @classmethod
    def single_y(cls, qubit_count: int, qubit: int) -> 'Hamiltonian':
        return cls.single_pauli(qubit_count, qubit, 'Y')

    # ── Expectation value evaluation ──────────────────────────────────────────

    def expectation_value(self, state) -> complex:
        """
        <state|H|state>.

        Args:
            state: QuantumState (exact, via Pauli matrices) or
                   stim.TableauSimulator (each <P_i> is +1, -1 or 0).
        """
        if isinstance(state, stim.TableauSimulator):
            total = 0.0 + 0j
            for term in self._terms:
                ps = term.to_pauli_string(self.qubit_count)
                total += term.coef * state.peek_observable_expectation(ps)
            return total
        if isinstance(state, QuantumState):
            if state.n_qubits != self.qubit_count:
                raise ValueError(
                    f"State has {state.n_qubits} qubits but the Hamiltonian "
                    f"has {self.qubit_count}."
                )
            total = 0.0 + 0j
            for term in self._terms:
                if not term.index_list:
                    total += term.coef
                    continue
                image = state.copy()
                PauliGate(term.index_list, term.pauli_id_list).update_quantum_state(image)
                total += term.coef * state.inner_product(image)
            return total
        raise TypeError(
            f"Unsupported state type '{type(state).__name__}'; "
            "expected QuantumState or stim.TableauSimulator"
        )

    def get_matrix(self) -> np.ndarray:
        """Dense (2**n, 2**n) matrix, qubit 0 least significant."""
        dim = 1 << self.qubit_count
        mat = np.zeros((dim, dim), dtype=complex)
        for term in self._terms:
            ps = term.to_pauli_string(self.qubit_count)
            mat += term.coef * np.asarray(ps.to_unitary_matrix(endian='little'))
        return mat

    # ── Inspection ────────────────────────────────────────────────────────────

    @property
    def terms(self) -> list[PauliOperator]:
        return list(self._terms)

    @property
    def n_terms(self) -> int:
        return len(self._terms)

    def one_norm(self) -> float:
        """Sum of |coefficient| values."""
        return sum(abs(t.coef) for t in self._terms)

    def __repr__(self) -> str:
        parts = ' '.join(str(t) for t in self._terms)
        return f"Hamiltonian(qubit_count={self.qubit_count}, {parts})"
