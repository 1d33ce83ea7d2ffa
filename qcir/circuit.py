"""
Circuit: an ordered, mutable list of gates over a fixed number of qubits.

- Mutation:       add_gate / add_gate_copy (append or insert), remove_gate.
                  The circuit owns its gates; add_gate_copy stores a copy.
- Execution:      update_quantum_state(state[, start, end]) applies the gates
                  in order to a QuantumState or a stim.TableauSimulator.
- Analysis:       calculate_depth(), is_clifford(), is_gaussian(), to_string().
- Lowering:       add_diagonal_hamiltonian_rotation_gate(),
                  add_hamiltonian_rotation_gate()  (see decompositions.py).

Use Circuit.from_stim() to import the unitary Clifford part of a stim.Circuit.
"""

from __future__ import annotations

import warnings

import stim

from . import gate_factory as gf
from .decompositions import (
    _IMAG_TOL,
    MalformedPauliTermError,
    diagonal_rotation_gates,
    trotter_rotation_gates,
)
from .gates import QuantumGate
from .observable import Hamiltonian, PauliOperator


# ── Stim gate name → gate factory constructor ─────────────────────────────────
_STIM_1Q: dict[str, object] = {
    'I': gf.Identity,
    'X': gf.X, 'Y': gf.Y, 'Z': gf.Z,
    'H': gf.H,
    'S': gf.S, 'SQRT_Z': gf.S,
    'S_DAG': gf.Sdag, 'SQRT_Z_DAG': gf.Sdag,
    'SQRT_X': gf.sqrtX, 'SQRT_X_DAG': gf.sqrtXdag,
    'SQRT_Y': gf.sqrtY, 'SQRT_Y_DAG': gf.sqrtYdag,
}

_STIM_2Q: dict[str, object] = {
    'CX': gf.CNOT, 'CNOT': gf.CNOT, 'ZCX': gf.CNOT,
    'CZ': gf.CZ, 'ZCZ': gf.CZ,
    'SWAP': gf.SWAP,
}

# Instructions to silently skip during from_stim parsing
_STIM_SKIP: frozenset[str] = frozenset({
    'TICK', 'QUBIT_COORDS', 'DETECTOR', 'OBSERVABLE_INCLUDE', 'SHIFT_COORDS',
})


class Circuit:
    """
    A quantum circuit: gates in execution order over `qubit_count` qubits.

    Build manually:
        >>> c = Circuit(2)
        >>> c.add_h_gate(0).add_cnot_gate(0, 1).add_rz_gate(1, np.pi / 4)
        >>> c.add_gate(gate_factory.T(0), 0)     # insert at position 0

    Run:
        >>> state = QuantumState(2)
        >>> c.update_quantum_state(state)

    Analyse:
        >>> c.calculate_depth(), c.is_clifford()
        >>> print(c)
    """

    def __init__(self, qubit_count: int) -> None:
        if qubit_count < 1:
            raise ValueError("qubit_count must be >= 1")
        self._qubit_count = qubit_count
        self._gates: list[QuantumGate] = []

    @property
    def qubit_count(self) -> int:
        return self._qubit_count

    # ── Mutation ──────────────────────────────────────────────────────────────

    def _check_gate(self, gate: QuantumGate) -> None:
        for q in gate.qubits:
            if q >= self._qubit_count:
                raise ValueError(
                    f"Gate '{gate}' acts on qubit {q} but the circuit has "
                    f"{self._qubit_count} qubits."
                )

    def add_gate(self, gate: QuantumGate, index: int | None = None) -> 'Circuit':
        """
        Append `gate`, or insert it before position `index` (0 <= index <= len).

        The circuit takes ownership: do not keep mutating or re-adding `gate`
        afterwards. Use add_gate_copy() to keep the original.
        """
        self._check_gate(gate)
        if index is None:
            self._gates.append(gate)
            return self
        if not 0 <= index <= len(self._gates):
            raise IndexError(
                f"Insert position {index} out of range for {len(self._gates)} gates"
            )
        self._gates.insert(index, gate)
        return self

    def add_gate_copy(self, gate: QuantumGate, index: int | None = None) -> 'Circuit':
        """Like add_gate(), but the circuit stores gate.copy()."""
        return self.add_gate(gate.copy(), index)

    def remove_gate(self, index: int) -> None:
        if not 0 <= index < len(self._gates):
            raise IndexError(
                f"Gate position {index} out of range for {len(self._gates)} gates"
            )
        del self._gates[index]

    def copy(self) -> 'Circuit':
        """Independent circuit with a copy of every gate."""
        new = Circuit(self._qubit_count)
        new._gates = [gate.copy() for gate in self._gates]
        return new

    # ── Execution ─────────────────────────────────────────────────────────────

    def update_quantum_state(self, state, start: int = 0, end: int | None = None) -> None:
        """
        Apply gates[start:end] to `state`, left to right.

        Args:
            state: QuantumState, or stim.TableauSimulator for Clifford gates.
            start: First gate position (inclusive).
            end:   Last gate position (exclusive); None means len(self).

        Raises:
            IndexError: unless 0 <= start <= end <= len(self).
        """
        if end is None:
            end = len(self._gates)
        if not 0 <= start <= end <= len(self._gates):
            raise IndexError(
                f"Gate range [{start}, {end}) invalid for {len(self._gates)} gates"
            )
        for gate in self._gates[start:end]:
            gate.update_quantum_state(state)

    # ── Analysis ──────────────────────────────────────────────────────────────

    def calculate_depth(self) -> int:
        """
        Number of layers when gates on disjoint qubits run in parallel.

        filled_step[q] is the layer just after the last gate on qubit q; a gate
        starts at the max over its qubits and pushes all of them one past that.
        """
        filled_step = [0] * self._qubit_count
        depth = 0
        for gate in self._gates:
            qubits = gate.qubits
            step = max(filled_step[q] for q in qubits) + 1
            for q in qubits:
                filled_step[q] = step
            depth = max(depth, step)
        return depth

    def is_clifford(self) -> bool:
        """True iff every gate is Clifford (True for an empty circuit)."""
        return all(gate.is_clifford() for gate in self._gates)

    def is_gaussian(self) -> bool:
        """True iff every gate is Gaussian (True for an empty circuit)."""
        return all(gate.is_gaussian() for gate in self._gates)

    # ── Inspection ────────────────────────────────────────────────────────────

    @property
    def gates(self) -> list[QuantumGate]:
        return list(self._gates)

    @property
    def gate_count(self) -> int:
        return len(self._gates)

    def get_gate(self, index: int) -> QuantumGate:
        if not 0 <= index < len(self._gates):
            raise IndexError(
                f"Gate position {index} out of range for {len(self._gates)} gates"
            )
        return self._gates[index]

    def __len__(self) -> int:
        return len(self._gates)

    def __iter__(self):
        return iter(self._gates)

    def to_string(self) -> str:
        arity_count: dict[int, int] = {}
        for gate in self._gates:
            arity = len(gate.qubits)
            arity_count[arity] = arity_count.get(arity, 0) + 1
        max_arity = max(arity_count, default=0)

        lines = [
            '*** Quantum Circuit Info ***',
            f'# of qubit: {self._qubit_count}',
            f'# of step : {self.calculate_depth()}',
            f'# of gate : {len(self._gates)}',
        ]
        for arity in range(1, max_arity + 1):
            lines.append(f'# of {arity} qubit gate: {arity_count.get(arity, 0)}')
        lines.append(f"Clifford  : {'yes' if self.is_clifford() else 'no'}")
        lines.append(f"Gaussian  : {'yes' if self.is_gaussian() else 'no'}")
        return '\n'.join(lines) + '\n\n'

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'Circuit(qubit_count={self._qubit_count}, gates={len(self._gates)})'

    # ── Named gate builders ───────────────────────────────────────────────────

    def add_x_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.X(target))

    def add_y_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.Y(target))

    def add_z_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.Z(target))

    def add_h_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.H(target))

    def add_s_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.S(target))

    def add_sdag_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.Sdag(target))

    def add_t_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.T(target))

    def add_tdag_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.Tdag(target))

    def add_sqrtx_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.sqrtX(target))

    def add_sqrtxdag_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.sqrtXdag(target))

    def add_sqrty_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.sqrtY(target))

    def add_sqrtydag_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.sqrtYdag(target))

    def add_p0_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.P0(target))

    def add_p1_gate(self, target: int) -> 'Circuit':
        return self.add_gate(gf.P1(target))

    def add_cnot_gate(self, control: int, target: int) -> 'Circuit':
        return self.add_gate(gf.CNOT(control, target))

    def add_cz_gate(self, control: int, target: int) -> 'Circuit':
        return self.add_gate(gf.CZ(control, target))

    def add_swap_gate(self, target1: int, target2: int) -> 'Circuit':
        return self.add_gate(gf.SWAP(target1, target2))

    def add_rx_gate(self, target: int, theta: float) -> 'Circuit':
        return self.add_gate(gf.RX(target, theta))

    def add_ry_gate(self, target: int, theta: float) -> 'Circuit':
        return self.add_gate(gf.RY(target, theta))

    def add_rz_gate(self, target: int, theta: float) -> 'Circuit':
        return self.add_gate(gf.RZ(target, theta))

    def add_u1_gate(self, target: int, lam: float) -> 'Circuit':
        return self.add_gate(gf.U1(target, lam))

    def add_u2_gate(self, target: int, phi: float, lam: float) -> 'Circuit':
        return self.add_gate(gf.U2(target, phi, lam))

    def add_u3_gate(self, target: int, theta: float, phi: float, lam: float) -> 'Circuit':
        return self.add_gate(gf.U3(target, theta, phi, lam))

    def add_multi_pauli_gate(self, target_or_operator, pauli_id_list=None) -> 'Circuit':
        """add_multi_pauli_gate(targets, ids) or add_multi_pauli_gate(PauliOperator)."""
        if isinstance(target_or_operator, PauliOperator):
            op = target_or_operator
            return self.add_gate(gf.Pauli(op.index_list, op.pauli_id_list))
        return self.add_gate(gf.Pauli(target_or_operator, pauli_id_list))

    def add_multi_pauli_rotation_gate(
        self, target_or_operator, pauli_id_list=None, angle: float | None = None
    ) -> 'Circuit':
        """
        add_multi_pauli_rotation_gate(targets, ids, angle), or
        add_multi_pauli_rotation_gate(PauliOperator) with angle = coef.real.

        Raises:
            MalformedPauliTermError: the operator's coefficient is not real.
        """
        if isinstance(target_or_operator, PauliOperator):
            op = target_or_operator
            if abs(op.coef.imag) > _IMAG_TOL:
                raise MalformedPauliTermError(
                    f"Term {op!r} has coefficient {op.coef}; rotation angles must be real"
                )
            return self.add_gate(
                gf.PauliRotation(op.index_list, op.pauli_id_list, op.coef.real)
            )
        if angle is None:
            raise ValueError("angle is required when targets and Pauli ids are given")
        return self.add_gate(gf.PauliRotation(target_or_operator, pauli_id_list, angle))

    def add_dense_matrix_gate(self, target_qubit_list, matrix) -> 'Circuit':
        return self.add_gate(gf.DenseMatrix(target_qubit_list, matrix))

    # ── Hamiltonian lowering ──────────────────────────────────────────────────

    def add_diagonal_hamiltonian_rotation_gate(
        self, hamiltonian: Hamiltonian, angle: float
    ) -> 'Circuit':
        """
        Append exp(-i angle H) for a diagonal H, one rotation per term.

        Raises NonDiagonalHamiltonianError (and appends nothing) if any term
        yields a non-diagonal rotation.
        """
        for gate in diagonal_rotation_gates(hamiltonian, angle, self._qubit_count):
            self.add_gate(gate)
        return self

    def add_hamiltonian_rotation_gate(
        self, hamiltonian: Hamiltonian, angle: float, num_repeats: int = 0
    ) -> 'Circuit':
        """
        Append a first-order Trotter approximation of exp(-i angle H).

        num_repeats=0 uses ceil(angle * hamiltonian.qubit_count * 100) steps.
        """
        gates = trotter_rotation_gates(
            hamiltonian, angle, num_repeats, qubit_count=self._qubit_count
        )
        for gate in gates:
            self.add_gate(gate)
        return self

    # ── Import from Stim ──────────────────────────────────────────────────────

    @classmethod
    def from_stim(cls, stim_circuit: stim.Circuit, qubit_count: int | None = None) -> 'Circuit':
        """
        Build a Circuit from the unitary Clifford part of a stim.Circuit.

        Multi-target Stim instructions become one gate per target (or pair):
            H 0 1      → H(0), H(1)
            CX 0 1 2 3 → CNOT(0, 1), CNOT(2, 3)

        REPEAT blocks are unrolled. Annotations (TICK, DETECTOR, ...) are
        skipped silently. Noise, measurement, reset, classically controlled
        gates and other unsupported instructions are skipped with one warning
        per kind.

        Args:
            stim_circuit: Source Stim circuit.
            qubit_count:  Override qubit count (default: stim_circuit.num_qubits).
        """
        if qubit_count is None:
            qubit_count = stim_circuit.num_qubits or 1
        circuit = cls(qubit_count)
        skipped: list[str] = []
        circuit._extend_from_stim(stim_circuit, skipped)
        for reason in dict.fromkeys(skipped):
            warnings.warn(f"Circuit.from_stim: {reason} skipped.", stacklevel=2)
        return circuit

    def _extend_from_stim(self, sc: stim.Circuit, skipped: list[str]) -> None:
        for instr in sc:
            if isinstance(instr, stim.CircuitRepeatBlock):
                for _ in range(instr.repeat_count):
                    self._extend_from_stim(instr.body_copy(), skipped)
                continue

            name: str = instr.name
            raw_targets = instr.targets_copy()

            if name in _STIM_1Q:
                make = _STIM_1Q[name]
                for t in raw_targets:
                    self.add_gate(make(t.value))
            elif name in _STIM_2Q:
                # Classically controlled forms (CX rec[-1] 1, CZ sweep[0] 2)
                # have no unitary counterpart here.
                if not all(t.is_qubit_target for t in raw_targets):
                    skipped.append(f"classically controlled '{name}'")
                    continue
                make = _STIM_2Q[name]
                for i in range(0, len(raw_targets), 2):
                    self.add_gate(make(raw_targets[i].value, raw_targets[i + 1].value))
            elif name in _STIM_SKIP:
                pass
            else:
                skipped.append(f"unsupported instruction '{name}'")
