"""
qcir: a quantum circuit intermediate representation with analysis and
Hamiltonian lowering passes.

    - Circuit holds an ordered list of gates over a fixed qubit count and
      runs them on a QuantumState (dense vector) or a stim.TableauSimulator.
    - calculate_depth() gives the critical-path length; is_clifford() and
      is_gaussian() classify the whole circuit.
    - add_diagonal_hamiltonian_rotation_gate() and
      add_hamiltonian_rotation_gate() lower exp(-i angle H) into
      Pauli-rotation gates (single pass / first-order Trotter).

Build from scratch:
    >>> import numpy as np
    >>> from qcir import Circuit, QuantumState
    >>> c = Circuit(2).add_h_gate(0).add_cnot_gate(0, 1).add_t_gate(1)
    >>> state = QuantumState(2)
    >>> c.update_quantum_state(state)
    >>> c.calculate_depth(), c.is_clifford()
    (3, False)

Trotterize a Hamiltonian:
    >>> from qcir import Hamiltonian
    >>> ham = Hamiltonian(2, [('ZZ', 1.0), ('XI', 0.5), ('IX', 0.5)])
    >>> c = Circuit(2).add_hamiltonian_rotation_gate(ham, angle=0.1, num_repeats=4)
    >>> len(c)
    12

Import from Stim:
    >>> import stim
    >>> c = Circuit.from_stim(stim.Circuit("H 0\\nCX 0 1"))
"""

from .circuit import Circuit
from .gates import (
    QuantumGate,
    DenseMatrixGate,
    PauliGate,
    PauliRotationGate,
    PAULI_I,
    PAULI_X,
    PAULI_Y,
    PAULI_Z,
)
from . import gate_factory
from .state import QuantumState
from .observable import PauliOperator, Hamiltonian
from .decompositions import (
    diagonal_rotation_gates,
    trotter_rotation_gates,
    default_num_repeats,
    NonDiagonalHamiltonianError,
    MalformedPauliTermError,
)

__all__ = [
    # Circuit
    "Circuit",
    # Gates
    "QuantumGate",
    "DenseMatrixGate",
    "PauliGate",
    "PauliRotationGate",
    "PAULI_I",
    "PAULI_X",
    "PAULI_Y",
    "PAULI_Z",
    "gate_factory",
    # State
    "QuantumState",
    # Observable
    "PauliOperator",
    "Hamiltonian",
    # Lowering
    "diagonal_rotation_gates",
    "trotter_rotation_gates",
    "default_num_repeats",
    "NonDiagonalHamiltonianError",
    "MalformedPauliTermError",
]
