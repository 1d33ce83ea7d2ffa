"""
Pytest configuration for qcir tests: shared reference helpers.
"""
from __future__ import annotations

import numpy as np
import pytest

from qcir import QuantumState


def full_operator(n_qubits: int, matrix, targets, controls=()) -> np.ndarray:
    """
    Reference 2**n x 2**n operator built basis state by basis state.

    targets[0] is the least significant bit of `matrix`; the operator acts as
    identity unless every control bit is 1.
    """
    matrix = np.asarray(matrix, dtype=complex)
    dim = 1 << n_qubits
    full = np.zeros((dim, dim), dtype=complex)
    for col in range(dim):
        if any(not (col >> c) & 1 for c in controls):
            full[col, col] = 1.0
            continue
        sub_col = sum(((col >> t) & 1) << i for i, t in enumerate(targets))
        base = col
        for t in targets:
            base &= ~(1 << t)
        for sub_row in range(1 << len(targets)):
            row = base | sum(((sub_row >> i) & 1) << t for i, t in enumerate(targets))
            full[row, col] += matrix[sub_row, sub_col]
    return full


@pytest.fixture
def random_state():
    """Factory: random_state(n_qubits, seed) → normalised random QuantumState."""
    def make(n_qubits: int, seed: int = 0) -> QuantumState:
        state = QuantumState(n_qubits)
        state.set_haar_random_state(seed)
        return state
    return make


@pytest.fixture
def reference_operator():
    """The full_operator() helper, for tests that build exact references."""
    return full_operator
