"""
Dense state-vector representation of an n-qubit register.

Basis index convention: qubit 0 is the least significant bit, so the
amplitude of |q_{n-1} ... q_1 q_0> lives at index sum_k q_k * 2**k.

This is a plain numpy reference kernel: gates call apply_matrix() with their
target/control lists and the state does the tensor contraction.
"""

from __future__ import annotations

import numpy as np


class QuantumState:
    """
    Pure state of `n_qubits` qubits, initialised to |0...0>.

    Example:
        >>> state = QuantumState(2)
        >>> state.set_computational_basis(0b10)     # qubit 1 set
        >>> state.get_vector()
        array([0.+0.j, 0.+0.j, 1.+0.j, 0.+0.j])
    """

    def __init__(self, n_qubits: int) -> None:
        if n_qubits < 1:
            raise ValueError("n_qubits must be >= 1")
        self.n_qubits = n_qubits
        self._vector = np.zeros(1 << n_qubits, dtype=complex)
        self._vector[0] = 1.0

    @property
    def dim(self) -> int:
        return 1 << self.n_qubits

    # ── Initialisation ────────────────────────────────────────────────────────

    def set_zero_state(self) -> None:
        self.set_computational_basis(0)

    def set_computational_basis(self, index: int) -> None:
        if not 0 <= index < self.dim:
            raise ValueError(
                f"Basis index {index} out of range for {self.n_qubits} qubits"
            )
        self._vector[:] = 0.0
        self._vector[index] = 1.0

    def set_haar_random_state(self, seed: int | None = None) -> None:
        """Normalised vector of i.i.d. complex Gaussian amplitudes."""
        rng = np.random.default_rng(seed)
        vec = rng.normal(size=self.dim) + 1j * rng.normal(size=self.dim)
        self._vector = vec / np.linalg.norm(vec)

    def load(self, vector) -> None:
        vec = np.array(vector, dtype=complex).reshape(-1)
        if vec.shape != (self.dim,):
            raise ValueError(
                f"Vector of length {vec.shape[0]} does not fit {self.n_qubits} qubits"
            )
        self._vector = vec

    # ── Inspection ────────────────────────────────────────────────────────────

    def get_vector(self) -> np.ndarray:
        return self._vector.copy()

    def get_squared_norm(self) -> float:
        return float(np.real(np.vdot(self._vector, self._vector)))

    def inner_product(self, other: 'QuantumState') -> complex:
        """<self|other>."""
        if other.n_qubits != self.n_qubits:
            raise ValueError(
                f"Qubit count mismatch: {self.n_qubits} vs {other.n_qubits}"
            )
        return complex(np.vdot(self._vector, other._vector))

    def copy(self) -> 'QuantumState':
        new = QuantumState(self.n_qubits)
        new._vector = self._vector.copy()
        return new

    # ── Gate kernel ───────────────────────────────────────────────────────────

    def apply_matrix(self, matrix, targets, controls=()) -> None:
        """
        Apply `matrix` to `targets`, conditioned on every control being |1>.

        Args:
            matrix:   (2**k, 2**k) matrix; targets[0] is its least significant bit.
            targets:  k distinct target qubits.
            controls: Control qubits, disjoint from targets.
        """
        n = self.n_qubits
        targets = tuple(targets)
        controls = tuple(controls)
        k = len(targets)
        for q in targets + controls:
            if not 0 <= q < n:
                raise ValueError(f"Qubit {q} out of range for {n} qubits")
        mat = np.asarray(matrix, dtype=complex)
        if mat.shape != (1 << k, 1 << k):
            raise ValueError(f"Matrix shape {mat.shape} does not match {k} target(s)")

        # Tensor axis a holds qubit n-1-a (C order puts qubit 0 last).
        psi = self._vector.reshape((2,) * n)
        index = [slice(None)] * n
        for c in controls:
            index[n - 1 - c] = 1
        index = tuple(index)
        sub = psi[index]

        # Axes of `sub` after the control axes are dropped.
        kept = [n - 1 - a for a in range(n) if (n - 1 - a) not in controls]
        # Row bits of the reshaped matrix run from targets[k-1] down to targets[0].
        sub_axes = [kept.index(t) for t in reversed(targets)]

        mat_t = mat.reshape((2,) * (2 * k))
        out = np.tensordot(mat_t, sub, axes=(list(range(k, 2 * k)), sub_axes))
        out = np.moveaxis(out, list(range(k)), sub_axes)

        psi[index] = out
        self._vector = psi.reshape(-1)

    def __repr__(self) -> str:
        return f"QuantumState(n_qubits={self.n_qubits})"
