"""
Lowering of Hamiltonian evolution into Pauli-rotation gates.

Both passes turn H = sum_i c_i P_i into PauliRotationGate objects,
R_i(t) = exp(-i t P_i), which the caller appends to a Circuit.

── Diagonal policy ──────────────────────────────────────────────────────────

    exp(-i angle H) = prod_i R_i(angle * c_i)

    Exact when every P_i is a string of I and Z (diagonal terms commute).
    Each constructed rotation is checked with is_diagonal(); any other term
    raises NonDiagonalHamiltonianError.

── First-order product formula (Trotter) ────────────────────────────────────

    exp(-i angle H) ≈ [ prod_i R_i(angle * c_i / r) ]^r

    Gates come out repeat by repeat, all terms in order within a repeat:
        R_0, R_1, ..., R_{k-1}, R_0, R_1, ..., R_{k-1}, ...   (r * k gates)

    When r is not given:
        r = ceil(angle * qubit_count * DEFAULT_REPEAT_SCALE)
    This is a fixed resolution rule with no error bound; pass num_repeats
    explicitly when accuracy matters.

── Term validation ──────────────────────────────────────────────────────────

    Terms are read through index_list / pauli_id_list / coef only, so any
    object with those attributes works. Each term is checked before its
    gates are built; a bad term raises MalformedPauliTermError and nothing
    is returned. Terms with an empty index_list are a global phase and are
    skipped.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .gates import PauliRotationGate

if TYPE_CHECKING:
    from .observable import Hamiltonian


DEFAULT_REPEAT_SCALE = 100.0

# Rotation angles must be real; larger imaginary parts are rejected.
_IMAG_TOL = 1e-12


class NonDiagonalHamiltonianError(ValueError):
    """A term lowered under the diagonal policy produced a non-diagonal gate."""


class MalformedPauliTermError(ValueError):
    """A Hamiltonian term cannot be turned into a rotation gate."""


def _read_term(term, qubit_count: int) -> tuple[list[int], list[int], float]:
    """Validate one term and return (indices, pauli_ids, real coefficient)."""
    indices = list(term.index_list)
    pauli_ids = list(term.pauli_id_list)
    coef = complex(term.coef)
    if len(indices) != len(pauli_ids):
        raise MalformedPauliTermError(
            f"Term {term!r} has {len(indices)} indices but {len(pauli_ids)} Pauli ids"
        )
    for q in indices:
        if not 0 <= q < qubit_count:
            raise MalformedPauliTermError(
                f"Term {term!r} acts on qubit {q}, outside [0, {qubit_count})"
            )
    if len(set(indices)) != len(indices):
        raise MalformedPauliTermError(f"Term {term!r} repeats a qubit index")
    for p in pauli_ids:
        if p not in (0, 1, 2, 3):
            raise MalformedPauliTermError(f"Term {term!r} has Pauli id {p}, expected 0..3")
    if abs(coef.imag) > _IMAG_TOL:
        raise MalformedPauliTermError(
            f"Term {term!r} has coefficient {coef}; rotation angles must be real"
        )
    return indices, pauli_ids, coef.real


def _read_terms(hamiltonian: 'Hamiltonian', qubit_count: int):
    terms = []
    for term in hamiltonian.terms:
        indices, pauli_ids, coef = _read_term(term, qubit_count)
        if indices:
            terms.append((indices, pauli_ids, coef))
    return terms


def default_num_repeats(angle: float, qubit_count: int) -> int:
    """ceil(angle * qubit_count * 100): the repeat count used when none is given."""
    return int(math.ceil(angle * qubit_count * DEFAULT_REPEAT_SCALE))


def diagonal_rotation_gates(
    hamiltonian: 'Hamiltonian', angle: float, qubit_count: int
) -> list[PauliRotationGate]:
    """
    One rotation per term: R_i(c_i * angle), in term order.

    Args:
        hamiltonian: Diagonal Hamiltonian (only I/Z Paulis).
        angle:       Evolution angle.
        qubit_count: Qubit count of the receiving circuit.

    Raises:
        MalformedPauliTermError:     a term fails validation.
        NonDiagonalHamiltonianError: a constructed rotation is not diagonal.
    """
    gates: list[PauliRotationGate] = []
    for indices, pauli_ids, coef in _read_terms(hamiltonian, qubit_count):
        gate = PauliRotationGate(indices, pauli_ids, coef * angle)
        if not gate.is_diagonal():
            raise NonDiagonalHamiltonianError(
                f"Hamiltonian is not diagonal: term produced '{gate}'"
            )
        gates.append(gate)
    return gates


def trotter_rotation_gates(
    hamiltonian: 'Hamiltonian',
    angle: float,
    num_repeats: int = 0,
    qubit_count: int | None = None,
) -> list[PauliRotationGate]:
    """
    First-order product formula for exp(-i angle H).

    Args:
        hamiltonian: Hamiltonian with arbitrary (non-commuting) terms.
        angle:       Total evolution angle.
        num_repeats: Number of Trotter steps r; 0 selects default_num_repeats()
                     from the Hamiltonian's qubit count.
        qubit_count: Qubit count of the receiving circuit (default: the
                     Hamiltonian's).

    Returns:
        r * k rotations, repeat-major: every term of repeat 0, then repeat 1, ...
        Each has angle angle * c_i / r.
    """
    if qubit_count is None:
        qubit_count = hamiltonian.qubit_count
    if num_repeats < 0:
        raise ValueError(f"num_repeats must be >= 0, got {num_repeats}")
    terms = _read_terms(hamiltonian, qubit_count)

    if num_repeats == 0:
        num_repeats = default_num_repeats(angle, hamiltonian.qubit_count)
        if num_repeats < 1:
            if angle == 0:
                return []
            raise ValueError(
                f"Default repeat count is {num_repeats} for angle={angle}; "
                "pass num_repeats explicitly"
            )

    gates: list[PauliRotationGate] = []
    for _ in range(num_repeats):
        for indices, pauli_ids, coef in terms:
            gates.append(PauliRotationGate(indices, pauli_ids, coef * angle / num_repeats))
    return gates
