"""
Print the summary of a circuit, optionally after appending a Hamiltonian
evolution.

    python -m qcir --stim-path circuit.stim
    python -m qcir --qubits 3 --term ZZI:1.0 --term XII:0.5 --angle 0.2 --repeats 4
    python -m qcir --qubits 2 --term ZZ:1.0 --angle 0.5 --diagonal
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import stim

from .circuit import Circuit
from .observable import Hamiltonian


def build_demo_circuit(n_qubits: int) -> Circuit:
    """GHZ preparation: H on qubit 0, then a CNOT chain."""
    circuit = Circuit(n_qubits)
    circuit.add_h_gate(0)
    for q in range(n_qubits - 1):
        circuit.add_cnot_gate(q, q + 1)
    return circuit


def parse_term(text: str) -> tuple[str, float]:
    """'ZZI:0.5' → ('ZZI', 0.5); the coefficient defaults to 1."""
    label, _, coef = text.partition(':')
    if not label:
        raise argparse.ArgumentTypeError(f"Empty Pauli label in '{text}'")
    try:
        return label, float(coef) if coef else 1.0
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid coefficient in '{text}'") from None


def load_circuit_from_args(args: argparse.Namespace) -> Circuit:
    if args.stim_path:
        path = Path(args.stim_path)
        if not path.exists():
            raise FileNotFoundError(f"Could not find Stim file: {path}")
        return Circuit.from_stim(stim.Circuit.from_file(str(path)), qubit_count=args.qubits)
    return build_demo_circuit(args.qubits or 2)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="qcir",
        description=(
            "Load a Stim circuit (or build a GHZ demo), optionally append a "
            "Pauli-rotation lowering of exp(-i angle H), and print the circuit summary."
        ),
    )
    parser.add_argument(
        "--stim-path",
        type=str,
        help="Path to a .stim file; only its unitary Clifford instructions are imported.",
    )
    parser.add_argument(
        "--qubits",
        type=int,
        default=None,
        help="Qubit count (demo size, or override for the Stim import; default: 2 / inferred).",
    )
    parser.add_argument(
        "--term",
        action="append",
        type=parse_term,
        default=[],
        metavar="LABEL:COEF",
        help="Hamiltonian term as a dense Pauli label and coefficient, e.g. ZZI:0.5. Repeatable.",
    )
    parser.add_argument(
        "--angle",
        type=float,
        default=1.0,
        help="Evolution angle for the Hamiltonian terms (default: 1.0).",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=0,
        help="Trotter steps; 0 uses ceil(angle * qubits * 100) (default: 0).",
    )
    parser.add_argument(
        "--diagonal",
        action="store_true",
        help="Lower the terms with the diagonal (single pass) policy instead of Trotter.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    circuit = load_circuit_from_args(args)

    if args.term:
        try:
            hamiltonian = Hamiltonian(circuit.qubit_count, args.term)
            if args.diagonal:
                circuit.add_diagonal_hamiltonian_rotation_gate(hamiltonian, args.angle)
            else:
                circuit.add_hamiltonian_rotation_gate(hamiltonian, args.angle, args.repeats)
        except ValueError as exc:
            print(f"qcir: {exc}", file=sys.stderr)
            return 1

    print(circuit.to_string(), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
