# Copyright 2025 The cat-resource-estimation Authors
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may not use this file except in compliance
# with the License. You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software distributed under the License
# is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express
# or implied. See the License for the specific language governing permissions and limitations under
# the License.

"""
**Module** ``cat_resource_estimation.interpreter``

Replay quantum programs, operation by operation, onto a backend exposing a fixed gate set.

Programs are OpenQASM 2.0 files parsed with qiskit or JSON-serialized cirq circuits. Gates outside the backend's gate
set are expanded through their qiskit definition or cirq decomposition; unknown single-qubit cirq gates are replayed as
Pauli rotations.
"""

import logging
from abc import ABC, abstractmethod
from os import path
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import cirq
import numpy as np
from qiskit import QuantumCircuit
from qiskit.exceptions import QiskitError

from cat_resource_estimation.estimation_engine import EstimationError

logger = logging.getLogger(__name__)

QASM_EXTENSIONS = (".qasm",)
CIRQ_JSON_EXTENSIONS = (".json",)


class ProgramLoadError(EstimationError):
    """Raised when a program file cannot be read or parsed."""


class UnsupportedOperationError(EstimationError):
    """Raised when an operation can neither be mapped onto the backend nor decomposed."""


class Backend(ABC):
    """Gate set an interpreter drives. Qubits are identified by integer indices handed out by the backend."""

    @abstractmethod
    def qubit_allocate(self) -> int:
        pass

    @abstractmethod
    def qubit_release(self, q: int) -> None:
        pass

    @abstractmethod
    def x(self, q: int) -> None:
        pass

    @abstractmethod
    def y(self, q: int) -> None:
        pass

    @abstractmethod
    def z(self, q: int) -> None:
        pass

    @abstractmethod
    def h(self, q: int) -> None:
        pass

    @abstractmethod
    def s(self, q: int) -> None:
        pass

    @abstractmethod
    def sadj(self, q: int) -> None:
        pass

    @abstractmethod
    def t(self, q: int) -> None:
        pass

    @abstractmethod
    def tadj(self, q: int) -> None:
        pass

    @abstractmethod
    def sx(self, q: int) -> None:
        pass

    @abstractmethod
    def rx(self, theta: float, q: int) -> None:
        pass

    @abstractmethod
    def ry(self, theta: float, q: int) -> None:
        pass

    @abstractmethod
    def rz(self, theta: float, q: int) -> None:
        pass

    @abstractmethod
    def cx(self, ctl: int, q: int) -> None:
        pass

    @abstractmethod
    def cy(self, ctl: int, q: int) -> None:
        pass

    @abstractmethod
    def cz(self, ctl: int, q: int) -> None:
        pass

    @abstractmethod
    def swap(self, q0: int, q1: int) -> None:
        pass

    @abstractmethod
    def ccx(self, ctl0: int, ctl1: int, q: int) -> None:
        pass

    @abstractmethod
    def m(self, q: int) -> bool:
        """Measure `q` in the computational basis."""

    @abstractmethod
    def mresetz(self, q: int) -> bool:
        """Measure `q` in the computational basis and reset it to |0>."""

    @abstractmethod
    def reset(self, q: int) -> None:
        pass

    @abstractmethod
    def capture_quantum_state(self) -> Tuple[List[Any], int]:
        """Return the amplitudes of the state and the number of qubits they span."""

    @abstractmethod
    def qubit_is_zero(self, q: int) -> bool:
        pass


class CircuitInterpreter(ABC):
    """Base class of the interpreters: allocates one backend index per circuit qubit and releases them at the end."""

    def __init__(self, circuit: Any) -> None:
        self.circuit = circuit
        self._backend: Backend
        self._indices: Dict[Any, int] = {}

    def run(self, backend: Backend) -> Backend:
        """Replay every operation of the circuit onto `backend`.

        :returns: the backend, for chaining.
        """
        self._backend = backend
        self._indices = {}
        for qubit in self._circuit_qubits():
            self._index(qubit)
        self._replay()
        for index in self._indices.values():
            backend.qubit_release(index)
        self._indices = {}
        return backend

    def _index(self, qubit: Any) -> int:
        # ancillas introduced by decompositions are allocated on first use
        if qubit not in self._indices:
            self._indices[qubit] = self._backend.qubit_allocate()
        return self._indices[qubit]

    @abstractmethod
    def _circuit_qubits(self) -> List[Any]:
        pass

    @abstractmethod
    def _replay(self) -> None:
        pass


_QISKIT_SINGLE_QUBIT = {
    "x": "x",
    "y": "y",
    "z": "z",
    "h": "h",
    "s": "s",
    "sdg": "sadj",
    "t": "t",
    "tdg": "tadj",
    "sx": "sx",
}
_QISKIT_ROTATIONS = {"rx": "rx", "ry": "ry", "rz": "rz", "p": "rz", "u1": "rz"}
_QISKIT_EULER = ("u", "u2", "u3")
_QISKIT_TWO_QUBIT = {"cx": "cx", "cy": "cy", "cz": "cz", "swap": "swap"}
_QISKIT_SKIPPED = ("barrier", "id", "delay")


class QiskitInterpreter(CircuitInterpreter):
    """Replay a qiskit `QuantumCircuit` onto a backend."""

    def _circuit_qubits(self) -> List[Any]:
        return list(self.circuit.qubits)

    def _replay(self) -> None:
        self._replay_circuit(self.circuit, {qubit: qubit for qubit in self.circuit.qubits})

    def _replay_circuit(self, circuit: QuantumCircuit, wires: Dict[Any, Any]) -> None:
        backend = self._backend
        for instruction in circuit.data:
            operation = instruction.operation
            name = operation.name
            qubits = [self._index(wires.get(qubit, qubit)) for qubit in instruction.qubits]

            if name in _QISKIT_SKIPPED:
                continue
            if name in _QISKIT_SINGLE_QUBIT:
                getattr(backend, _QISKIT_SINGLE_QUBIT[name])(*qubits)
            elif name in _QISKIT_ROTATIONS:
                getattr(backend, _QISKIT_ROTATIONS[name])(_qiskit_angle(operation), *qubits)
            elif name in _QISKIT_EULER:
                # U(θ, φ, λ) = Rz(φ) Ry(θ) Rz(λ) up to a global phase
                theta, phi, lam = _qiskit_euler_angles(operation)
                backend.rz(lam, *qubits)
                backend.ry(theta, *qubits)
                backend.rz(phi, *qubits)
            elif name in _QISKIT_TWO_QUBIT:
                getattr(backend, _QISKIT_TWO_QUBIT[name])(*qubits)
            elif name == "ccx":
                backend.ccx(*qubits)
            elif name == "ccz":
                backend.h(qubits[2])
                backend.ccx(*qubits)
                backend.h(qubits[2])
            elif name == "cswap":
                backend.cx(qubits[2], qubits[1])
                backend.ccx(*qubits)
                backend.cx(qubits[2], qubits[1])
            elif name == "measure":
                backend.m(*qubits)
            elif name == "reset":
                backend.reset(*qubits)
            elif operation.definition is not None:
                definition = operation.definition
                inner_wires = {
                    inner: wires.get(outer, outer) for inner, outer in zip(definition.qubits, instruction.qubits)
                }
                self._replay_circuit(definition, inner_wires)
            else:
                raise UnsupportedOperationError(f"Operation `{name}` has no mapping and no definition.")


def _qiskit_angle(operation: Any, index: int = 0) -> float:
    try:
        return float(operation.params[index])
    except TypeError as err:
        raise UnsupportedOperationError(
            f"Operation `{operation.name}` has an unbound parameter {operation.params[index]}."
        ) from err


def _qiskit_euler_angles(operation: Any) -> Tuple[float, float, float]:
    if operation.name == "u2":
        return np.pi / 2, _qiskit_angle(operation, 0), _qiskit_angle(operation, 1)
    return _qiskit_angle(operation, 0), _qiskit_angle(operation, 1), _qiskit_angle(operation, 2)


_CIRQ_SINGLE_QUBIT = (
    (cirq.X, "x"),
    (cirq.Y, "y"),
    (cirq.Z, "z"),
    (cirq.H, "h"),
    (cirq.S, "s"),
    (cirq.S**-1, "sadj"),
    (cirq.T, "t"),
    (cirq.T**-1, "tadj"),
    (cirq.X**0.5, "sx"),
)
_CIRQ_PAULI_ROTATIONS = ((cirq.XPowGate, "rx"), (cirq.YPowGate, "ry"), (cirq.ZPowGate, "rz"))


class CirqInterpreter(CircuitInterpreter):
    """Replay a cirq `Circuit` onto a backend."""

    def _circuit_qubits(self) -> List[Any]:
        return sorted(self.circuit.all_qubits())

    def _replay(self) -> None:
        for op in self.circuit.all_operations():
            self._apply(op)

    def _apply(self, op: cirq.Operation) -> None:
        backend = self._backend
        op = op.untagged
        if isinstance(op, cirq.ClassicallyControlledOperation):
            op = op.without_classical_controls()
        gate = op.gate
        qubits = [self._index(qubit) for qubit in op.qubits]

        if isinstance(gate, (cirq.IdentityGate, cirq.GlobalPhaseGate, cirq.WaitGate)):
            return
        if isinstance(gate, cirq.MeasurementGate):
            for q in qubits:
                backend.m(q)
            return
        if isinstance(gate, cirq.ResetChannel):
            backend.reset(*qubits)
            return

        if len(qubits) == 1:
            self._apply_single_qubit(op, qubits[0])
        elif gate == cirq.CNOT:
            backend.cx(*qubits)
        elif gate == cirq.ControlledGate(cirq.Y):
            backend.cy(*qubits)
        elif gate == cirq.CZ:
            backend.cz(*qubits)
        elif gate == cirq.SWAP:
            backend.swap(*qubits)
        elif gate == cirq.CCX:
            backend.ccx(*qubits)
        elif gate == cirq.CCZ:
            backend.h(qubits[2])
            backend.ccx(*qubits)
            backend.h(qubits[2])
        elif gate == cirq.CSWAP:
            backend.cx(qubits[2], qubits[1])
            backend.ccx(*qubits)
            backend.cx(qubits[2], qubits[1])
        elif isinstance(gate, cirq.CZPowGate):
            self._controlled_phase(_cirq_angle(op), *qubits)
        elif isinstance(gate, cirq.CXPowGate):
            backend.h(qubits[1])
            self._controlled_phase(_cirq_angle(op), *qubits)
            backend.h(qubits[1])
        else:
            self._decompose(op)

    def _controlled_phase(self, theta: float, ctl: int, q: int) -> None:
        backend = self._backend
        backend.rz(theta / 2, ctl)
        backend.cx(ctl, q)
        backend.rz(-theta / 2, q)
        backend.cx(ctl, q)
        backend.rz(theta / 2, q)

    def _apply_single_qubit(self, op: cirq.Operation, q: int) -> None:
        backend = self._backend
        gate = op.gate
        for known, name in _CIRQ_SINGLE_QUBIT:
            if gate == known:
                getattr(backend, name)(q)
                return
        for gate_type, name in _CIRQ_PAULI_ROTATIONS:
            if isinstance(gate, gate_type):
                getattr(backend, name)(_cirq_angle(op), q)
                return
        if cirq.has_unitary(op):
            for pauli, half_turns in cirq.single_qubit_matrix_to_pauli_rotations(cirq.unitary(op)):
                name = {cirq.X: "rx", cirq.Y: "ry", cirq.Z: "rz"}[pauli]
                getattr(backend, name)(half_turns * np.pi, q)
            return
        self._decompose(op)

    def _decompose(self, op: cirq.Operation) -> None:
        decomposed = cirq.decompose_once(op, default=None)
        if decomposed is None:
            raise UnsupportedOperationError(f"Operation `{op}` has no mapping and no decomposition.")
        for sub_op in decomposed:
            self._apply(sub_op)


def _cirq_angle(op: cirq.Operation) -> float:
    try:
        return float(op.gate.exponent) * np.pi
    except TypeError as err:
        raise UnsupportedOperationError(f"Operation `{op}` has a symbolic angle.") from err


def load_program(filepath: Union[str, Path]) -> Union[QuantumCircuit, cirq.Circuit]:
    """Load a quantum program from an OpenQASM 2.0 (.qasm) or a JSON-serialized cirq circuit (.json) file.

    :param filepath: path to the program file.

    :returns: a qiskit `QuantumCircuit` or a cirq `Circuit`.
    :raises ProgramLoadError: if the file cannot be read or parsed, or has an unknown extension.
    """
    extension = path.splitext(str(filepath))[1].lower()
    if extension in QASM_EXTENSIONS:
        try:
            with open(filepath, "r", encoding="utf8") as qasm_file:
                return QuantumCircuit.from_qasm_str(qasm_file.read())
        except OSError as err:
            raise ProgramLoadError(f"Cannot read program file {filepath}: {err}") from err
        except QiskitError as err:
            raise ProgramLoadError(f"Cannot parse OpenQASM program {filepath}: {err}") from err

    if extension in CIRQ_JSON_EXTENSIONS:
        try:
            circuit = cirq.read_json(filepath)
        except OSError as err:
            raise ProgramLoadError(f"Cannot read program file {filepath}: {err}") from err
        except ValueError as err:
            raise ProgramLoadError(f"Cannot parse cirq JSON program {filepath}: {err}") from err
        if not isinstance(circuit, cirq.AbstractCircuit):
            raise ProgramLoadError(f"Program file {filepath} holds a {type(circuit).__name__}, not a cirq circuit.")
        return circuit

    raise ProgramLoadError(
        f"Unknown extension for program file {filepath}; expected one of {QASM_EXTENSIONS + CIRQ_JSON_EXTENSIONS}."
    )


def interpreter_for(circuit: Union[QuantumCircuit, cirq.AbstractCircuit]) -> CircuitInterpreter:
    """Return the interpreter matching the circuit library of `circuit`."""
    if isinstance(circuit, QuantumCircuit):
        return QiskitInterpreter(circuit)
    if isinstance(circuit, cirq.AbstractCircuit):
        return CirqInterpreter(circuit)
    raise TypeError(f"Cannot interpret circuits of type {type(circuit).__name__}.")
