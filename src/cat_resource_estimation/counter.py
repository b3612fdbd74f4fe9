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
**Module** ``cat_resource_estimation.counter``

Counts of logical qubits, CX and CCX gates, and the logical overhead they imply.

The counts are either given directly, obtained by replaying a program through a `LogicalCounts` backend, or taken from
the closed-form tally of the elliptic curve discrete logarithm of arXiv:2302.06639.
"""

import math
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Tuple, Union

from cat_resource_estimation.estimation_engine import ErrorBudget, Overhead
from cat_resource_estimation.interpreter import Backend, interpreter_for, load_program

logger = logging.getLogger(__name__)

# Cycles per gate in tenths of a logical cycle. A CX takes 2.2 cycles, measurement counting as 0.2 (p. 30, Fig. 27).
# A CCX takes 10.1 cycles: 3 CX, 1.5 CX conditioned on a measurement outcome, and a measurement (p. 36, Fig. 33).
CX_TENTHS_OF_CYCLE = 22
CCX_TENTHS_OF_CYCLE = 101


@dataclass(frozen=True)
class LogicalOverhead(Overhead):
    """Read-only logical footprint of an algorithm, as frozen from a `LogicalCounts`."""

    qubit_count: int
    cx_count: int
    ccx_count: int

    def logical_qubits(self) -> int:
        """Return the logical qubits after layout.

        Horizontal routing qubits are included, the top one between the compute and factory parts too. Vertical
        routing qubits and the qubits of the factories are not.
        """
        horizontal_routing_qubits = math.ceil(self.qubit_count / 2) + 1
        return self.qubit_count + horizontal_routing_qubits

    def logical_depth(self, budget: ErrorBudget) -> int:
        tenths = CX_TENTHS_OF_CYCLE * self.cx_count + CCX_TENTHS_OF_CYCLE * self.ccx_count
        return -(-tenths // 10)

    def num_magic_states(self, budget: ErrorBudget, index: int) -> int:
        return self.ccx_count


class LogicalCounts(Backend):
    """Accumulates logical qubit and gate counts while a program is replayed on it.

    Released qubit indices are reused last-in first-out, so `qubit_count` is the peak number of live qubits.
    """

    def __init__(self, qubit_count: int = 0, cx_count: int = 0, ccx_count: int = 0) -> None:
        self.qubit_count = qubit_count
        self.cx_count = cx_count
        self.ccx_count = ccx_count
        self.free_list: List[int] = []

    @classmethod
    def from_circuit(cls, circuit: Any) -> "LogicalCounts":
        """Count the logical resources of an in-memory qiskit or cirq circuit."""
        counter = cls()
        interpreter_for(circuit).run(counter)
        logger.info(
            f"Counted {counter.qubit_count} logical qubits, {counter.cx_count} CX and {counter.ccx_count} CCX gates."
        )
        return counter

    @classmethod
    def from_program(cls, filepath: Union[str, Path]) -> "LogicalCounts":
        """Count the logical resources of an OpenQASM 2.0 (.qasm) or cirq JSON (.json) program file.

        :raises ProgramLoadError: if the file cannot be read or parsed.
        :raises UnsupportedOperationError: if an operation cannot be replayed.
        """
        return cls.from_circuit(load_program(filepath))

    def freeze(self) -> LogicalOverhead:
        """Return a read-only snapshot of the counts."""
        return LogicalOverhead(qubit_count=self.qubit_count, cx_count=self.cx_count, ccx_count=self.ccx_count)

    def qubit_allocate(self) -> int:
        if self.free_list:
            return self.free_list.pop()
        qubit = self.qubit_count
        self.qubit_count += 1
        return qubit

    def qubit_release(self, q: int) -> None:
        self.free_list.append(q)

    def x(self, q: int) -> None:
        pass

    def y(self, q: int) -> None:
        pass

    def z(self, q: int) -> None:
        pass

    def h(self, q: int) -> None:
        pass

    def s(self, q: int) -> None:
        pass

    def sadj(self, q: int) -> None:
        pass

    def t(self, q: int) -> None:
        pass

    def tadj(self, q: int) -> None:
        pass

    def sx(self, q: int) -> None:
        pass

    def rx(self, theta: float, q: int) -> None:
        pass

    def ry(self, theta: float, q: int) -> None:
        pass

    def rz(self, theta: float, q: int) -> None:
        pass

    def cx(self, ctl: int, q: int) -> None:
        self.cx_count += 1

    def cy(self, ctl: int, q: int) -> None:
        self.cx_count += 1

    def cz(self, ctl: int, q: int) -> None:
        self.cx_count += 1

    def swap(self, q0: int, q1: int) -> None:
        self.cx_count += 3

    def ccx(self, ctl0: int, ctl1: int, q: int) -> None:
        self.ccx_count += 1

    def m(self, q: int) -> bool:
        return False

    def mresetz(self, q: int) -> bool:
        return False

    def reset(self, q: int) -> None:
        pass

    def capture_quantum_state(self) -> Tuple[List[Any], int]:
        return [], 0

    def qubit_is_zero(self, q: int) -> bool:
        return True


def elliptic_curve_counts(bit_size: int = 256, window_size: int = 18) -> LogicalCounts:
    """Logical counts of the elliptic curve discrete logarithm on a `bit_size`-bit curve.

    :param bit_size: key size n. Other values are reported in arXiv:2302.06639 (Table IV, p. 37).
    :param window_size: windowing size w_e of the modular exponentiation (arXiv:2001.09580, sec. 4.1).

    :returns: the counts, with 9n + w_e + 4 qubits (p. 22, app. C.11) and the asymptotic gate counts of p. 21,
        app. C.10.
    """
    if bit_size <= 0 or window_size <= 0:
        raise ValueError(f"Key and window sizes must be positive, got n={bit_size} and w_e={window_size}.")
    qubit_count = 9 * bit_size + window_size + 4
    cx_count = -(-448 * bit_size**3 // window_size)
    ccx_count = -(-348 * bit_size**3 // window_size)
    return LogicalCounts(qubit_count, cx_count, ccx_count)
