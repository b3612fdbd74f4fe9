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

"""Unit tests for the `counter` module of cat-resource-estimation."""

from os import path

import pytest

from cat_resource_estimation.counter import LogicalCounts, LogicalOverhead, elliptic_curve_counts
from cat_resource_estimation.estimation_engine import ErrorBudget

ADDER_QASM = path.join(path.dirname(path.realpath(__file__)), "input", "adder.qasm")


@pytest.fixture
def budget():
    return ErrorBudget.from_total(0.333)


class TestLogicalCounts:
    """Test the counting backend."""

    def test_allocation_is_lifo(self):
        counter = LogicalCounts()
        q0, q1, q2 = counter.qubit_allocate(), counter.qubit_allocate(), counter.qubit_allocate()
        assert (q0, q1, q2) == (0, 1, 2)
        counter.qubit_release(q0)
        counter.qubit_release(q2)
        assert counter.qubit_allocate() == q2
        assert counter.qubit_allocate() == q0
        assert counter.qubit_allocate() == 3
        assert counter.qubit_count == 4

    def test_qubit_count_never_decreases(self):
        counter = LogicalCounts()
        qubits = [counter.qubit_allocate() for _ in range(5)]
        for qubit in qubits:
            counter.qubit_release(qubit)
        assert counter.qubit_count == 5
        counter.qubit_allocate()
        assert counter.qubit_count == 5

    def test_two_qubit_gates(self):
        counter = LogicalCounts()
        counter.cx(0, 1)
        counter.cy(0, 1)
        counter.cz(0, 1)
        assert counter.cx_count == 3
        counter.swap(0, 1)
        assert counter.cx_count == 6
        counter.ccx(0, 1, 2)
        assert counter.ccx_count == 1

    def test_free_operations(self):
        counter = LogicalCounts()
        for gate in (counter.x, counter.y, counter.z, counter.h, counter.s, counter.sadj, counter.t, counter.tadj):
            gate(0)
        counter.sx(0)
        counter.rx(0.1, 0)
        counter.ry(0.2, 0)
        counter.rz(0.3, 0)
        counter.reset(0)
        assert counter.m(0) is False
        assert counter.mresetz(0) is False
        assert (counter.qubit_count, counter.cx_count, counter.ccx_count) == (0, 0, 0)

    def test_simulator_queries(self):
        counter = LogicalCounts()
        assert counter.capture_quantum_state() == ([], 0)
        assert counter.qubit_is_zero(0) is True

    def test_freeze(self):
        counter = LogicalCounts(5, 10, 2)
        overhead = counter.freeze()
        assert overhead == LogicalOverhead(5, 10, 2)
        counter.cx(0, 1)
        assert overhead.cx_count == 10


class TestLogicalOverhead:
    """Test the logical overhead of the counts."""

    def test_small_example(self, budget):  # pylint: disable=W0621
        overhead = LogicalCounts(5, 10, 2).freeze()
        assert overhead.logical_qubits() == 9
        assert overhead.logical_depth(budget) == 43
        assert overhead.num_magic_states(budget, 0) == 2

    @pytest.mark.parametrize(
        "cx, ccx, depth",
        [(0, 0, 0), (1, 0, 3), (5, 0, 11), (0, 1, 11), (0, 10, 101), (10, 10, 123)],
    )
    def test_depth_is_exact_ceiling(self, budget, cx, ccx, depth):  # pylint: disable=W0621
        """2.2 cx + 10.1 ccx is rounded up without floating point error."""
        assert LogicalOverhead(1, cx, ccx).logical_depth(budget) == depth

    @pytest.mark.parametrize("qubits, logical", [(0, 1), (1, 3), (2, 4), (7, 12)])
    def test_horizontal_routing(self, qubits, logical):
        assert LogicalOverhead(qubits, 0, 0).logical_qubits() == logical


class TestEllipticCurveCounts:
    """Test the elliptic curve discrete logarithm tally."""

    def test_256_bits(self):
        counts = elliptic_curve_counts(256, 18)
        assert counts.qubit_count == 9 * 256 + 18 + 4
        assert counts.cx_count == 417566265
        assert counts.ccx_count == 324359510

    def test_exact_division(self):
        counts = elliptic_curve_counts(3, 4)
        assert counts.cx_count == 448 * 27 // 4
        assert counts.ccx_count == 348 * 27 // 4

    def test_invalid_sizes(self):
        with pytest.raises(ValueError):
            elliptic_curve_counts(256, 0)


class TestFromProgram:
    """Test counting the resources of program files."""

    def test_qasm_file(self):
        counter = LogicalCounts.from_program(ADDER_QASM)
        assert counter.qubit_count == 4
        assert counter.cx_count == 3
        assert counter.ccx_count == 2
        assert sorted(counter.free_list) == [0, 1, 2, 3]
