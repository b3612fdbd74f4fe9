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
**Module** ``cat_resource_estimation.estimation_engine``

Architecture-agnostic contracts for physical resource estimation and a driver that searches them.

An architecture plugs into the driver by implementing four capability sets: an `ErrorCorrection` scheme (code
parameters, footprint, cycle time and logical error rate), the `Factory` objects and the `FactoryBuilder` that selects
them for a target magic state error rate, and the `Overhead` of the algorithm (logical qubits, logical depth and magic
state demand). `PhysicalResourceEstimation` only talks to these abstractions. Given an `ErrorBudget`, it finds the
cheapest configuration, or the frontier of non-dominated (qubits, runtime) configurations.
"""

import math
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class EstimationError(Exception):
    """Raised when no physical configuration can satisfy the requested error budget."""


class ComputationError(EstimationError):
    """Raised when an intermediate numeric value of a physical model cannot be represented."""


@dataclass(frozen=True)
class ErrorBudget:
    """Allocation of the total failure probability between the error sources of an algorithm.

    :param logical: budget for topological (logical qubit) errors.
    :param magic_states: budget for errors in the consumed magic states.
    :param rotations: budget for rotation synthesis errors (unused by cat-qubit architectures).
    """

    logical: float
    magic_states: float
    rotations: float = 0.0

    def __post_init__(self):
        for name in ("logical", "magic_states", "rotations"):
            value = getattr(self, name)
            if not value >= 0:
                raise ValueError(f"Error budget `{name}` must be non-negative, got {value}.")

    @classmethod
    def from_total(cls, total: float) -> "ErrorBudget":
        """Split an overall failure probability evenly between logical and magic state errors."""
        return cls(logical=total * 0.5, magic_states=total * 0.5, rotations=0.0)

    @property
    def total(self) -> float:
        """Return the overall failure probability."""
        return self.logical + self.magic_states + self.rotations


class ErrorCorrection(ABC):
    """Capability set of a quantum error correction scheme."""

    @abstractmethod
    def parameter_space(self, lower_bound: Optional[Any] = None) -> Iterator[Any]:
        """Return a fresh, single-pass iterator over candidate code parameters, starting at `lower_bound`."""

    @abstractmethod
    def physical_qubits(self, parameter: Any) -> int:
        """Return the number of physical qubits of one code patch."""

    @abstractmethod
    def logical_qubits(self, parameter: Any) -> int:
        """Return the number of logical qubits encoded in one code patch."""

    @abstractmethod
    def logical_cycle_time(self, qubit: Any, parameter: Any) -> int:
        """Return the duration of a logical cycle in nanoseconds."""

    @abstractmethod
    def logical_error_rate(self, qubit: Any, parameter: Any) -> float:
        """Return the logical error probability per logical cycle and patch."""

    @abstractmethod
    def compare_parameters(self, qubit: Any, p1: Any, p2: Any) -> int:
        """Return a negative, zero or positive number when `p1` is cheaper, as costly, or costlier than `p2`."""

    @abstractmethod
    def required_parameter_for_target(self, qubit: Any, required_logical_error_rate: float) -> Any:
        """Return the cheapest code parameter whose logical error rate does not exceed the requested one."""


class Factory(ABC):
    """Capability set of a magic state factory.

    Implementations also expose the error probability of an output magic state as the `error_probability` attribute.
    """

    error_probability: float

    @abstractmethod
    def physical_qubits(self) -> int:
        """Return the number of physical qubits of one factory copy."""

    @abstractmethod
    def duration(self) -> int:
        """Return the average time in nanoseconds for one factory run."""

    @abstractmethod
    def num_output_states(self) -> int:
        """Return the number of magic states produced per run."""


class FactoryBuilder(ABC):
    """Capability set to select magic state factories for a target output error rate."""

    @abstractmethod
    def find_factories(
        self,
        ftp: ErrorCorrection,
        qubit: Any,
        magic_state_type: int,
        output_error_rate: float,
        max_code_parameter: Any,
    ) -> Optional[List[Factory]]:
        """Return the factories reaching `output_error_rate`, cheapest first."""

    def num_magic_state_types(self) -> int:
        """Return the number of distinct magic state species."""
        return 1


class Overhead(ABC):
    """Capability set describing the logical footprint of an algorithm."""

    @abstractmethod
    def logical_qubits(self) -> int:
        """Return the number of logical qubits after layout."""

    @abstractmethod
    def logical_depth(self, budget: ErrorBudget) -> int:
        """Return the number of logical cycles required by the algorithm."""

    @abstractmethod
    def num_magic_states(self, budget: ErrorBudget, index: int) -> int:
        """Return the number of magic states of type `index` consumed by the algorithm."""


@dataclass(frozen=True)
class LogicalPatch:
    """A code patch with its code parameter and the derived physical quantities."""

    code_parameter: Any
    physical_qubits: int
    logical_qubits: int
    logical_cycle_time: int
    logical_error_rate: float

    @classmethod
    def build(cls, ftp: ErrorCorrection, qubit: Any, code_parameter: Any) -> "LogicalPatch":
        """Evaluate the error correction scheme for `code_parameter`."""
        return cls(
            code_parameter=code_parameter,
            physical_qubits=ftp.physical_qubits(code_parameter),
            logical_qubits=ftp.logical_qubits(code_parameter),
            logical_cycle_time=ftp.logical_cycle_time(qubit, code_parameter),
            logical_error_rate=ftp.logical_error_rate(qubit, code_parameter),
        )

    @property
    def physical_qubits_per_logical_qubit(self) -> int:
        """Return the physical footprint of a single logical qubit."""
        return math.ceil(self.physical_qubits / self.logical_qubits)


@dataclass(frozen=True)
class FactoryPart:
    """The factories of one magic state type together with the number of their parallel copies.

    :param factory: the selected factory.
    :param copies: number of factory copies running in parallel.
    :param runs: total number of factory runs per copy required by the algorithm.
    :param required_output_error_rate: target error rate per magic state the factory was selected for.
    """

    factory: Factory
    copies: int
    runs: int
    required_output_error_rate: float

    @property
    def physical_qubits(self) -> int:
        """Return the number of physical qubits used by all copies."""
        return self.copies * self.factory.physical_qubits()


@dataclass(frozen=True)
class PhysicalResourceEstimationResult:
    """Outcome of a physical resource estimation for a single configuration."""

    logical_patch: LogicalPatch
    layout_overhead: Overhead
    error_budget: ErrorBudget
    num_cycles: int
    factory_parts: Sequence[Optional[FactoryPart]] = field(default_factory=tuple)

    @property
    def physical_qubits_for_algorithm(self) -> int:
        """Return the physical qubits hosting the logical qubits of the algorithm."""
        return self.layout_overhead.logical_qubits() * self.logical_patch.physical_qubits_per_logical_qubit

    @property
    def physical_qubits_for_factories(self) -> int:
        """Return the physical qubits hosting the magic state factories."""
        return sum(part.physical_qubits for part in self.factory_parts if part is not None)

    @property
    def physical_qubits(self) -> int:
        """Return the total number of physical qubits."""
        return self.physical_qubits_for_algorithm + self.physical_qubits_for_factories

    @property
    def runtime(self) -> int:
        """Return the algorithm runtime in nanoseconds."""
        return self.num_cycles * self.logical_patch.logical_cycle_time

    def num_magic_states(self, index: int) -> int:
        """Return the number of magic states of type `index` consumed by the algorithm."""
        return self.layout_overhead.num_magic_states(self.error_budget, index)


class PhysicalResourceEstimation:
    """Search the configurations of an architecture that meet an error budget.

    The error correction scheme, the physical qubit model, the factory builder and the layout overhead are held for
    the lifetime of the object and are never mutated; the estimation methods may be called repeatedly.
    """

    def __init__(
        self,
        ftp: ErrorCorrection,
        qubit: Any,
        factory_builder: FactoryBuilder,
        layout_overhead: Overhead,
        error_budget: ErrorBudget,
    ) -> None:
        """
        :param ftp: the fault-tolerance protocol, i.e., the error correction scheme.
        :param qubit: the physical qubit model, shared read-only by every evaluation.
        :param factory_builder: selects magic state factories.
        :param layout_overhead: logical overhead of the algorithm.
        :param error_budget: allocation of the total failure probability.
        """
        self.ftp = ftp
        self.qubit = qubit
        self.factory_builder = factory_builder
        self.layout_overhead = layout_overhead
        self.error_budget = error_budget

    def _check_resources(self) -> Tuple[int, int]:
        num_logical_qubits = self.layout_overhead.logical_qubits()
        num_cycles = self.layout_overhead.logical_depth(self.error_budget)
        if num_logical_qubits == 0 or num_cycles == 0:
            raise EstimationError(
                f"The algorithm has no resources to estimate (logical qubits={num_logical_qubits}, "
                f"logical depth={num_cycles})."
            )
        return num_logical_qubits, num_cycles

    def _patch_for_cycles(self, num_cycles: int) -> LogicalPatch:
        required_logical_error_rate = self.error_budget.logical / (
            self.layout_overhead.logical_qubits() * num_cycles
        )
        code_parameter = self.ftp.required_parameter_for_target(self.qubit, required_logical_error_rate)
        logger.debug(
            f"For {num_cycles} logical cycles, the required logical error rate is {required_logical_error_rate:g}; "
            f"selected code parameter {code_parameter}."
        )
        return LogicalPatch.build(self.ftp, self.qubit, code_parameter)

    def _find_factories(self, num_magic_states: int, patch: LogicalPatch) -> Tuple[float, List[Factory]]:
        required_output_error_rate = self.error_budget.magic_states / num_magic_states
        factories = self.factory_builder.find_factories(
            self.ftp, self.qubit, 0, required_output_error_rate, patch.code_parameter
        )
        if not factories:
            raise EstimationError(
                f"No magic state factory reaches the required output error rate {required_output_error_rate:g}."
            )
        return required_output_error_rate, list(factories)

    def _result(
        self,
        patch: LogicalPatch,
        num_cycles: int,
        factory: Optional[Factory] = None,
        num_magic_states: int = 0,
        required_output_error_rate: float = 0.0,
    ) -> PhysicalResourceEstimationResult:
        factory_parts: Tuple[Optional[FactoryPart], ...] = (None,)
        if factory is not None:
            runtime = num_cycles * patch.logical_cycle_time
            copies = math.ceil(num_magic_states * factory.duration() / (factory.num_output_states() * runtime))
            runs = math.ceil(num_magic_states / (factory.num_output_states() * copies))
            factory_parts = (
                FactoryPart(
                    factory=factory,
                    copies=copies,
                    runs=runs,
                    required_output_error_rate=required_output_error_rate,
                ),
            )
        return PhysicalResourceEstimationResult(
            logical_patch=patch,
            layout_overhead=self.layout_overhead,
            error_budget=self.error_budget,
            num_cycles=num_cycles,
            factory_parts=factory_parts,
        )

    def estimate(self) -> PhysicalResourceEstimationResult:
        """Find the configuration with the smallest code parameter and the smallest-volume factory.

        The number of logical cycles starts at the logical depth of the algorithm. If no factory can produce a magic
        state within the algorithm runtime, the runtime is stretched to the shortest factory duration and the code
        parameter is re-derived for the longer computation.
        """
        _, num_cycles = self._check_resources()
        num_magic_states = self.layout_overhead.num_magic_states(self.error_budget, 0)

        while True:
            patch = self._patch_for_cycles(num_cycles)
            if num_magic_states == 0:
                return self._result(patch, num_cycles)

            required_output_error_rate, factories = self._find_factories(num_magic_states, patch)
            runtime = num_cycles * patch.logical_cycle_time
            factory = next((f for f in factories if f.duration() <= runtime), None)
            if factory is not None:
                logger.debug(f"Selected factory {factory} for a runtime of {runtime} ns.")
                return self._result(patch, num_cycles, factory, num_magic_states, required_output_error_rate)

            shortest = min(f.duration() for f in factories)
            num_cycles = max(num_cycles + 1, math.ceil(shortest / patch.logical_cycle_time))
            logger.debug(f"No factory fits in {runtime} ns; stretching the computation to {num_cycles} cycles.")

    def build_frontier(self) -> List[PhysicalResourceEstimationResult]:
        """Explore trade-offs between physical qubits and runtime, and return the non-dominated configurations.

        Every candidate factory is tried with its natural number of copies, then with successively halved numbers of
        copies; fewer copies require a longer computation, which may in turn require a larger code parameter.
        Configurations that cannot meet the error budget are skipped.
        """
        _, depth = self._check_resources()
        num_magic_states = self.layout_overhead.num_magic_states(self.error_budget, 0)
        base = self.estimate()
        if num_magic_states == 0:
            return [base]

        candidates = [base]
        _, factories = self._find_factories(num_magic_states, base.logical_patch)
        for factory in factories:
            produced_per_run = factory.num_output_states()
            total_duration = math.ceil(num_magic_states / produced_per_run) * factory.duration()
            patch = base.logical_patch
            copies = math.ceil(total_duration / max(depth * patch.logical_cycle_time, factory.duration()))
            while copies >= 1:
                try:
                    result = self._configuration_for_copies(factory, copies, depth, num_magic_states, patch)
                except EstimationError as err:
                    logger.debug(f"Skipping factory {factory} with {copies} copies: {err}")
                    break
                candidates.append(result)
                patch = result.logical_patch
                if copies == 1:
                    break
                copies = copies // 2

        return pareto_frontier(candidates)

    def _configuration_for_copies(
        self, factory: Factory, copies: int, depth: int, num_magic_states: int, patch: LogicalPatch
    ) -> PhysicalResourceEstimationResult:
        runs = math.ceil(num_magic_states / (factory.num_output_states() * copies))
        required_output_error_rate = self.error_budget.magic_states / num_magic_states
        num_cycles = depth
        # the cycle time depends on the code parameter, which depends on the number of cycles
        for _ in range(8):
            num_cycles = max(depth, math.ceil(runs * factory.duration() / patch.logical_cycle_time))
            new_patch = self._patch_for_cycles(num_cycles)
            if new_patch.logical_cycle_time == patch.logical_cycle_time:
                patch = new_patch
                break
            patch = new_patch
        num_cycles = max(depth, math.ceil(runs * factory.duration() / patch.logical_cycle_time))
        if patch.logical_error_rate * self.layout_overhead.logical_qubits() * num_cycles > self.error_budget.logical:
            raise EstimationError("the stretched computation exceeds the logical error budget")
        return self._result(patch, num_cycles, factory, num_magic_states, required_output_error_rate)


def pareto_frontier(results: Sequence[PhysicalResourceEstimationResult]) -> List[PhysicalResourceEstimationResult]:
    """Keep the results not dominated in both physical qubits and runtime, sorted by increasing physical qubits."""
    ordered = sorted(results, key=cmp_to_key(_compare_qubits_runtime))
    frontier: List[PhysicalResourceEstimationResult] = []
    for result in ordered:
        if not frontier or result.runtime < frontier[-1].runtime:
            frontier.append(result)
    return frontier


def _compare_qubits_runtime(r1: PhysicalResourceEstimationResult, r2: PhysicalResourceEstimationResult) -> int:
    key1 = (r1.physical_qubits, r1.runtime)
    key2 = (r2.physical_qubits, r2.runtime)
    return (key1 > key2) - (key1 < key2)
