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
**Module** ``cat_resource_estimation.factories``

Toffoli magic state factories based on the fault-tolerant measurement of the stabilizers of the Toffoli state.

The factories are not simulated here. Their performances were precomputed in arXiv:2302.06639 (Table III, p. 35) for
1/κ₂ = 100 ns and κ₁/κ₂ = 1e-5, and the estimator only selects among them. Any change to the gate time below requires
recomputing the table.
"""

import math
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from cat_resource_estimation.estimation_engine import ComputationError, ErrorCorrection, Factory, FactoryBuilder

logger = logging.getLogger(__name__)

# 4 logical qubits and 1 horizontal routing qubit per factory, p. 27
FACTORY_LOGICAL_QUBITS = 4
FACTORY_ROUTING_QUBITS = 1
# Adiabatic CX gate time is 89.2/(κ₂|ɑ|²), p. 32
ADIABATIC_GATE_STEPS = 89.2
INV_K2_NS = 100.0


@dataclass(frozen=True)
class ToffoliFactory(Factory):
    """A heralded Toffoli magic state factory.

    :param code_distance: internal repetition code distance, independent of the one of the processor.
    :param mean_photons: internal average photon number |ɑ|², independent of the one of the processor.
    :param error_probability: logical error probability of the produced magic state.
    :param acceptance_probability: probability that a run is accepted by the heralding.
    :param steps: number of adiabatic gate steps of a run.
    """

    code_distance: int
    mean_photons: float
    error_probability: float
    acceptance_probability: float
    steps: int

    def physical_qubits(self) -> int:
        return (FACTORY_LOGICAL_QUBITS + FACTORY_ROUTING_QUBITS) * (2 * self.code_distance - 1)

    def duration(self) -> int:
        """Average duration in ns of a run, retries included."""
        gate_time = ADIABATIC_GATE_STEPS * INV_K2_NS / self.mean_photons
        duration = gate_time * self.steps / self.acceptance_probability
        if not math.isfinite(duration):
            raise ComputationError(f"Cannot compute the runtime of factory {self}.")
        return round(duration)

    def num_output_states(self) -> int:
        return 1

    def normalized_volume(self) -> int:
        """Space-time volume of the factory, retries included."""
        return self.physical_qubits() * self.duration()

    def __lt__(self, other: "ToffoliFactory") -> bool:
        return self.normalized_volume() < other.normalized_volume()

    def __le__(self, other: "ToffoliFactory") -> bool:
        return self.normalized_volume() <= other.normalized_volume()

    def __gt__(self, other: "ToffoliFactory") -> bool:
        return self.normalized_volume() > other.normalized_volume()

    def __ge__(self, other: "ToffoliFactory") -> bool:
        return self.normalized_volume() >= other.normalized_volume()

    def __str__(self) -> str:
        return f"{self.code_distance} (|ɑ|² = {self.mean_photons})"


# arXiv:2302.06639, p. 35, Table III
TOFFOLI_FACTORY_TABLE: Tuple[ToffoliFactory, ...] = (
    ToffoliFactory(3, 3.75, 1.05e-3, 0.84, 23),
    ToffoliFactory(3, 5.08, 1.02e-4, 0.745, 29),
    ToffoliFactory(3, 5.32, 8.14e-5, 0.66, 35),
    ToffoliFactory(5, 7.15, 4.62e-6, 0.456, 46),
    ToffoliFactory(5, 8.18, 7.00e-7, 0.362, 53),
    ToffoliFactory(5, 8.38, 5.36e-7, 0.288, 60),
    ToffoliFactory(7, 9.71, 6.14e-8, 0.148, 73),
    ToffoliFactory(7, 10.76, 8.40e-9, 0.105, 81),
    ToffoliFactory(7, 11.06, 5.16e-9, 0.0727, 89),
    ToffoliFactory(9, 11.64, 2.28e-9, 0.0262, 104),
    ToffoliFactory(9, 12.83, 2.30e-10, 0.0154, 113),
    ToffoliFactory(9, 13.44, 7.36e-11, 0.00975, 122),
    ToffoliFactory(19, 17.35, 7.90e-12, 1.0, 9576),
    ToffoliFactory(21, 18.94, 5.40e-13, 1.0, 14112),
    ToffoliFactory(23, 20.53, 3.74e-14, 1.0, 21344),
)


class ToffoliBuilder(FactoryBuilder):
    """Holds the precomputed Toffoli factories and selects the ones reaching a target error probability."""

    def __init__(self) -> None:
        self.factories = TOFFOLI_FACTORY_TABLE
        self.lowest_error_probability = min(factory.error_probability for factory in self.factories)

    def find_factories(
        self,
        ftp: Optional[ErrorCorrection],
        qubit: Any,
        magic_state_type: int,
        output_error_rate: float,
        max_code_parameter: Any,
    ) -> List[ToffoliFactory]:
        """Return the factories with an error probability of at most `output_error_rate`, sorted by volume.

        :param ftp: error correction scheme of the processor (not used by the precomputed table).
        :param qubit: physical qubit model (not used by the precomputed table).
        :param magic_state_type: index of the magic state species, always 0 for Toffoli states.
        :param output_error_rate: target error probability per magic state.
        :param max_code_parameter: code parameter of the processor (not used by the precomputed table).

        :returns: a possibly empty list of factories, cheapest first.
        """
        if output_error_rate < self.lowest_error_probability:
            raise AssertionError("Requested error probability is too low")

        factories = sorted(
            (factory for factory in self.factories if factory.error_probability <= output_error_rate),
            key=ToffoliFactory.normalized_volume,
        )
        logger.debug(f"{len(factories)} Toffoli factories reach the error probability {output_error_rate:g}.")
        return factories

    def num_magic_state_types(self) -> int:
        return 1
