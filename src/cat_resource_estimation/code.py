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
**Module** ``cat_resource_estimation.code``

Repetition code protecting cat qubits against phase flips, as described in arXiv:2302.06639.

A code parameter is the pair (code distance d, mean number of photons |ɑ|²). Fixed values of the model:

- 1/κ₂ = 100 ns, which sets the speed of the gates;
- (κ₁/κ₂)_th = 0.013, the threshold obtained by circuit-level simulation (p. 4, Eq. (3), p. 28, Fig. 26). It is not a
  tunable quantity;
- the enumeration of code parameters stops at d = 49 and |ɑ|² = 30.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from cat_resource_estimation.estimation_engine import ComputationError, ErrorCorrection, EstimationError
from cat_resource_estimation.qubit import CatQubit

logger = logging.getLogger(__name__)

THRESHOLD_K1_K2 = 0.013
PHASE_FLIP_PREFACTOR = 5.6e-2
PHASE_FLIP_PHOTON_EXPONENT = 0.86
INV_K2_NS = 100
ROUNDS_PER_DISTANCE = 5
MAX_DISTANCE = 49
MAX_MEAN_PHOTONS = 30.0


@dataclass(frozen=True)
class CodeParameter:
    """Code distance and average photon number |ɑ|² of a repetition code of cat qubits."""

    distance: int
    mean_photons: float

    def __str__(self) -> str:
        return f"{self.distance} (|ɑ|² = {self.mean_photons})"


class CodeParameterRange:
    """Single-pass iterator over code parameters, starting at a lower bound.

    The distance is the outer loop, over odd values in steps of 2. The mean photon number is the inner loop over the
    integer grid 1..`max_mean_photons`, restarting at 1 whenever the distance advances.
    """

    def __init__(
        self,
        lower_bound: Optional[CodeParameter] = None,
        max_distance: int = MAX_DISTANCE,
        max_mean_photons: float = MAX_MEAN_PHOTONS,
    ) -> None:
        if lower_bound is None:
            lower_bound = CodeParameter(1, 1.0)
        self.distance = lower_bound.distance
        self.mean_photons = _as_grid_value(lower_bound.mean_photons)
        self.max_distance = max_distance
        self.max_mean_photons = _as_grid_value(max_mean_photons)

    def __iter__(self) -> "CodeParameterRange":
        return self

    def __next__(self) -> CodeParameter:
        if self.distance > self.max_distance:
            raise StopIteration
        result = CodeParameter(self.distance, float(self.mean_photons))
        if self.mean_photons >= self.max_mean_photons:
            self.distance += 2
            self.mean_photons = 1
        else:
            self.mean_photons += 1
        return result


def _as_grid_value(mean_photons: float) -> int:
    if not math.isfinite(mean_photons) or mean_photons < 0 or mean_photons != int(mean_photons):
        raise ComputationError(f"Mean photon number {mean_photons} cannot be represented on the integer grid.")
    return int(mean_photons)


class RepetitionCode(ErrorCorrection):
    """Repetition code of cat qubits, protecting against phase flips while the cats suppress bit flips."""

    def __init__(self) -> None:
        self.threshold = THRESHOLD_K1_K2

    def parameter_space(self, lower_bound: Optional[CodeParameter] = None) -> Iterator[CodeParameter]:
        return CodeParameterRange(lower_bound)

    def physical_qubits(self, parameter: CodeParameter) -> int:
        # d data qubits and d - 1 ancillas, p. 27
        return 2 * parameter.distance - 1

    def logical_qubits(self, parameter: CodeParameter) -> int:
        return 1

    def logical_cycle_time(self, qubit: CatQubit, parameter: CodeParameter) -> int:
        """Return the duration in ns of d rounds of 5/κ₂ each (p. 28)."""
        return ROUNDS_PER_DISTANCE * INV_K2_NS * parameter.distance

    def logical_phase_flip_probability(self, qubit: CatQubit, parameter: CodeParameter) -> float:
        """Logical phase-flip probability per round (p. 3, Eq. (4) and p. 28, Eq. (E1))."""
        exponent = (parameter.distance + 1) // 2
        base = (parameter.mean_photons**PHASE_FLIP_PHOTON_EXPONENT) * qubit.k1_k2 / self.threshold
        return PHASE_FLIP_PREFACTOR * base**exponent

    @staticmethod
    def logical_bit_flip_probability(parameter: CodeParameter) -> float:
        """Logical bit-flip probability per round (Eq. (3)), from the CX bit-flip rate of p. 26, Eq. (D8)."""
        num_cx = 2 * (parameter.distance - 1)
        p_cx = 0.5 * math.exp(-2.0 * parameter.mean_photons)
        return num_cx * p_cx

    def logical_error_rate(self, qubit: CatQubit, parameter: CodeParameter) -> float:
        """Return the logical error probability per cycle, Eq. (3) of arXiv:2302.06639 in compact form.

        :raises ComputationError: if an intermediate value overflows or is not finite.
        """
        try:
            rate = parameter.distance * (
                self.logical_phase_flip_probability(qubit, parameter)
                + self.logical_bit_flip_probability(parameter)
            )
        except (OverflowError, ValueError, ZeroDivisionError) as err:
            raise ComputationError("cannot compute logical failure probability") from err
        if not math.isfinite(rate):
            raise ComputationError("cannot compute logical failure probability")
        return rate

    def compare_parameters(self, qubit: CatQubit, p1: CodeParameter, p2: CodeParameter) -> int:
        """Order two parameters by physical qubits, then by logical cycle time.

        :returns: -1, 0 or 1. Parameters whose cost cannot be evaluated compare equal.
        """
        try:
            key1 = (self.physical_qubits(p1), self.logical_cycle_time(qubit, p1))
            key2 = (self.physical_qubits(p2), self.logical_cycle_time(qubit, p2))
        except (ArithmeticError, ValueError, TypeError):
            return 0
        return (key1 > key2) - (key1 < key2)

    def required_parameter_for_target(self, qubit: CatQubit, required_logical_error_rate: float) -> CodeParameter:
        """Return the cheapest code parameter whose logical error rate is at most `required_logical_error_rate`.

        The whole parameter range is scanned, since the error rate is not monotonic in |ɑ|². Among the cheapest
        candidates, the first one in enumeration order wins.

        :raises EstimationError: if no parameter in the range reaches the required error rate.
        """
        best = None
        for parameter in self.parameter_space():
            try:
                rate = self.logical_error_rate(qubit, parameter)
            except ComputationError:
                continue
            if rate > required_logical_error_rate:
                continue
            if best is None or self.compare_parameters(qubit, parameter, best) < 0:
                best = parameter

        if best is None:
            raise EstimationError(
                f"No code parameter up to distance {MAX_DISTANCE} reaches the logical error rate "
                f"{required_logical_error_rate:g}."
            )
        return best
