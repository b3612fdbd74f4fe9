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
**Module** ``examples/elliptic_log_example.py``

Estimate the resources of the elliptic curve discrete logarithm on a cat-qubit processor, from the pre-computed
logical counts of arXiv:2302.06639.
"""
from cat_resource_estimation.code import RepetitionCode
from cat_resource_estimation.counter import elliptic_curve_counts
from cat_resource_estimation.estimates import CatEstimates
from cat_resource_estimation.estimation_engine import ErrorBudget, PhysicalResourceEstimation
from cat_resource_estimation.factories import ToffoliBuilder
from cat_resource_estimation.qubit import CatQubit


def run_example(bit_size: int = 256, window_size: int = 18):
    """Print the cheapest estimate and the frontier of good estimates for a `bit_size`-bit curve.

    Other key sizes, with their window sizes, are listed in arXiv:2302.06639 (Table IV, p. 37).
    """
    counts = elliptic_curve_counts(bit_size, window_size)
    estimation = PhysicalResourceEstimation(
        RepetitionCode(), CatQubit(), ToffoliBuilder(), counts.freeze(), ErrorBudget.from_total(0.333)
    )

    result = CatEstimates(estimation.estimate())
    print("Estimates from pre-computed logical count (elliptic curve discrete logarithm):")
    print(result)

    print("----------------------------------------")
    print("Exploration of good estimates from pre-computed logical count (elliptic curve discrete logarithm):")
    frontier = [CatEstimates(r) for r in estimation.build_frontier()]
    for estimate in frontier:
        print(estimate)
    return result, frontier


if __name__ == "__main__":
    run_example()
