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
**Module** ``cat_resource_estimation.estimates``

Final resource estimates for the cat-qubit architecture: total physical qubits (data, ancillas, factories and routing),
the fraction of them used by the Toffoli factories, and the total failure probability. Estimates are printed as a
report, or exported to CSV with pandas.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

import pandas as pd

from cat_resource_estimation.estimation_engine import FactoryPart, PhysicalResourceEstimationResult

logger = logging.getLogger(__name__)

# Vertical routing qubits per factory copy, for all-to-all connectivity between the compute and factory parts
VERTICAL_ROUTING_QUBITS_PER_FACTORY = 5

REPORT_RULE = "─────────────────────────────"


class CatEstimates:
    """Read-only view over a `PhysicalResourceEstimationResult` adding the architecture-specific quantities.

    Attributes not defined here are read from the wrapped result.
    """

    def __init__(self, result: PhysicalResourceEstimationResult) -> None:
        self.result = result

    def __getattr__(self, name: str) -> Any:
        if name == "result":
            raise AttributeError(name)
        return getattr(self.result, name)

    @property
    def toffoli_factory_part(self) -> Optional[FactoryPart]:
        """Return the Toffoli factories of the configuration, or None if the algorithm needs no magic state."""
        if not self.result.factory_parts:
            return None
        return self.result.factory_parts[0]

    @property
    def factory_copies(self) -> int:
        part = self.toffoli_factory_part
        return 0 if part is None else part.copies

    @property
    def physical_qubits(self) -> int:
        """Return the total number of physical qubits, vertical routing qubits included."""
        logical_qubits = self.result.layout_overhead.logical_qubits()
        additional_routing_qubits = 2 * (
            3 * (logical_qubits + self.factory_copies * VERTICAL_ROUTING_QUBITS_PER_FACTORY) - 1
        )
        return self.result.physical_qubits + additional_routing_qubits

    @property
    def factory_fraction(self) -> float:
        """Return the percentage of physical qubits allocated to the Toffoli factories."""
        return self.result.physical_qubits_for_factories / self.physical_qubits * 100.0

    @property
    def total_error(self) -> float:
        """Return the total failure probability.

        The cross term between logical and magic state errors is sub-leading, and negative, and is left out.
        """
        logical = (
            self.result.num_cycles
            * self.result.layout_overhead.logical_qubits()
            * self.result.logical_patch.logical_error_rate
        )
        part = self.toffoli_factory_part
        magic_states = 0.0 if part is None else self.result.num_magic_states(0) * part.factory.error_probability
        return logical + magic_states

    @property
    def runtime_hours(self) -> float:
        return self.result.runtime / 1e9 / 3600

    def to_dict(self) -> Dict[str, Union[int, float, str]]:
        """Return the estimates as a flat record."""
        patch = self.result.logical_patch
        part = self.toffoli_factory_part
        return {
            "physical_qubits": self.physical_qubits,
            "runtime_ns": self.result.runtime,
            "runtime_hours": self.runtime_hours,
            "total_error": self.total_error,
            "code_distance": patch.code_parameter.distance,
            "mean_photons": patch.code_parameter.mean_photons,
            "logical_error_rate": patch.logical_error_rate,
            "logical_cycle_time_ns": patch.logical_cycle_time,
            "num_cycles": self.result.num_cycles,
            "logical_qubits": self.result.layout_overhead.logical_qubits(),
            "num_magic_states": self.result.num_magic_states(0),
            "factory": "" if part is None else str(part.factory),
            "factory_copies": self.factory_copies,
            "factory_error_probability": 0.0 if part is None else part.factory.error_probability,
            "physical_qubits_for_factories": self.result.physical_qubits_for_factories,
            "factory_fraction": self.factory_fraction,
            "error_budget_logical": self.result.error_budget.logical,
            "error_budget_magic_states": self.result.error_budget.magic_states,
            "error_budget_rotations": self.result.error_budget.rotations,
        }

    def to_csv(self, file_name: str, mode: str = "w", name: str = "estimate") -> None:
        """Save the estimates to CSV.

        :param file_name: path and file name to save the results to.
        :param mode: mode to write csv. a - append, w - write
        :param name: label of the row.
        """
        estimates_to_csv([self], file_name, mode=mode, name=name)

    def __str__(self) -> str:
        lines = [
            "",
            REPORT_RULE,
            f"#physical qubits:    {self.physical_qubits}",
            f"runtime:             {self.runtime_hours:.2f} hrs",
            f"total error:         {self.total_error:.5f}",
            REPORT_RULE,
            f"code distance:       {self.result.logical_patch.code_parameter}",
            f"#factories:          {self.factory_copies}",
            f"factory fraction:    {self.factory_fraction:.2f}%",
            REPORT_RULE,
        ]
        return "\n".join(lines) + "\n"


def estimates_to_dataframe(estimates: Iterable[CatEstimates], name: str = "estimate") -> pd.DataFrame:
    """Tabulate one or many estimates, one row per estimate.

    :param estimates: the estimates, e.g., the points of a frontier.
    :param name: label of the rows. Rows of several estimates are labelled `name_0`, `name_1`, and so on.
    """
    records = [estimate.to_dict() for estimate in estimates]
    index = [name] if len(records) == 1 else [f"{name}_{i}" for i in range(len(records))]
    df = pd.DataFrame(records, index=index)
    df.index.name = "label"
    return df


def estimates_to_csv(
    estimates: Iterable[CatEstimates], file_name: str, mode: str = "w", name: str = "estimate"
) -> None:
    """Save estimates to CSV.

    :param estimates: the estimates to save.
    :param file_name: path and file name to save the results to.
    :param mode: mode to write csv. a - append, w - write
    :param name: label of the rows.
    """
    df = estimates_to_dataframe(estimates, name=name)
    if mode == "a":
        df.to_csv(file_name, mode=mode, header=False)
    elif mode == "w":
        df.to_csv(file_name, mode=mode)
    else:
        raise ValueError("CSV mode must be either 'a' for append, or 'w' for write.")
    logger.info(f"{len(df)} estimate(s) written to {file_name}.")
