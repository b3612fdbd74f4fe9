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
**Module** ``examples/from_qasm_example.py``

Count the logical resources of an OpenQASM 2.0 program and run the full CRE pipeline on it.
"""
from os import path

from cat_resource_estimation.counter import LogicalCounts
from cat_resource_estimation.estimation_pipeline import estimation_pipeline

ADDER_QASM = path.join(path.dirname(path.realpath(__file__)), "input", "adder.qasm")


def run_example(circ_path: str = ADDER_QASM, output_csv=None):
    """Run the estimation pipeline on the program at `circ_path`, optionally writing the results to CSV."""
    counts = LogicalCounts.from_program(circ_path)
    print(f"{counts.qubit_count} logical qubits, {counts.cx_count} CX and {counts.ccx_count} CCX gates.")

    # A tighter overall budget than the packaged default.
    return estimation_pipeline(circ_path=circ_path, error_total=0.01, frontier=True, output_csv=output_csv)


if __name__ == "__main__":
    run_example()
