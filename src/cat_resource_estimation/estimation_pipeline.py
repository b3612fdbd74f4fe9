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
**Module** ``cat_resource_estimation.estimation_pipeline``

Front-end script for cat-qubit resource estimations featuring functions to perform a full estimation pipeline.

The logical resources of the algorithm (logical qubits, CX and CCX gates) are given directly, counted from an
OpenQASM 2.0 or cirq JSON program, or taken from the elliptic curve discrete logarithm tally of [1]. The pipeline then
searches the repetition code parameters and Toffoli factories meeting the error budget, and prints the resulting
estimates, optionally also writing them to CSV. With `--frontier`, all non-dominated (qubits, runtime) trade-offs are
reported instead of the single cheapest configuration.

[1] Élie Gouzien et al., Performance analysis of a repetition cat code architecture: computing 256-bit elliptic curve
logarithm in 9 hours with 126 133 cat qubits, arXiv:2302.06639 (2023).
"""

import sys
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import argh

from cat_resource_estimation import PARAMS_YAML_FILENAME, Configuration, load_yaml_file
from cat_resource_estimation.code import RepetitionCode
from cat_resource_estimation.counter import LogicalCounts, elliptic_curve_counts
from cat_resource_estimation.estimates import CatEstimates, estimates_to_csv
from cat_resource_estimation.estimation_engine import ErrorBudget, PhysicalResourceEstimation
from cat_resource_estimation.factories import ToffoliBuilder
from cat_resource_estimation.qubit import CatQubit

logger = logging.getLogger(__name__)


def build_error_budget(
    config: Configuration,
    error_total: Optional[float] = None,
    error_budget: Optional[Sequence[float]] = None,
) -> ErrorBudget:
    """Return the error budget requested on the command line, or the configured one.

    :param config: configuration holding the default budget.
    :param error_total: overall error budget, split evenly between topological and magic state errors.
    :param error_budget: detailed (topological, magic state, rotation) error budget.

    :raises ValueError: if both `error_total` and `error_budget` are given.
    """
    if error_total is not None and error_budget is not None:
        raise ValueError("Set either an overall error budget or a detailed one, not both.")
    if error_budget is None and error_total is None:
        error_budget = config.error_budget
        error_total = config.error_total
    if error_budget is not None:
        if len(error_budget) != 3:
            raise ValueError(f"A detailed error budget has 3 entries, got {list(error_budget)}.")
        return ErrorBudget(*(float(value) for value in error_budget))
    return ErrorBudget.from_total(float(error_total))


def print_estimations(
    estimates: Sequence[CatEstimates], output_csv: Optional[str] = None, name: str = "estimate"
) -> None:
    """Print resource estimation results to stdout and, optionally, into an CSV output.

    :param estimates: the estimates to report.
    :param output_csv: Set the output CSV file to store estimation results.
    :param name: label of the rows in the CSV output.
    """
    if output_csv is not None:
        mode = "a" if Path(output_csv).exists() else "w"
        estimates_to_csv(estimates, output_csv, mode=mode, name=name)
    for estimate in estimates:
        print(estimate)


def estimation_pipeline(
    circ_path: Optional[Union[str, Path]] = None,
    resources: Optional[Tuple[int, int, int]] = None,
    bit_size: Optional[int] = None,
    window_size: Optional[int] = None,
    frontier: bool = False,
    error_total: Optional[float] = None,
    error_budget: Optional[Sequence[float]] = None,
    output_csv: Optional[str] = None,
    params_path: Optional[Union[str, Path]] = None,
    config: Optional[Configuration] = None,
    log: Optional[str] = None,
) -> List[CatEstimates]:
    """Perform a complete cat-qubit resource estimation.

    **This is Cat Resource Estimation's (CRE) main entry point.**

    :param circ_path: Filepath for an input program, either OpenQASM 2.0 (.qasm) or a JSON-serialized cirq circuit
        (.json). Takes precedence over `resources`.
    :param resources: Logical (qubits, CX, CCX) counts. If neither `circ_path` nor `resources` is set, the elliptic
        curve discrete logarithm counts are used.
    :param bit_size: Key size of the elliptic curve discrete logarithm. Defaults to the configured one.
    :param window_size: Windowing size of the elliptic curve discrete logarithm. Defaults to the configured one.
    :param frontier: Report every non-dominated (qubits, runtime) configuration instead of the cheapest one.
    :param error_total: Overall error budget, split evenly between topological and magic state errors.
    :param error_budget: Detailed (topological, magic state, rotation) error budget. Exclusive with `error_total`.
    :param output_csv: If provided, CRE will write the estimation results to this file in CSV format, appending to it
        if it already exists.
    :param params_path: Filepath to the YAML file from which we load the parameters to the `config` object. If None,
        parameters will get loaded from the default `params.yaml` included with this package.
    :param config: A Configuration object. Takes precedence over `params_path`.
    :param log: The logging level requested. Can be left unset for no logging or to a valid logging level: 'INFO',
        'WARNING', 'DEBUG', 'ERROR', and 'CRITICAL'.

    :returns: the estimates, one per reported configuration.
    """
    if log is not None:
        numeric_level = getattr(logging, log.upper(), None)
        logging.basicConfig(level=numeric_level)

    filename = PARAMS_YAML_FILENAME if params_path is None else Path(params_path).name
    print(f"\nCRE: ESTIMATION STEP0: Loading configs from `{filename}` and setting the error budget ...\n")

    if config is None:
        config = Configuration(load_yaml_file(params_path))
    budget = build_error_budget(config, error_total=error_total, error_budget=error_budget)
    qubit = CatQubit.from_config(config)
    logger.info(f"Error budget: {budget}; qubit model: {qubit}.")

    print("CRE: ESTIMATION STEP1: Counting the logical qubits, CX and CCX gates of the algorithm ...\n")
    if circ_path is not None:
        name = Path(circ_path).stem
        counts = LogicalCounts.from_program(circ_path)
    elif resources is not None:
        name = "resources"
        counts = LogicalCounts(*resources)
    else:
        ecc_params = config.elliptic_curve_params
        bit_size = ecc_params["bit_size"] if bit_size is None else bit_size
        window_size = ecc_params["window_size"] if window_size is None else window_size
        name = f"elliptic_curve_{bit_size}"
        counts = elliptic_curve_counts(bit_size, window_size)
    overhead = counts.freeze()
    logger.info(f"Logical counts for `{name}`: {overhead}.")

    print("CRE: ESTIMATION STEP2: Searching the code parameters and Toffoli factories meeting the error budget ...\n")
    estimation = PhysicalResourceEstimation(RepetitionCode(), qubit, ToffoliBuilder(), overhead, budget)
    if frontier:
        estimates = [CatEstimates(result) for result in estimation.build_frontier()]
    else:
        estimates = [CatEstimates(estimation.estimate())]

    print("CRE: ESTIMATION STEP3: Reporting the estimated physical resources ...")
    print_estimations(estimates, output_csv=output_csv, name=name)
    return estimates


def _estimation_options(func):
    """Declare the options shared by all estimation subcommands."""
    options = [
        argh.arg("--frontier", help="Show the frontier of good parameter sets instead of a single result."),
        argh.arg(
            "--error-total",
            type=float,
            help="Overall error budget, equally split between topological and magic state errors [default: 0.333].",
        ),
        argh.arg(
            "--error-budget",
            nargs=3,
            type=float,
            metavar=("TOPOLOGICAL_ERROR", "MAGIC_ERROR", "ROTATION_ERROR"),
            help="Detailed error budget.",
        ),
        argh.arg("--output-csv", help="CSV file to write, or append, the estimates to."),
        argh.arg("--params-path", help="YAML file with the parameters; defaults to the packaged params.yaml."),
        argh.arg("--log", help="Logging level, e.g. INFO or DEBUG."),
    ]
    for option in options:
        func = option(func)
    return func


@_estimation_options
@argh.arg("qubits", type=int, help="Logical qubit number")
@argh.arg("cx", type=int, help="Number of controlled-not gates")
@argh.arg("ccx", type=int, help="Number of Toffoli gates")
def resources(
    qubits: int,
    cx: int,
    ccx: int,
    *,
    frontier: bool = False,
    error_total: Optional[float] = None,
    error_budget: Optional[List[float]] = None,
    output_csv: Optional[str] = None,
    params_path: Optional[str] = None,
    log: Optional[str] = None,
) -> None:
    """Compute from listed resources."""
    estimation_pipeline(
        resources=(qubits, cx, ccx),
        frontier=frontier,
        error_total=error_total,
        error_budget=error_budget,
        output_csv=output_csv,
        params_path=params_path,
        log=log,
    )


@_estimation_options
@argh.arg("filename", help="Path to an OpenQASM 2.0 (.qasm) or cirq JSON (.json) program")
def file(
    filename: str,
    *,
    frontier: bool = False,
    error_total: Optional[float] = None,
    error_budget: Optional[List[float]] = None,
    output_csv: Optional[str] = None,
    params_path: Optional[str] = None,
    log: Optional[str] = None,
) -> None:
    """Count the logical resources of a program file and compute from them."""
    estimation_pipeline(
        circ_path=filename,
        frontier=frontier,
        error_total=error_total,
        error_budget=error_budget,
        output_csv=output_csv,
        params_path=params_path,
        log=log,
    )


@_estimation_options
@argh.arg("--bit-size", type=int, help="Key size of the elliptic curve [default: from params.yaml]")
@argh.arg("--window-size", type=int, help="Windowing size of the modular exponentiation [default: from params.yaml]")
def elliptic_curve(
    *,
    bit_size: Optional[int] = None,
    window_size: Optional[int] = None,
    frontier: bool = False,
    error_total: Optional[float] = None,
    error_budget: Optional[List[float]] = None,
    output_csv: Optional[str] = None,
    params_path: Optional[str] = None,
    log: Optional[str] = None,
) -> None:
    """Compute from the elliptic curve discrete logarithm counts of arXiv:2302.06639."""
    estimation_pipeline(
        bit_size=bit_size,
        window_size=window_size,
        frontier=frontier,
        error_total=error_total,
        error_budget=error_budget,
        output_csv=output_csv,
        params_path=params_path,
        log=log,
    )


def main() -> None:
    """Dispatch the command line and map failures onto exit codes."""
    try:
        argh.dispatch_commands([resources, file, elliptic_curve])
        sys.exit(0)
    except AssertionError as exception:
        logger.exception(exception)
        logger.critical("The program encountered a self-consistency issue and was aborted.")
        sys.exit(-1)
    except Exception as exception:  # pylint: disable=W0718
        logger.exception(exception)
        logger.critical("The program encountered a run-time error and was aborted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
