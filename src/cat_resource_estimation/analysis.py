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
**Module** ``cat_resource_estimation.analysis``

This module provides additional tools for performing analysis of resource estimations done through the CRE pipeline.
"""
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

import click
import yaml

import cat_resource_estimation
from cat_resource_estimation import more_utils
from cat_resource_estimation.estimates import estimates_to_dataframe
from cat_resource_estimation.estimation_pipeline import estimation_pipeline

logger = logging.getLogger(__name__)


class SweepController:
    """Class to process and hold the values required to perform a parameter sweep for resource estimations."""

    COMBINED_CSV_NAME = "combined.csv"

    def __init__(self, param: str, values: str, output_csv: str, params_path: Optional[str] = None) -> None:
        """
        Initialize some common parameters.

        :param param: parameter that will be swept over.
        :param values: values, separated by commas, that will be assigned to the parameter during sweep.
        :param output_csv: path to output .csv, and filename template for the output CSV.
        :param params_path: YAML file the swept parameters are loaded from. Defaults to the packaged params.yaml.
        """
        logger.info("Preparing sweep controller ....")
        self.values = values.split(",")
        self.output_csv = output_csv
        self.param = param
        self.params_path = params_path
        self.output_filepath = Path(self.output_csv)
        self.output_dir = self.output_filepath.parent
        self.file_name = self.output_filepath.stem
        logger.info("Done.")

    @property
    def param_key_path(self) -> List[str]:
        """Split param name and return a list representing key path to parameter for use in a nested dictionary."""
        return self.param.split(".")

    @property
    def param_for_path(self) -> str:
        """Return a representation of the parameter suitable for a file path."""
        return self.param.replace(".", "-")

    @property
    def value_path_pairs(self) -> List[Tuple[Any, Path]]:
        """Return a list of tuples containing parameter values and corresponding output file paths.

        Values are parsed as numbers where possible, so that `256` stays an integer and `1e-4` becomes a float. Other
        values are parsed as YAML scalars.
        """
        file_path = self.output_filepath
        pairs = []
        for val in self.values:
            new_path = file_path.with_name(f"{self.file_name}_{self.param_for_path}{val}{file_path.suffix}")
            pairs.append((parse_value(val), new_path))
        return pairs


def parse_value(val: str) -> Any:
    """Parse a swept value from the command line into an int, a float or, failing that, a YAML scalar."""
    for number_type in (int, float):
        try:
            return number_type(val)
        except ValueError:
            pass
    return yaml.safe_load(val)


def perform_sweep(
    parameter: str,
    values: str,
    output_csv: str,
    circ_path: Optional[str] = None,
    params_path: Optional[str] = None,
    frontier: bool = False,
) -> None:
    """Perform the sweep over values for a specific parameter, save the resulting CSVs and combine them.

    :param parameter: parameter to sweep over. Should be of form 'key1.key2' where the '.' identifies level in dict
        structure. So in this example, the parameter to sweep over is key2, but you need to descend 1 level in the
        nested dictionary to arrive there.
    :param values: values for the parameter to sweep over.
    :param output_csv: path to the output CSV and a template to save them.
    :param circ_path: path to the input program to run the resource estimation on. If None, the elliptic curve
        discrete logarithm counts are used.
    :param params_path: YAML file with the base parameters. Defaults to the packaged params.yaml.
    :param frontier: write the whole frontier of each estimation instead of the cheapest configuration.
    """
    logger.info("Starting parameter sweeper ...")
    sweep_cntl = SweepController(parameter, values, output_csv, params_path=params_path)

    logger.info("Preparing output directory at %s", str(sweep_cntl.output_dir))
    sweep_cntl.output_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Beginning the sweep ...")
    logger.info("Sweeping over %s", sweep_cntl.param)
    for val, path in sweep_cntl.value_path_pairs:
        logger.info("    Running parameter value %s", val)
        params = cat_resource_estimation.load_yaml_file(sweep_cntl.params_path)
        more_utils.update(params, sweep_cntl.param, val)
        config = cat_resource_estimation.Configuration(params)

        logger.info("Running resource estimator ....")
        estimates = estimation_pipeline(circ_path=circ_path, frontier=frontier, config=config)
        df = estimates_to_dataframe(estimates, name=f"{sweep_cntl.param_for_path}{val}")
        df.insert(0, sweep_cntl.param, val)
        df.to_csv(path)

    logger.info("Finished parameter sweep.")

    logger.info("Combining CSVs ...")
    more_utils.combine_csvs(sweep_cntl.output_dir, sweep_cntl.COMBINED_CSV_NAME)
    logger.info("Done. Combined results at %s", sweep_cntl.output_dir / sweep_cntl.COMBINED_CSV_NAME)


@click.group()
def cli():
    """Entry point to the analysis.py cli."""
    logging.basicConfig(level=logging.INFO)
    logger.info(
        "Welcome to the parameter sweep analysis tool based on Cat Resource Estimation version %s",
        cat_resource_estimation.__version__,
    )


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("parameter", type=str)
@click.argument("values", type=str)
@click.option("--output-csv", type=str, required=True, help="Path to the output CSV and a template to save them")
@click.option("--circ-path", type=click.Path(), help="Path to the program to run the resource estimation on")
@click.option("--params-path", type=click.Path(), help="Path to the YAML file with the base parameters")
@click.option("--frontier", is_flag=True, help="Write the frontier of good parameter sets for each value")
def sweep(
    parameter: str, values: str, output_csv: str, circ_path: Optional[str], params_path: Optional[str], frontier: bool
) -> None:
    """Sweep over values for a specific parameter, save the resulting CSVs, and combine them.

    For example, executing:

    ```CREsweep elliptic_curve.bit_size 128,192,256 --output-csv output/ecc_runs.csv```

    will run the sweep over values for the `bit_size` param (nested below the elliptic_curve key) of 128, 192 and 256.
    CSV files will be saved in output/ with file names `ecc_runs.csv` but modified to look like
    `ecc_runs_elliptic_curve-bit_size128.csv` (for example). The final combined CSV file will be located in output/
    with file `combined.csv`.

    :param parameter: parameter to sweep over. Should be of form 'key1.key2' where the . identifies level in dict
        structure.
    :param values: values for the parameter to sweep over.
    :param output_csv: path to output .csv, and filename template for output CSV.
    :param circ_path: path to the program to run the resource estimation on.
    :param params_path: path to the YAML file with the base parameters.
    :param frontier: write the frontier of good parameter sets for each value.
    """
    perform_sweep(parameter, values, output_csv, circ_path=circ_path, params_path=params_path, frontier=frontier)


if __name__ == "__main__":
    cli()
