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

"""Unit tests for the `estimation_pipeline` module of cat-resource-estimation."""

from os import path

import argh
import pandas as pd
import pytest
import yaml

from cat_resource_estimation import Configuration, load_yaml_file
from cat_resource_estimation.estimation_engine import ErrorBudget
from cat_resource_estimation.estimation_pipeline import (
    build_error_budget,
    elliptic_curve,
    estimation_pipeline,
    file,
    main,
    resources,
)

ADDER_QASM = path.join(path.dirname(path.realpath(__file__)), "input", "adder.qasm")


@pytest.fixture
def config():
    return Configuration(load_yaml_file())


class TestBuildErrorBudget:
    """Test the resolution of the error budget."""

    def test_default(self, config):  # pylint: disable=W0621
        assert build_error_budget(config) == ErrorBudget.from_total(0.333)

    def test_total(self, config):  # pylint: disable=W0621
        assert build_error_budget(config, error_total=0.1) == ErrorBudget(0.05, 0.05, 0.0)

    def test_detailed(self, config):  # pylint: disable=W0621
        assert build_error_budget(config, error_budget=[0.2, 0.1, 0.0]) == ErrorBudget(0.2, 0.1, 0.0)

    def test_detailed_from_config(self, config):  # pylint: disable=W0621
        config.params["error_budget"]["detailed"] = [0.01, 0.02, 0.0]
        assert build_error_budget(config) == ErrorBudget(0.01, 0.02, 0.0)

    def test_both_budgets(self, config):  # pylint: disable=W0621
        with pytest.raises(ValueError):
            build_error_budget(config, error_total=0.1, error_budget=[0.05, 0.05, 0.0])

    def test_wrong_length(self, config):  # pylint: disable=W0621
        with pytest.raises(ValueError):
            build_error_budget(config, error_budget=[0.05, 0.05])


@pytest.mark.parametrize("log", [None, "INFO", "DEBUG", "warning"])
def test_estimation_pipeline_resources(tmp_path, capsys, log):
    """Estimate from listed resources and write the CSV output."""
    output_csv = tmp_path / "test.csv"
    estimates = estimation_pipeline(resources=(5, 10, 2), output_csv=str(output_csv), log=log)

    assert len(estimates) == 1
    assert estimates[0].physical_qubits == 171
    out = capsys.readouterr().out
    assert "CRE: ESTIMATION STEP3" in out
    assert "#physical qubits:    171" in out

    df = pd.read_csv(output_csv, index_col=0)
    assert list(df.index) == ["resources"]
    assert df["physical_qubits"].iloc[0] == 171


def test_estimation_pipeline_appends(tmp_path):
    output_csv = tmp_path / "test.csv"
    estimation_pipeline(resources=(5, 10, 2), output_csv=str(output_csv))
    estimation_pipeline(circ_path=ADDER_QASM, output_csv=str(output_csv))
    df = pd.read_csv(output_csv, index_col=0)
    assert list(df.index) == ["resources", "adder"]


def test_estimation_pipeline_frontier():
    estimates = estimation_pipeline(resources=(20, 500, 100), frontier=True)
    assert len(estimates) >= 1
    runtimes = [estimate.result.runtime for estimate in estimates]
    assert runtimes == sorted(runtimes, reverse=True)


def test_estimation_pipeline_elliptic_curve_from_config(config):  # pylint: disable=W0621
    config.params["elliptic_curve"]["bit_size"] = 64
    estimates = estimation_pipeline(config=config)
    assert estimates[0].result.layout_overhead.qubit_count == 9 * 64 + 18 + 4


def test_estimation_pipeline_params_path(tmp_path, config):  # pylint: disable=W0621
    config.params["error_budget"]["total"] = 0.01
    params_path = tmp_path / "params.yaml"
    with open(params_path, "w", encoding="utf8") as yaml_file:
        yaml.safe_dump(config.params, yaml_file)
    estimates = estimation_pipeline(resources=(5, 10, 2), params_path=params_path)
    assert estimates[0].result.error_budget == ErrorBudget.from_total(0.01)


class TestCommandLine:
    """Test the argh subcommands and the exit codes of `main`."""

    def test_resources_command(self, capsys):
        argh.dispatch_commands([resources, file, elliptic_curve], argv=["resources", "5", "10", "2"])
        assert "#physical qubits:    171" in capsys.readouterr().out

    def test_error_total_option(self, capsys):
        argh.dispatch_commands(
            [resources, file, elliptic_curve], argv=["resources", "5", "10", "2", "--error-total", "0.1"]
        )
        assert "#factories:" in capsys.readouterr().out

    def test_file_command(self, tmp_path):
        output_csv = tmp_path / "file.csv"
        argh.dispatch_commands(
            [resources, file, elliptic_curve], argv=["file", ADDER_QASM, "--output-csv", str(output_csv)]
        )
        df = pd.read_csv(output_csv, index_col=0)
        assert df["logical_qubits"].iloc[0] == 4 + 2 + 1

    def test_elliptic_curve_command(self, capsys):
        argh.dispatch_commands(
            [resources, file, elliptic_curve], argv=["elliptic-curve", "--bit-size", "32", "--window-size", "4"]
        )
        assert "code distance:" in capsys.readouterr().out

    def test_both_budgets_rejected(self):
        with pytest.raises(ValueError):
            argh.dispatch_commands(
                [resources, file, elliptic_curve],
                argv=["resources", "5", "10", "2", "--error-total", "0.1", "--error-budget", "0.05", "0.05", "0"],
            )

    @pytest.mark.parametrize(
        "argv, code",
        [
            (["cat-re", "resources", "5", "10", "2"], 0),
            (["cat-re", "resources", "5", "10", "2", "--error-budget", "0.1", "1e-20", "0"], -1),
            (["cat-re", "file", "missing.qasm"], 1),
        ],
    )
    def test_exit_codes(self, monkeypatch, argv, code):
        monkeypatch.setattr("sys.argv", argv)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == code
