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

"""Unit tests for cat_resource_estimation/__init__.py."""

from pathlib import Path

import pytest
import yaml

import cat_resource_estimation
from cat_resource_estimation import Configuration, load_yaml_file, write_to_yaml


@pytest.fixture
def example_params():
    """Create an example params dictionary for use in testing."""
    params = {
        "cat_qubit": {"k1_k2": 2.0e-5},
        "error_budget": {"total": 0.1, "detailed": [0.05, 0.04, 0.0]},
        "elliptic_curve": {"bit_size": 128, "window_size": 16},
    }
    return params


@pytest.fixture
def example_yaml_path(example_params, tmp_path):  # pylint: disable=W0621
    """Create temporary directory for test files."""
    temporary_dir = tmp_path
    temporary_dir.mkdir(exist_ok=True)
    example_yaml = temporary_dir / "example.yaml"
    with open(example_yaml, "w", encoding="utf8") as yaml_file:
        yaml.safe_dump(example_params, yaml_file)
    return example_yaml


class TestConfiguration:
    """Test the Configuration class."""

    @staticmethod
    def compare_and_assert_equal(config: Configuration, params: dict) -> None:
        """Test the passed Configuration instance against its params.

        :param config: Configuration instance to test.
        :param params: true values of the parameters to compare against.
        """
        assert config.k1_k2 == params["cat_qubit"]["k1_k2"]
        assert config.error_total == params["error_budget"]["total"]
        assert config.error_budget == params["error_budget"]["detailed"]
        assert config.elliptic_curve_params == params["elliptic_curve"]

    def test_init_with_dict(self, example_params) -> None:  # pylint: disable=W0621
        """Test Configuration instantiation via passed dictionary."""
        config = Configuration(example_params)
        self.compare_and_assert_equal(config, example_params)

    def test_init_from_yaml(self, example_params, example_yaml_path) -> None:  # pylint: disable=W0621
        """Test Configuration instantiation via a YAML file."""
        config = Configuration(load_yaml_file(example_yaml_path))
        self.compare_and_assert_equal(config, example_params)

    def test_missing_detailed_budget(self, example_params) -> None:  # pylint: disable=W0621
        """A budget without a detailed split falls back to the overall one."""
        del example_params["error_budget"]["detailed"]
        config = Configuration(example_params)
        assert config.error_budget is None
        assert config.error_total == 0.1


def test_default_params():
    """The packaged params.yaml holds the architecture defaults."""
    config = Configuration(load_yaml_file())
    assert config.k1_k2 == 1.0e-5
    assert config.error_total == 0.333
    assert config.error_budget is None
    assert config.elliptic_curve_params == {"bit_size": 256, "window_size": 18}


def test_write_to_yaml_round_trip(example_params, tmp_path):  # pylint: disable=W0621
    """Writing then loading a params dict gives the same dict."""
    filepath = tmp_path / "written.yaml"
    write_to_yaml(example_params, filepath)
    assert load_yaml_file(filepath) == example_params


@pytest.mark.parametrize("module_path", sorted(Path(cat_resource_estimation.__file__).parent.glob("*.py")))
def test_license_header(module_path):
    """Every module carries the project's Apache-2.0 header."""
    lines = module_path.read_text(encoding="utf8").splitlines()
    assert lines[0] == "# Copyright 2025 The cat-resource-estimation Authors"
    assert "#     http://www.apache.org/licenses/LICENSE-2.0" in lines[:11]
