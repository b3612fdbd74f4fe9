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
The root of the `cat_resource_estimation` (CRE) package, which provides framework foundations and is accessible to
all layers.

CRE estimates the physical resources (cat qubits, runtime, failure probability) required to run a logical algorithm on
a cat-qubit processor protected by a repetition code, with Toffoli magic states supplied by precomputed factories, as
described in [1].

[1] Élie Gouzien et al., Performance analysis of a repetition cat code architecture: computing 256-bit elliptic curve
logarithm in 9 hours with 126 133 cat qubits, arXiv:2302.06639 (2023).
"""

import logging
from importlib.metadata import version
from os import path
from typing import Union, Optional, Dict, Any, List
from pathlib import Path

import yaml

__version__ = version("cat-resource-estimation")


PARAMS_YAML_FILENAME = "params.yaml"

logger = logging.getLogger(__name__)


def load_yaml_file(filepath: Optional[Union[str, Path]] = None) -> dict:
    """Read a YAML file and parse it into a dict.

    :param filepath: path to the .yaml file. If None, the `params.yaml` shipped with the package is read.

    :returns: A dict version of the YAML input.
    """
    if filepath is None:
        filepath = path.join(path.dirname(path.realpath(__file__)), PARAMS_YAML_FILENAME)

    with open(filepath, "r", encoding="utf8") as yaml_stream:
        parsed_yaml = yaml.safe_load(yaml_stream)

    return parsed_yaml


def write_to_yaml(dict_for_yaml: Dict[str, Any], filepath: Union[str, Path]) -> None:
    """Write dict to a .yaml file.

    :param dict_for_yaml: dictionary to write to YAML.
    :param filepath: location to write the .yaml file to.
    """
    with open(filepath, "w", encoding="utf8") as yaml_file:
        yaml.safe_dump(dict_for_yaml, yaml_file)


class Configuration:
    """Class that holds the architectural and budget configurations as well as convenience methods for accessing them."""

    def __init__(self, params: Dict[str, Any]) -> None:
        """
        Store parameters from the passed params dict.

        :param params: dictionary of parameters for use in resource estimation.
        """
        self.params = params

    @property
    def k1_k2(self) -> float:
        """Return the one-photon to two-photon loss ratio of the cat qubits set in the params dict."""
        return self.params["cat_qubit"]["k1_k2"]

    @property
    def error_total(self) -> float:
        """Return the overall error budget, split evenly between topological and magic state errors."""
        return self.params["error_budget"]["total"]

    @property
    def error_budget(self) -> Optional[List[float]]:
        """Return the detailed (topological, magic state, rotation) error budget, if one is set in the params dict."""
        return self.params["error_budget"].get("detailed")

    @property
    def elliptic_curve_params(self) -> Dict[str, int]:
        """Return the default key and window sizes for the elliptic curve discrete logarithm counts."""
        return self.params["elliptic_curve"]
