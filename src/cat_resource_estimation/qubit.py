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
**Module** ``cat_resource_estimation.qubit``

Physical model of a dissipative cat qubit.
"""

import logging
from dataclasses import dataclass

from cat_resource_estimation import Configuration

logger = logging.getLogger(__name__)

DEFAULT_K1_K2 = 1e-5


@dataclass(frozen=True)
class CatQubit:
    """A cat qubit stabilized by two-photon dissipation.

    :param k1_k2: ratio kappa_1/kappa_2 between the one-photon loss rate and the two-photon dissipation rate.
    """

    k1_k2: float = DEFAULT_K1_K2

    def __post_init__(self):
        if not self.k1_k2 > 0:
            raise ValueError(f"The loss ratio k1_k2 must be positive, got {self.k1_k2}.")

    @classmethod
    def from_config(cls, config: Configuration) -> "CatQubit":
        """Build the qubit model from the `cat_qubit` section of a configuration."""
        k1_k2 = config.k1_k2
        if k1_k2 != DEFAULT_K1_K2:
            logger.warning(
                f"The Toffoli factory catalog was precomputed for k1_k2={DEFAULT_K1_K2}; factory figures will not "
                f"reflect the configured k1_k2={k1_k2}."
            )
        return cls(k1_k2=k1_k2)
