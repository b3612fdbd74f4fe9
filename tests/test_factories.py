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

"""Unit tests for the `factories` module of cat-resource-estimation."""

import pytest

from cat_resource_estimation.code import CodeParameter, RepetitionCode
from cat_resource_estimation.factories import TOFFOLI_FACTORY_TABLE, ToffoliBuilder, ToffoliFactory
from cat_resource_estimation.qubit import CatQubit


@pytest.fixture
def builder():
    return ToffoliBuilder()


def find(builder, output_error_rate):  # pylint: disable=W0621
    """Call `find_factories` with the processor arguments the table ignores."""
    return builder.find_factories(RepetitionCode(), CatQubit(), 0, output_error_rate, CodeParameter(9, 10.0))


class TestToffoliFactory:
    """Test the derived quantities of a factory."""

    def test_physical_qubits(self):
        assert TOFFOLI_FACTORY_TABLE[0].physical_qubits() == 5 * 5
        assert TOFFOLI_FACTORY_TABLE[-1].physical_qubits() == 5 * 45

    def test_duration(self):
        # 89.2 * 100 ns / 3.75 * 23 steps / 0.84 acceptance = 65130.16 ns
        assert TOFFOLI_FACTORY_TABLE[0].duration() == 65130

    def test_normalized_volume(self):
        factory = TOFFOLI_FACTORY_TABLE[0]
        assert factory.normalized_volume() == 25 * 65130
        assert factory.num_output_states() == 1

    def test_ordered_by_volume(self):
        small, large = TOFFOLI_FACTORY_TABLE[0], TOFFOLI_FACTORY_TABLE[-1]
        assert small < large
        assert large > small
        assert small <= small
        assert max(TOFFOLI_FACTORY_TABLE) == large

    def test_str(self):
        assert str(ToffoliFactory(7, 9.71, 6.14e-8, 0.148, 73)) == "7 (|ɑ|² = 9.71)"


class TestToffoliBuilder:
    """Test the selection of factories."""

    def test_catalog(self, builder):  # pylint: disable=W0621
        assert len(builder.factories) == 15
        assert builder.lowest_error_probability == 3.74e-14
        assert builder.num_magic_state_types() == 1

    def test_loose_target_returns_whole_catalog(self, builder):  # pylint: disable=W0621
        factories = find(builder, 1.0)
        assert len(factories) == 15
        assert factories[0] == TOFFOLI_FACTORY_TABLE[0]

    @pytest.mark.parametrize("target", [1e-3, 1e-6, 5.13e-10, 1e-12])
    def test_sorted_and_within_target(self, builder, target):  # pylint: disable=W0621
        factories = find(builder, target)
        assert factories
        assert all(factory.error_probability <= target for factory in factories)
        volumes = [factory.normalized_volume() for factory in factories]
        assert volumes == sorted(volumes)
        expected = {factory for factory in TOFFOLI_FACTORY_TABLE if factory.error_probability <= target}
        assert set(factories) == expected

    def test_target_equal_to_minimum_is_accepted(self, builder):  # pylint: disable=W0621
        factories = find(builder, builder.lowest_error_probability)
        assert factories == [TOFFOLI_FACTORY_TABLE[-1]]

    def test_target_below_minimum_is_fatal(self, builder):  # pylint: disable=W0621
        with pytest.raises(AssertionError, match="Requested error probability is too low"):
            find(builder, 1e-14)

    def test_deterministic(self, builder):  # pylint: disable=W0621
        assert find(builder, 1e-8) == find(builder, 1e-8)
