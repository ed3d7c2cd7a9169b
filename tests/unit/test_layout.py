import pytest

from quickffn.core.errors import InvalidTopology
from quickffn.core.layout import MAX_PARAMETERS, ParameterLayout


def test_offsets_and_counts():
    layout = ParameterLayout.from_topology([3, 4, 2])
    assert layout.layer_sizes == (3, 4, 2)
    assert layout.weight_count == 3 * 4 + 4 * 2
    assert layout.bias_count == 4 + 2
    assert layout.parameter_count == 26
    assert layout.weight_offsets == (0, 0, 12)
    assert layout.bias_offsets == (0, 0, 4)
    assert layout.max_hidden_width == 4


def test_max_hidden_width_ignores_input_and_output():
    assert ParameterLayout.from_topology([10, 1]).max_hidden_width == 0
    assert ParameterLayout.from_topology([2, 5, 7, 1]).max_hidden_width == 7
    assert ParameterLayout.from_topology([50, 3, 2, 40]).max_hidden_width == 3


def test_weight_slice_and_bias_index():
    layout = ParameterLayout.from_topology([2, 3, 1])
    assert layout.weight_slice(0, 1) == slice(0, 0)
    assert layout.weight_slice(1, 2) == slice(4, 6)
    assert layout.weight_slice(2, 0) == slice(6, 9)
    assert layout.bias_index(1, 0) == 9
    assert layout.bias_index(2, 0) == 12


@pytest.mark.parametrize("sizes", [[], [3], [3, 0], [2, -1, 1], [2.5, 1], [True, 1], None])
def test_invalid_topologies(sizes):
    with pytest.raises(InvalidTopology):
        ParameterLayout.from_topology(sizes)


def test_parameter_overflow_is_rejected():
    with pytest.raises(InvalidTopology):
        ParameterLayout.from_topology([2**16, 2**16])
    assert MAX_PARAMETERS == 2**31 - 1
