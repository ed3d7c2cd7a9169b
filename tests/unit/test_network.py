import copy

import numpy as np
import pytest

from quickffn.core.activations import ActivationFunction
from quickffn.core.errors import (
    IndexOutOfRange,
    InvalidActivationFunction,
    InvalidTopology,
    UnsupportedOperation,
)
from quickffn.core.network import Network


def test_construction_zero_fills_parameters():
    net = Network(ActivationFunction.SIGMOID, [3, 4, 2])
    assert net.layer_count == 3
    assert net.parameters.dtype == np.float32
    assert net.parameters.shape == (3 * 4 + 4 * 2 + 4 + 2,)
    assert not net.parameters.any()
    assert net.activation_functions == (ActivationFunction.SIGMOID,) * 2


def test_construction_rejects_short_topology():
    with pytest.raises(InvalidTopology):
        Network(ActivationFunction.IDENTITY, [4])


def test_layer_views():
    net = Network("identity", [2, 3, 1])
    assert net.input_layer.is_input_layer
    assert not net.input_layer.is_output_layer
    assert net.output_layer.is_output_layer
    assert net.output_layer.index == 2
    assert net[1].neurons_count == 3
    assert len(net) == 3
    assert [layer.neurons_count for layer in net] == [2, 3, 1]
    assert len(net.layer(1)) == 3


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_layer_index_bounds(index):
    net = Network("identity", [2, 3, 1])
    with pytest.raises(IndexOutOfRange):
        net.layer(index)


def test_neuron_index_bounds():
    net = Network("identity", [2, 3, 1])
    layer = net.layer(1)
    with pytest.raises(IndexOutOfRange):
        layer.neuron(3)
    with pytest.raises(IndexOutOfRange):
        layer[-1]
    assert isinstance(IndexOutOfRange("x"), IndexError)


def test_input_layer_has_no_activation_or_bias():
    net = Network("sigmoid", [2, 1])
    with pytest.raises(UnsupportedOperation):
        net.input_layer.activation_function
    with pytest.raises(UnsupportedOperation):
        net.input_layer.activation_function = ActivationFunction.IDENTITY
    neuron = net.input_layer.neuron(0)
    assert neuron.is_input_neuron
    assert neuron.weights.shape == (0,)
    with pytest.raises(UnsupportedOperation):
        neuron.bias
    with pytest.raises(UnsupportedOperation):
        neuron.bias = 1.0


def test_activation_assignment_per_layer():
    net = Network(ActivationFunction.SIGMOID, [2, 3, 3, 1])
    net.layer(2).activation_function = "binary_threshold"
    net.output_layer.activation_function = 0
    assert net.activation_functions == (
        ActivationFunction.SIGMOID,
        ActivationFunction.BINARY_THRESHOLD,
        ActivationFunction.IDENTITY,
    )
    with pytest.raises(InvalidActivationFunction):
        net.layer(1).activation_function = 9


def test_neuron_views_alias_flat_array():
    net = Network("identity", [2, 3, 1])
    neuron = net.layer(1).neuron(2)
    weights = neuron.weights
    assert weights.shape == (2,)
    weights[:] = [1.5, -2.0]
    neuron.bias = 0.25
    assert net.parameters[4] == np.float32(1.5)
    assert net.parameters[5] == np.float32(-2.0)
    assert net.parameters[net.weight_count + 2] == np.float32(0.25)
    assert neuron.bias == 0.25

    out = net.output_layer.neuron(0)
    assert out.is_output_neuron
    out.weights[1] = 3.0
    out.bias = -1.0
    assert net.parameters[6 + 1] == np.float32(3.0)
    assert net.parameters[net.weight_count + 3] == np.float32(-1.0)


def test_bias_is_stored_in_single_precision():
    net = Network("identity", [1, 1])
    net.output_layer.neuron(0).bias = 0.1
    assert net.output_layer.neuron(0).bias == float(np.float32(0.1))


def test_clone_is_independent():
    net = Network("sigmoid", [2, 2, 1])
    net.parameters[:] = np.arange(net.parameter_count, dtype=np.float32)
    net.output_layer.activation_function = ActivationFunction.IDENTITY
    twin = net.clone()
    assert twin == net
    assert twin.parameters is not net.parameters

    twin.layer(1).neuron(0).weights[0] = 99.0
    twin.layer(1).activation_function = ActivationFunction.BINARY_THRESHOLD
    assert net.layer(1).neuron(0).weights[0] == 0.0
    assert net.layer(1).activation_function is ActivationFunction.SIGMOID

    net.output_layer.neuron(0).bias = -5.0
    assert twin.output_layer.neuron(0).bias != -5.0


def test_copy_protocol_returns_value_copies():
    net = Network("identity", [2, 1])
    net.parameters[:] = 1.0
    for duplicate in (copy.copy(net), copy.deepcopy(net)):
        assert duplicate == net
        duplicate.parameters[0] = 2.0
        assert net.parameters[0] == 1.0


def test_equality_is_bitwise():
    a = Network("identity", [1, 1])
    b = Network("identity", [1, 1])
    a.parameters[0] = np.nan
    b.parameters[0] = np.nan
    assert a == b
    b.parameters[1] = -0.0
    assert a != b
    assert a != Network("sigmoid", [1, 1])


def test_describe_summary():
    net = Network("linear_threshold", [4, 2])
    summary = net.describe()
    assert summary.layer_sizes == (4, 2)
    assert summary.activations == ("linear_threshold",)
    assert summary.to_dict()["parameter_count"] == 10
    assert "linear_threshold" in repr(net)
