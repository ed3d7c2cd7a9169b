"""Feedforward network with a single flat parameter array.

Weights of every layer are stored first, grouped layer by layer and neuron by
neuron, followed by the biases in the same order.  :class:`Layer` and
:class:`Neuron` are lightweight handles over that storage; they hold no data of
their own and are cheap to create on demand.
"""

from __future__ import annotations

import logging
import operator
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from .activations import ActivationFunction
from .errors import IndexOutOfRange, UnsupportedOperation
from .evaluator import ForwardEvaluator
from .layout import ParameterLayout
from .types import DTYPE, Array, NetworkSummary

logger = logging.getLogger(__name__)


def _check_index(value: int, upper: int, kind: str) -> int:
    try:
        index = operator.index(value)
    except TypeError as exc:
        raise IndexOutOfRange(f"Invalid {kind} index {value!r}.") from exc
    if index < 0 or index >= upper:
        raise IndexOutOfRange(f"Invalid {kind} index {index} (expected 0..{upper - 1}).")
    return index


class Layer:
    """View over one layer of a :class:`Network`."""

    __slots__ = ("_network", "_index")

    def __init__(self, network: "Network", index: int) -> None:
        self._network = network
        self._index = _check_index(index, network.layer_count, "layer")

    @property
    def network(self) -> "Network":
        return self._network

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_input_layer(self) -> bool:
        return self._index == 0

    @property
    def is_output_layer(self) -> bool:
        return self._index == self._network.layer_count - 1

    @property
    def neurons_count(self) -> int:
        return self._network.layout.layer_sizes[self._index]

    @property
    def activation_function(self) -> ActivationFunction:
        if self.is_input_layer:
            raise UnsupportedOperation("Input layer does not support an activation function.")
        return self._network._activations[self._index - 1]

    @activation_function.setter
    def activation_function(self, value: ActivationFunction | int | str) -> None:
        if self.is_input_layer:
            raise UnsupportedOperation("Input layer does not support an activation function.")
        self._network._activations[self._index - 1] = ActivationFunction.parse(value)

    def neuron(self, index: int) -> "Neuron":
        return Neuron(self, index)

    def neurons(self) -> Iterator["Neuron"]:
        for idx in range(self.neurons_count):
            yield Neuron(self, idx)

    def __getitem__(self, index: int) -> "Neuron":
        return Neuron(self, index)

    def __len__(self) -> int:
        return self.neurons_count

    def __iter__(self) -> Iterator["Neuron"]:
        return self.neurons()

    def __repr__(self) -> str:
        return f"Layer(index={self._index}, neurons={self.neurons_count})"


class Neuron:
    """View over one neuron: its incoming weights and its bias."""

    __slots__ = ("_layer", "_index")

    def __init__(self, layer: Layer, index: int) -> None:
        self._layer = layer
        self._index = _check_index(index, layer.neurons_count, "neuron")

    @property
    def layer(self) -> Layer:
        return self._layer

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_input_neuron(self) -> bool:
        return self._layer.is_input_layer

    @property
    def is_output_neuron(self) -> bool:
        return self._layer.is_output_layer

    @property
    def weights(self) -> Array:
        """Writable view of the incoming weights, one per previous-layer neuron.

        Empty for input neurons.  Writes go straight into the network's
        parameter array.
        """

        network = self._layer.network
        return network.parameters[network.layout.weight_slice(self._layer.index, self._index)]

    @property
    def bias(self) -> float:
        if self.is_input_neuron:
            raise UnsupportedOperation("Input neurons do not support bias.")
        network = self._layer.network
        return float(network.parameters[network.layout.bias_index(self._layer.index, self._index)])

    @bias.setter
    def bias(self, value: float) -> None:
        if self.is_input_neuron:
            raise UnsupportedOperation("Input neurons do not support bias.")
        network = self._layer.network
        network.parameters[network.layout.bias_index(self._layer.index, self._index)] = value

    def __repr__(self) -> str:
        return f"Neuron(layer={self._layer.index}, index={self._index})"


class Network:
    """Fixed-topology feedforward network.

    Parameters
    ----------
    activation_function:
        Activation assigned to every non-input layer.  Individual layers can
        be changed afterwards through :attr:`Layer.activation_function`.
    layer_sizes:
        Neuron count per layer: input, zero or more hidden layers, output.

    All weights and biases start at zero.
    """

    def __init__(
        self,
        activation_function: ActivationFunction | int | str,
        layer_sizes: Iterable[int],
    ) -> None:
        self._layout = ParameterLayout.from_topology(layer_sizes)
        activation = ActivationFunction.parse(activation_function)
        self._activations: List[ActivationFunction] = [activation] * (
            self._layout.layer_count - 1
        )
        self._parameters = np.zeros(self._layout.parameter_count, dtype=DTYPE)
        logger.debug(
            "Created network %s with %d parameters",
            list(self._layout.layer_sizes),
            self._layout.parameter_count,
        )

    # ------------------------------------------------------------------
    # Structure

    @property
    def layout(self) -> ParameterLayout:
        return self._layout

    @property
    def layer_count(self) -> int:
        return self._layout.layer_count

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        return self._layout.layer_sizes

    @property
    def activation_functions(self) -> Tuple[ActivationFunction, ...]:
        """Activation per non-input layer, indexed by ``layer_index - 1``."""

        return tuple(self._activations)

    @property
    def weight_count(self) -> int:
        return self._layout.weight_count

    @property
    def bias_count(self) -> int:
        return self._layout.bias_count

    @property
    def parameter_count(self) -> int:
        return self._layout.parameter_count

    @property
    def parameters(self) -> Array:
        """The flat ``float32`` array: all weights followed by all biases."""

        return self._parameters

    def layer(self, index: int) -> Layer:
        return Layer(self, index)

    def layers(self) -> Iterator[Layer]:
        for idx in range(self.layer_count):
            yield Layer(self, idx)

    @property
    def input_layer(self) -> Layer:
        return Layer(self, 0)

    @property
    def output_layer(self) -> Layer:
        return Layer(self, self.layer_count - 1)

    def __getitem__(self, index: int) -> Layer:
        return Layer(self, index)

    def __len__(self) -> int:
        return self.layer_count

    def __iter__(self) -> Iterator[Layer]:
        return self.layers()

    def describe(self) -> NetworkSummary:
        return NetworkSummary(
            layer_sizes=self.layer_sizes,
            activations=tuple(a.name.lower() for a in self._activations),
            weight_count=self.weight_count,
            bias_count=self.bias_count,
            parameter_count=self.parameter_count,
        )

    # ------------------------------------------------------------------
    # Evaluation and copies

    def compute(self, inputs: Sequence[float] | Array, outputs: Array | None = None) -> Array:
        """Evaluate the network once; see :meth:`ForwardEvaluator.compute`.

        Allocates fresh scratch buffers on every call.  Hot loops should keep
        their own :class:`ForwardEvaluator`.
        """

        return ForwardEvaluator(self).compute(inputs, outputs)

    def clone(self) -> "Network":
        """Return an independent copy with the same topology and values."""

        other = Network(self._activations[0], self._layout.layer_sizes)
        other._activations = list(self._activations)
        other._parameters[:] = self._parameters
        return other

    def __copy__(self) -> "Network":
        return self.clone()

    def __deepcopy__(self, memo: dict) -> "Network":
        return self.clone()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Network):
            return NotImplemented
        return (
            self.layer_sizes == other.layer_sizes
            and self._activations == other._activations
            and np.array_equal(
                self._parameters.view(np.uint32), other._parameters.view(np.uint32)
            )
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        activations = ", ".join(a.name.lower() for a in self._activations)
        return f"Network(layer_sizes={list(self.layer_sizes)}, activations=[{activations}])"


__all__ = ["Layer", "Network", "Neuron"]
