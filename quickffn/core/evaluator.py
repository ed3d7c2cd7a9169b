"""Forward evaluation with reusable double-buffered scratch storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

from .activations import as_function
from .errors import ShapeMismatch
from .types import DTYPE, Array

if TYPE_CHECKING:  # pragma: no cover
    from .network import Network


def _weighted_sums(previous: Array, weights: Array, biases: Array, terms: Array) -> Array:
    """Per-neuron ``bias + sum(previous[j] * weights[j])`` in float32.

    ``terms`` holds the bias in column 0 followed by the individually rounded
    products; ``add.accumulate`` then sums each row strictly left to right, the
    same order as a scalar loop starting from the bias.
    """

    terms[:, 0] = biases
    np.multiply(weights, previous, out=terms[:, 1:])
    np.add.accumulate(terms, axis=1, dtype=DTYPE, out=terms)
    return terms[:, -1]


class ForwardEvaluator:
    """Evaluate a :class:`~quickffn.core.network.Network` layer by layer.

    The evaluator owns two scratch buffers sized to the widest hidden layer and
    swaps them after each layer; the output layer is written straight into the
    caller's output array.  An evaluator is not safe to share between threads;
    create one per thread instead.
    """

    def __init__(self, network: "Network") -> None:
        self.network = network
        layout = network.layout
        width = layout.max_hidden_width
        self._current = np.zeros(width, dtype=DTYPE)
        self._buffer = np.zeros(width, dtype=DTYPE)
        sizes = layout.layer_sizes
        # Shared by every layer; sliced to width * (fan_in + 1) per layer.
        self._terms = np.empty(
            max(sizes[idx] * (sizes[idx - 1] + 1) for idx in range(1, len(sizes))),
            dtype=DTYPE,
        )

    def compute(self, inputs: Sequence[float] | Array, outputs: Array | None = None) -> Array:
        """Propagate ``inputs`` through the network into ``outputs``.

        ``outputs`` is allocated when omitted; when supplied it is filled in
        place and also returned.
        """

        network = self.network
        layout = network.layout
        sizes = layout.layer_sizes
        inputs = np.asarray(inputs, dtype=DTYPE)
        if inputs.ndim != 1 or inputs.shape[0] != sizes[0]:
            raise ShapeMismatch(
                f"Number of inputs does not match: expected {sizes[0]}, got shape {inputs.shape}"
            )
        if outputs is None:
            outputs = np.empty(sizes[-1], dtype=DTYPE)
        elif (
            not isinstance(outputs, np.ndarray)
            or outputs.ndim != 1
            or outputs.shape[0] != sizes[-1]
        ):
            shape = getattr(outputs, "shape", None)
            raise ShapeMismatch(
                f"Number of outputs does not match: expected {sizes[-1]}, got shape {shape}"
            )
        elif outputs.dtype.kind != "f" or not outputs.flags.writeable:
            raise ShapeMismatch(
                f"Outputs must be a writable floating point array, got dtype {outputs.dtype}"
                f" (writeable={outputs.flags.writeable})"
            )

        params = network.parameters
        activations = network.activation_functions
        current, buffer = self._current, self._buffer
        previous: Array = inputs
        last = len(sizes) - 1

        for layer_index in range(1, len(sizes)):
            fan_in = sizes[layer_index - 1]
            width = sizes[layer_index]
            destination = outputs if layer_index == last else current
            activate = as_function(activations[layer_index - 1])

            start = layout.weight_offsets[layer_index]
            weights = params[start : start + width * fan_in].reshape(width, fan_in)
            bias_start = layout.weight_count + layout.bias_offsets[layer_index]
            biases = params[bias_start : bias_start + width]

            terms = self._terms[: width * (fan_in + 1)].reshape(width, fan_in + 1)
            sums = _weighted_sums(previous[:fan_in], weights, biases, terms)
            destination[:width] = activate(sums)

            previous = destination
            current, buffer = buffer, current

        return outputs

    def compute_batch(self, inputs: Array) -> Array:
        """Evaluate each row of a 2-D ``inputs`` array; returns ``(n, d_out)``."""

        inputs = np.asarray(inputs, dtype=DTYPE)
        sizes = self.network.layer_sizes
        if inputs.ndim != 2 or inputs.shape[1] != sizes[0]:
            raise ShapeMismatch(
                f"Batch inputs must have shape (n, {sizes[0]}), got {inputs.shape}"
            )
        outputs = np.empty((inputs.shape[0], sizes[-1]), dtype=DTYPE)
        for row in range(inputs.shape[0]):
            self.compute(inputs[row], outputs[row])
        return outputs


__all__ = ["ForwardEvaluator"]
