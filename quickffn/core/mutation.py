"""Randomization, mutation and clamping of network parameters.

These operators work only through the :class:`~quickffn.core.network.Layer`
and :class:`~quickffn.core.network.Neuron` views.  Randomness comes from an
explicitly passed :class:`numpy.random.Generator` so that mutation sequences
are reproducible under a fixed seed.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from .network import Network
from .types import DTYPE

logger = logging.getLogger(__name__)


def _generator(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _check_range(min_value: float, max_value: float) -> None:
    if min_value > max_value:
        raise ValueError(f"min ({min_value}) must not exceed max ({max_value})")


def randomize_weights_and_biases(
    network: Network, rng: np.random.Generator | None = None
) -> None:
    """Draw every weight and bias uniformly from ``[0, 1)``.

    The range is deliberately not centred on zero.
    """

    rng = _generator(rng)
    for layer in network.layers():
        for neuron in layer.neurons():
            weights = neuron.weights
            weights[:] = rng.random(weights.shape[0], dtype=DTYPE)
            if not layer.is_input_layer:
                neuron.bias = rng.random(dtype=DTYPE)


def mutate_randomly(
    network: Network,
    strength: float,
    count: int,
    rng: np.random.Generator | None = None,
) -> None:
    """Perturb ``count`` randomly chosen parameters by up to ``±strength``.

    Each mutation picks a non-input neuron uniformly, then one of its
    ``len(weights) + 1`` slots (slot 0 is the bias), and adds a float32
    perturbation drawn uniformly from ``[-strength, strength]``.
    """

    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    rng = _generator(rng)
    strength = DTYPE(strength)

    total_neurons = 0
    for layer_index in range(1, network.layer_count):
        total_neurons += network.layer(layer_index).neurons_count

    for _ in range(count):
        target = math.floor(rng.random() * total_neurons)

        neurons_so_far = 0
        for layer_index in range(1, network.layer_count):
            layer = network.layer(layer_index)
            layer_first = neurons_so_far
            neurons_so_far += layer.neurons_count
            if neurons_so_far <= target:
                continue

            neuron = layer.neuron(target - layer_first)
            weights = neuron.weights
            slot = min(math.floor(rng.random() * (weights.shape[0] + 1)), weights.shape[0])
            delta = (DTYPE(rng.random()) * DTYPE(2.0) - DTYPE(1.0)) * strength

            if slot == 0:
                neuron.bias = DTYPE(neuron.bias) + delta
            else:
                weights[slot - 1] += delta
            break

    logger.debug("Applied %d mutations with strength %s", count, strength)


def clamp_weights(network: Network, min_value: float, max_value: float) -> None:
    """Clip every weight into ``[min_value, max_value]`` in place."""

    _check_range(min_value, max_value)
    lo = DTYPE(min_value)
    hi = DTYPE(max_value)
    for layer in network.layers():
        for neuron in layer.neurons():
            weights = neuron.weights
            np.clip(weights, lo, hi, out=weights)


def clamp_biases(network: Network, min_value: float, max_value: float) -> None:
    """Clip the bias of every non-input neuron into ``[min_value, max_value]``."""

    _check_range(min_value, max_value)
    lo = DTYPE(min_value)
    hi = DTYPE(max_value)
    for layer_index in range(1, network.layer_count):
        for neuron in network.layer(layer_index).neurons():
            neuron.bias = np.clip(DTYPE(neuron.bias), lo, hi)


__all__ = [
    "clamp_biases",
    "clamp_weights",
    "mutate_randomly",
    "randomize_weights_and_biases",
]
