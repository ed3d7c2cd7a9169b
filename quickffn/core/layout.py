"""Parameter layout for the flat weight-and-bias array."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Iterable, Tuple

from .errors import InvalidTopology

# Largest parameter count addressable by the QFN1 format (signed 32-bit).
MAX_PARAMETERS = 2**31 - 1


def _layer_size(value: object, index: int) -> int:
    if isinstance(value, bool):
        raise InvalidTopology(f"Layer {index} size must be an integer, got {value!r}")
    try:
        size = operator.index(value)
    except TypeError as exc:
        raise InvalidTopology(
            f"Layer {index} size must be an integer, got {value!r}"
        ) from exc
    if size <= 0:
        raise InvalidTopology(f"Layer {index} size must be positive, got {size}")
    return size


@dataclass(frozen=True)
class ParameterLayout:
    """Offsets and counts derived from a topology.

    Attributes
    ----------
    layer_sizes:
        Neuron count per layer (input, hidden..., output).
    weight_offsets:
        Start of each layer's weight block in the flat array.  Entry ``0`` is
        unused since the input layer has no incoming weights.
    bias_offsets:
        Start of each layer's bias block, relative to the bias region which
        begins at ``weight_count``.  Entry ``0`` is unused.
    weight_count, bias_count:
        Sizes of the two regions.
    max_hidden_width:
        Widest interior layer, ``0`` when there are no hidden layers.  Used to
        size forward-pass scratch buffers.
    """

    layer_sizes: Tuple[int, ...]
    weight_offsets: Tuple[int, ...]
    bias_offsets: Tuple[int, ...]
    weight_count: int
    bias_count: int
    max_hidden_width: int

    @classmethod
    def from_topology(cls, layer_sizes: Iterable[int]) -> "ParameterLayout":
        try:
            raw = list(layer_sizes)
        except TypeError as exc:
            raise InvalidTopology("Layer sizes must be a sequence of integers") from exc
        if len(raw) < 2:
            raise InvalidTopology("At least one input and one output layers are required.")
        sizes = tuple(_layer_size(value, idx) for idx, value in enumerate(raw))

        weight_offsets = [0]
        bias_offsets = [0]
        weight_count = 0
        bias_count = 0
        max_hidden = 0
        for idx in range(1, len(sizes)):
            weight_offsets.append(weight_count)
            weight_count += sizes[idx - 1] * sizes[idx]
            bias_offsets.append(bias_count)
            bias_count += sizes[idx]
            if weight_count + bias_count > MAX_PARAMETERS:
                raise InvalidTopology(
                    f"Topology {list(sizes)} exceeds {MAX_PARAMETERS} parameters"
                )
            if idx < len(sizes) - 1 and sizes[idx] > max_hidden:
                max_hidden = sizes[idx]

        return cls(
            layer_sizes=sizes,
            weight_offsets=tuple(weight_offsets),
            bias_offsets=tuple(bias_offsets),
            weight_count=weight_count,
            bias_count=bias_count,
            max_hidden_width=max_hidden,
        )

    @property
    def layer_count(self) -> int:
        return len(self.layer_sizes)

    @property
    def parameter_count(self) -> int:
        return self.weight_count + self.bias_count

    def weight_slice(self, layer_index: int, neuron_index: int) -> slice:
        """Slice of the flat array holding a neuron's incoming weights."""

        if layer_index == 0:
            return slice(0, 0)
        fan_in = self.layer_sizes[layer_index - 1]
        start = self.weight_offsets[layer_index] + neuron_index * fan_in
        return slice(start, start + fan_in)

    def bias_index(self, layer_index: int, neuron_index: int) -> int:
        """Absolute position of a neuron's bias in the flat array."""

        return self.weight_count + self.bias_offsets[layer_index] + neuron_index


__all__ = ["MAX_PARAMETERS", "ParameterLayout"]
