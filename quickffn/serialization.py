"""QFN1 binary serialization.

Layout, little-endian, no padding::

    int32    magic number 0x46464E31 ("QFN1")
    uint16   hidden layer count (layer count = this + 2)
    uint8    activation function per non-input layer
    int32    neuron count per layer
    float32  weights then biases, in flat parameter order

``serialize`` and ``deserialize`` work on any binary file-like object; the
helpers below cover the in-memory and on-disk cases.
"""

from __future__ import annotations

import io
import logging
import struct
from pathlib import Path
from typing import BinaryIO, List

import numpy as np

from .core.activations import ActivationFunction
from .core.errors import FormatError, InvalidTopology, UnexpectedEndOfInput
from .core.layout import ParameterLayout
from .core.network import Network

logger = logging.getLogger(__name__)

MAGIC_NUMBER = 0x46464E31  # "QFN1"

_HEADER = struct.Struct("<iH")
_INT32 = struct.Struct("<i")
_FLOAT32 = np.dtype("<f4")
_MAX_HIDDEN_LAYERS = 0xFFFF
_READ_CHUNK = 1 << 20


def serialized_size(network: Network) -> int:
    """Exact number of bytes :func:`serialize` writes for ``network``."""

    return (
        _HEADER.size
        + (network.layer_count - 1)
        + network.layer_count * _INT32.size
        + network.parameter_count * _FLOAT32.itemsize
    )


def serialize(network: Network, sink: BinaryIO) -> None:
    """Write ``network`` to ``sink`` in QFN1 format."""

    hidden_layers = network.layer_count - 2
    if hidden_layers > _MAX_HIDDEN_LAYERS:
        raise InvalidTopology(
            f"{hidden_layers} hidden layers do not fit the QFN1 header (max {_MAX_HIDDEN_LAYERS})"
        )

    sink.write(_HEADER.pack(MAGIC_NUMBER, hidden_layers))
    sink.write(bytes(int(a) for a in network.activation_functions))
    sink.write(struct.pack(f"<{network.layer_count}i", *network.layer_sizes))
    sink.write(network.parameters.astype(_FLOAT32, copy=False).tobytes())
    logger.debug("Serialized network %s", list(network.layer_sizes))


def _read_exact(source: BinaryIO, size: int) -> bytes:
    chunks: List[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = source.read(min(remaining, _READ_CHUNK))
        if not chunk:
            raise UnexpectedEndOfInput(
                f"Unexpected end of input: needed {size} bytes, got {size - remaining}"
            )
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def deserialize(source: BinaryIO) -> Network:
    """Read one QFN1 network from ``source``.

    Nothing is returned unless the whole network was read successfully.
    """

    magic, hidden_layers = _HEADER.unpack(_read_exact(source, _HEADER.size))
    if magic != MAGIC_NUMBER:
        raise FormatError("Invalid data (magic number mismatch).")
    layer_count = hidden_layers + 2

    activations = [ActivationFunction.parse(b) for b in _read_exact(source, layer_count - 1)]
    layer_sizes = struct.unpack(
        f"<{layer_count}i", _read_exact(source, layer_count * _INT32.size)
    )

    layout = ParameterLayout.from_topology(layer_sizes)
    payload = _read_exact(source, layout.parameter_count * _FLOAT32.itemsize)

    # Layer 1 takes its activation from the constructor argument.
    network = Network(activations[0], layout.layer_sizes)
    for layer_index in range(2, layer_count):
        network.layer(layer_index).activation_function = activations[layer_index - 1]
    network.parameters[:] = np.frombuffer(payload, dtype=_FLOAT32)
    logger.debug("Deserialized network %s", list(layer_sizes))
    return network


def to_bytes(network: Network) -> bytes:
    buffer = io.BytesIO()
    serialize(network, buffer)
    return buffer.getvalue()


def from_bytes(data: bytes) -> Network:
    return deserialize(io.BytesIO(data))


def save(network: Network, path: str | Path) -> Path:
    """Write ``network`` to ``path``, creating parent directories."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        serialize(network, handle)
    return path


def load(path: str | Path) -> Network:
    with Path(path).open("rb") as handle:
        return deserialize(handle)


__all__ = [
    "MAGIC_NUMBER",
    "deserialize",
    "from_bytes",
    "load",
    "save",
    "serialize",
    "serialized_size",
    "to_bytes",
]
