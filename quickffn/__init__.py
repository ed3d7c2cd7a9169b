"""QuickFFN public API."""

from .core import activations, errors, layout, mutation, types  # noqa: F401
from .core.activations import ActivationFunction
from .core.errors import (
    FormatError,
    IndexOutOfRange,
    InvalidActivationFunction,
    InvalidTopology,
    QuickFFNError,
    ShapeMismatch,
    UnexpectedEndOfInput,
    UnsupportedOperation,
)
from .core.evaluator import ForwardEvaluator
from .core.layout import ParameterLayout
from .core.mutation import (
    clamp_biases,
    clamp_weights,
    mutate_randomly,
    randomize_weights_and_biases,
)
from .core.network import Layer, Network, Neuron
from .serialization import deserialize, from_bytes, load, save, serialize, to_bytes

__version__ = "0.1.0"

__all__ = [
    "ActivationFunction",
    "FormatError",
    "ForwardEvaluator",
    "IndexOutOfRange",
    "InvalidActivationFunction",
    "InvalidTopology",
    "Layer",
    "Network",
    "Neuron",
    "ParameterLayout",
    "QuickFFNError",
    "ShapeMismatch",
    "UnexpectedEndOfInput",
    "UnsupportedOperation",
    "activations",
    "clamp_biases",
    "clamp_weights",
    "deserialize",
    "errors",
    "from_bytes",
    "layout",
    "load",
    "mutate_randomly",
    "mutation",
    "randomize_weights_and_biases",
    "save",
    "serialize",
    "to_bytes",
    "types",
]
