"""Error taxonomy for QuickFFN."""

from __future__ import annotations


class QuickFFNError(Exception):
    """Base class for all QuickFFN errors."""


class InvalidTopology(QuickFFNError, ValueError):
    """Layer sizes do not describe a valid feedforward network."""


class IndexOutOfRange(QuickFFNError, IndexError):
    """A layer or neuron index is outside its valid range."""


class UnsupportedOperation(QuickFFNError, TypeError):
    """The input layer has no activation function and its neurons no bias."""


class ShapeMismatch(QuickFFNError, ValueError):
    """Input or output vectors do not match the network topology."""


class FormatError(QuickFFNError, ValueError):
    """Serialized data is not a QFN1 stream."""


class InvalidActivationFunction(QuickFFNError, ValueError):
    """An activation function value outside the supported set."""


class UnexpectedEndOfInput(QuickFFNError, EOFError):
    """A byte source ended before a complete network was read."""


__all__ = [
    "QuickFFNError",
    "InvalidTopology",
    "IndexOutOfRange",
    "UnsupportedOperation",
    "ShapeMismatch",
    "FormatError",
    "InvalidActivationFunction",
    "UnexpectedEndOfInput",
]
