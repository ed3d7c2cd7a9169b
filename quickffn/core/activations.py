"""Activation functions for QuickFFN.

The set is closed: every network layer stores one :class:`ActivationFunction`
value and the forward pass resolves it to a scalar function through a single
lookup table.  All functions accept float32 scalars or arrays and return
float32 results.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict

import numpy as np

from .errors import InvalidActivationFunction
from .types import DTYPE, Array

ActivationFn = Callable[[Array], Array]

_ZERO = DTYPE(0.0)
_ONE = DTYPE(1.0)


class ActivationFunction(IntEnum):
    """Scalar nonlinearities; the integer values are the serialized bytes."""

    IDENTITY = 0
    BINARY_THRESHOLD = 1
    LINEAR_THRESHOLD = 2
    SIGMOID = 3

    @classmethod
    def parse(cls, value: "ActivationFunction | int | str") -> "ActivationFunction":
        """Resolve an enum member, its integer value or a case-insensitive name."""

        if isinstance(value, cls):
            return value
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError as exc:
                raise InvalidActivationFunction(
                    f"Invalid activation function {int(value)!r}"
                ) from exc
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_")
            if key in _ALIASES:
                return _ALIASES[key]
            if key in cls.__members__:
                return cls.__members__[key]
            available = ", ".join(sorted(m.name.lower() for m in cls))
            raise InvalidActivationFunction(
                f"Unknown activation function {value!r}. Available: {available}"
            )
        raise InvalidActivationFunction(f"Invalid activation function {value!r}")


_ALIASES: Dict[str, ActivationFunction] = {
    "NONE": ActivationFunction.IDENTITY,
    "LINEAR": ActivationFunction.IDENTITY,
}


def identity(v: Array) -> Array:
    return np.asarray(v, dtype=DTYPE)


def binary_threshold(v: Array) -> Array:
    return np.where(np.asarray(v, dtype=DTYPE) >= _ZERO, _ONE, _ZERO)


def linear_threshold(v: Array) -> Array:
    """Saturating ramp: 0 below zero, 1 above one, ``v`` in between."""

    v = np.asarray(v, dtype=DTYPE)
    return np.where(v <= _ZERO, _ZERO, np.where(v >= _ONE, _ONE, v))


def sigmoid(v: Array) -> Array:
    """Logistic function evaluated in single precision."""

    v = np.asarray(v, dtype=DTYPE)
    with np.errstate(over="ignore"):
        return _ONE / (_ONE + np.exp(-v))


_FUNCTIONS: Dict[ActivationFunction, ActivationFn] = {
    ActivationFunction.IDENTITY: identity,
    ActivationFunction.BINARY_THRESHOLD: binary_threshold,
    ActivationFunction.LINEAR_THRESHOLD: linear_threshold,
    ActivationFunction.SIGMOID: sigmoid,
}


def as_function(value: ActivationFunction | int) -> ActivationFn:
    """Return the scalar function for ``value``."""

    try:
        return _FUNCTIONS[ActivationFunction(value)]
    except (ValueError, KeyError) as exc:
        raise InvalidActivationFunction(
            f"Invalid activation function {value!r}"
        ) from exc


__all__ = [
    "ActivationFn",
    "ActivationFunction",
    "as_function",
    "binary_threshold",
    "identity",
    "linear_threshold",
    "sigmoid",
]
