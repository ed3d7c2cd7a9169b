"""Core primitives for QuickFFN."""

from . import activations, errors, evaluator, layout, mutation, network, types

__all__ = ["activations", "errors", "evaluator", "layout", "mutation", "network", "types"]
