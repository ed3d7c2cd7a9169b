"""Core typing contracts for QuickFFN."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np

Array = np.ndarray

DTYPE = np.float32


@dataclass(frozen=True)
class NetworkSummary:
    """Description of a network's structure, without its parameters."""

    layer_sizes: Tuple[int, ...]
    activations: Tuple[str, ...]
    weight_count: int
    bias_count: int
    parameter_count: int

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["layer_sizes"] = list(self.layer_sizes)
        payload["activations"] = list(self.activations)
        return payload
