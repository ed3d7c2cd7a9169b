"""Network configuration files and presets."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from .core.activations import ActivationFunction
from .core.layout import ParameterLayout
from .core.mutation import clamp_biases, clamp_weights, randomize_weights_and_biases
from .core.network import Network

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-threshold": {
        "layer_sizes": [2, 2, 1],
        "activation": "binary_threshold",
        "seed": 0,
        "randomize": True,
    },
    "sigmoid-small": {
        "layer_sizes": [4, 8, 2],
        "activation": "sigmoid",
        "seed": 7,
        "randomize": True,
    },
    "controller-deep": {
        "layer_sizes": [8, 16, 16, 4],
        "activation": "linear_threshold",
        "activations": ["linear_threshold", "linear_threshold", "identity"],
        "seed": 42,
        "randomize": True,
        "weight_range": [-1.0, 1.0],
        "bias_range": [-1.0, 1.0],
    },
    "linear-probe": {
        "layer_sizes": [3, 1],
        "activation": "identity",
        "seed": 0,
        "randomize": False,
    },
}


def presets() -> Dict[str, Mapping[str, object]]:
    return deepcopy(_PRESETS)


def load_preset(name: str) -> Dict[str, object]:
    if name not in _PRESETS:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}")
    return deepcopy(dict(_PRESETS[name]))


def _pair(value: object, key: str) -> Tuple[float, float] | None:
    if value is None:
        return None
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != 2:
        raise ValueError(f"{key} must be a [min, max] pair")
    lo, hi = float(value[0]), float(value[1])
    if lo > hi:
        raise ValueError(f"{key} min ({lo}) must not exceed max ({hi})")
    return lo, hi


@dataclass(frozen=True)
class NetworkConfig:
    """Resolved description of a network to build."""

    layer_sizes: Tuple[int, ...]
    activation: str = "sigmoid"
    activations: Tuple[str, ...] | None = None
    seed: int | None = None
    randomize: bool = True
    weight_range: Tuple[float, float] | None = None
    bias_range: Tuple[float, float] | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "NetworkConfig":
        if "layer_sizes" not in raw:
            raise ValueError("Network config missing required key: layer_sizes")
        unknown = set(raw) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown network config keys: {sorted(unknown)}")
        activations = raw.get("activations")
        seed = raw.get("seed")
        return cls(
            layer_sizes=ParameterLayout.from_topology(raw["layer_sizes"]).layer_sizes,  # type: ignore[arg-type]
            activation=str(raw.get("activation", "sigmoid")),
            activations=tuple(str(a) for a in activations) if activations is not None else None,  # type: ignore[union-attr]
            seed=int(seed) if seed is not None else None,  # type: ignore[arg-type]
            randomize=bool(raw.get("randomize", True)),
            weight_range=_pair(raw.get("weight_range"), "weight_range"),
            bias_range=_pair(raw.get("bias_range"), "bias_range"),
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "layer_sizes": list(self.layer_sizes),
            "activation": self.activation,
            "randomize": self.randomize,
        }
        if self.activations is not None:
            payload["activations"] = list(self.activations)
        if self.seed is not None:
            payload["seed"] = self.seed
        if self.weight_range is not None:
            payload["weight_range"] = list(self.weight_range)
        if self.bias_range is not None:
            payload["bias_range"] = list(self.bias_range)
        return payload


def load_config(path: str | Path) -> Dict[str, object]:
    """Read a JSON config, or YAML when PyYAML is installed."""

    path = Path(path)
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        loaded = yaml.safe_load(text)
    else:
        loaded = json.loads(text)
    if not isinstance(loaded, dict):
        raise ValueError(f"Config {path} must contain a mapping")
    return loaded


def merge(base: dict, override: Mapping[str, object]) -> dict:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_network(config: NetworkConfig | Mapping[str, object]) -> Network:
    """Construct, optionally randomize and clamp a network from ``config``."""

    if not isinstance(config, NetworkConfig):
        config = NetworkConfig.from_mapping(config)

    network = Network(ActivationFunction.parse(config.activation), config.layer_sizes)
    if config.activations is not None:
        names: List[str] = list(config.activations)
        if len(names) != network.layer_count - 1:
            raise ValueError(
                f"activations must list {network.layer_count - 1} entries, got {len(names)}"
            )
        for layer_index, name in enumerate(names, start=1):
            network.layer(layer_index).activation_function = name

    if config.randomize:
        randomize_weights_and_biases(network, np.random.default_rng(config.seed))
    if config.weight_range is not None:
        clamp_weights(network, *config.weight_range)
    if config.bias_range is not None:
        clamp_biases(network, *config.bias_range)
    return network


__all__ = [
    "NetworkConfig",
    "build_network",
    "load_config",
    "load_preset",
    "merge",
    "presets",
]
