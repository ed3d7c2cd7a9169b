"""Command line entry point for QuickFFN networks."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

import numpy as np

from quickffn import config as net_config
from quickffn import serialization
from quickffn.core.errors import QuickFFNError
from quickffn.core.mutation import clamp_biases, clamp_weights, mutate_randomly
from quickffn.logging_utils import configure_logging

logger = logging.getLogger("quickffn.cli")


def _summary(network, path: Path | None = None) -> dict:
    payload = network.describe().to_dict()
    payload["bytes"] = serialization.serialized_size(network)
    if path is not None:
        payload["path"] = str(path)
    return payload


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--log-level",
        help="Logging level (defaults to $QUICKFFN_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    sub = parser.add_subparsers(dest="command")

    create = sub.add_parser("create", help="Build a network and save it")
    source = create.add_mutually_exclusive_group()
    source.add_argument(
        "--preset",
        choices=sorted(net_config.presets().keys()),
        help="Preset configuration to build",
    )
    source.add_argument("--layers", type=int, nargs="+", help="Neuron count per layer")
    create.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    create.add_argument("--activation", help="Activation for every non-input layer")
    create.add_argument("--seed", type=int, help="Seed for parameter randomization")
    create.add_argument(
        "--randomize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Draw initial weights and biases from [0, 1)",
    )
    create.add_argument("-o", "--output", type=Path, required=True, help="Output file")
    create.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )

    info = sub.add_parser("info", help="Print a JSON summary of a saved network")
    info.add_argument("path", type=Path)

    compute = sub.add_parser("compute", help="Evaluate a saved network")
    compute.add_argument("path", type=Path)
    compute.add_argument("--inputs", type=float, nargs="+", required=True)

    mutate = sub.add_parser("mutate", help="Randomly mutate a saved network")
    mutate.add_argument("path", type=Path)
    mutate.add_argument("--strength", type=float, required=True)
    mutate.add_argument("--count", type=int, default=1)
    mutate.add_argument("--seed", type=int, help="Seed for the mutation draws")
    mutate.add_argument("--clamp-weights", type=float, nargs=2, metavar=("MIN", "MAX"))
    mutate.add_argument("--clamp-biases", type=float, nargs=2, metavar=("MIN", "MAX"))
    mutate.add_argument(
        "-o", "--output", type=Path, help="Output file (defaults to overwriting PATH)"
    )

    return parser.parse_args(argv)


def _resolve_create_config(args: argparse.Namespace) -> dict:
    if args.preset:
        config = net_config.load_preset(args.preset)
    elif args.layers:
        config = {"layer_sizes": list(args.layers)}
    else:
        config = {}

    if args.config:
        config = net_config.merge(config, net_config.load_config(args.config))
    if args.activation:
        config["activation"] = args.activation
        config.pop("activations", None)
    if args.seed is not None:
        config["seed"] = int(args.seed)
    if args.randomize is not None:
        config["randomize"] = bool(args.randomize)
    return config


def _create(args: argparse.Namespace) -> dict:
    config = net_config.NetworkConfig.from_mapping(_resolve_create_config(args))
    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config.to_dict(), indent=2))
    network = net_config.build_network(config)
    path = serialization.save(network, args.output)
    logger.info("Wrote %s", path)
    return _summary(network, path)


def _compute(args: argparse.Namespace) -> dict:
    network = serialization.load(args.path)
    outputs = network.compute(np.asarray(args.inputs, dtype=np.float32))
    return {"inputs": list(args.inputs), "outputs": [float(v) for v in outputs]}


def _mutate(args: argparse.Namespace) -> dict:
    network = serialization.load(args.path)
    rng = np.random.default_rng(args.seed)
    mutate_randomly(network, args.strength, args.count, rng)
    if args.clamp_weights:
        clamp_weights(network, *args.clamp_weights)
    if args.clamp_biases:
        clamp_biases(network, *args.clamp_biases)
    path = serialization.save(network, args.output or args.path)
    logger.info("Applied %d mutations, wrote %s", args.count, path)
    return _summary(network, path)


_COMMANDS = {
    "create": _create,
    "info": lambda args: _summary(serialization.load(args.path), args.path),
    "compute": _compute,
    "mutate": _mutate,
}


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc

    if args.list_presets:
        for name in sorted(net_config.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.command is None:
        raise SystemExit("A command is required: create, info, compute or mutate")

    try:
        result = _COMMANDS[args.command](args)
    except (QuickFFNError, KeyError, ValueError, OSError, RuntimeError) as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(json.dumps(result, sort_keys=True))


if __name__ == "__main__":
    main()
