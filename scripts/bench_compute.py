from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from statistics import mean, pstdev

TOPOLOGIES = {
    "tiny": [2, 2, 1],
    "small": [8, 16, 4],
    "deep": [16, 32, 32, 32, 8],
}


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.2f} ± {sd:.2f}"


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    import numpy as np

    from quickffn import ForwardEvaluator, Network, randomize_weights_and_biases

    ap = argparse.ArgumentParser()
    ap.add_argument("--seeds", nargs="+", type=int, default=[123, 124, 125])
    ap.add_argument("--calls", type=int, default=200)
    ap.add_argument("--activation", type=str, default="sigmoid")
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for name, sizes in TOPOLOGIES.items():
        for s in args.seeds:
            rng = np.random.default_rng(s)
            network = Network(args.activation, sizes)
            randomize_weights_and_biases(network, rng)
            evaluator = ForwardEvaluator(network)
            inputs = rng.random(sizes[0], dtype=np.float32)
            outputs = np.empty(sizes[-1], dtype=np.float32)
            start = time.perf_counter()
            for _ in range(args.calls):
                evaluator.compute(inputs, outputs)
            elapsed = time.perf_counter() - start
            runs.append(
                {
                    "topology": name,
                    "seed": s,
                    "parameters": network.parameter_count,
                    "us_per_call": 1e6 * elapsed / max(args.calls, 1),
                }
            )
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    csv_path = out / "bench_compute.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["topology", "layers", "parameters", "seeds", "calls", "us_per_call_mu", "us_per_call_sd"])
        for name, sizes in TOPOLOGIES.items():
            times = [r["us_per_call"] for r in runs if r["topology"] == name]
            params = next(r["parameters"] for r in runs if r["topology"] == name)
            w.writerow(
                [
                    name,
                    "-".join(str(v) for v in sizes),
                    params,
                    len(times),
                    args.calls,
                    f"{mean(times):.2f}",
                    f"{pstdev(times) if len(times) > 1 else 0.0:.2f}",
                ]
            )

    md_path = out / "bench_compute.md"
    lines = []
    lines.append("### Forward pass micro-benchmark")
    lines.append("")
    lines.append(
        f"- Seeds: `{args.seeds}`; Calls: `{args.calls}`; Activation: `{args.activation}`"
    )
    lines.append("")
    lines.append("| Topology | Layers | Parameters | µs/call (μ±σ) |")
    lines.append("|---|---|---:|---:|")
    for name, sizes in TOPOLOGIES.items():
        times = [r["us_per_call"] for r in runs if r["topology"] == name]
        params = next(r["parameters"] for r in runs if r["topology"] == name)
        lines.append(
            f"| {name.upper()} | {'-'.join(str(v) for v in sizes)} | {params} | {_fmt_mu_sigma(times)} |"
        )
    md_path.write_text("\n".join(lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
