import json
import sys

import numpy as np
import pytest

from cli.main import main
from quickffn import serialization


def _run(capsys, argv):
    main(argv)
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_cli_create_info_compute(tmp_path, capsys):
    path = tmp_path / "net.qfn"
    created = _run(
        capsys,
        ["create", "--layers", "2", "3", "1", "--activation", "identity", "--seed", "4", "-o", str(path)],
    )
    assert created["layer_sizes"] == [2, 3, 1]
    assert created["activations"] == ["identity", "identity"]
    assert created["bytes"] == path.stat().st_size

    info = _run(capsys, ["info", str(path)])
    assert info["parameter_count"] == 2 * 3 + 3 + 3 + 1

    result = _run(capsys, ["compute", str(path), "--inputs", "0.5", "-0.5"])
    network = serialization.load(path)
    expected = network.compute(np.array([0.5, -0.5], dtype=np.float32))
    assert result["outputs"] == [float(v) for v in expected]


def test_cli_preset_and_dump_config(tmp_path, capsys):
    path = tmp_path / "preset.qfn"
    dump = tmp_path / "resolved.json"
    _run(capsys, ["create", "--preset", "controller-deep", "-o", str(path), "--dump-config", str(dump)])
    resolved = json.loads(dump.read_text())
    assert resolved["layer_sizes"] == [8, 16, 16, 4]
    network = serialization.load(path)
    assert network.parameters[: network.weight_count].max() <= 1.0


def test_cli_config_file_override(tmp_path, capsys):
    cfg = tmp_path / "net.json"
    cfg.write_text(json.dumps({"layer_sizes": [3, 2], "activation": "binary_threshold", "randomize": False}))
    path = tmp_path / "cfg.qfn"
    created = _run(capsys, ["create", "--config", str(cfg), "-o", str(path)])
    assert created["activations"] == ["binary_threshold"]
    assert not serialization.load(path).parameters.any()


def test_cli_mutate_is_seeded(tmp_path, capsys):
    base = tmp_path / "base.qfn"
    _run(capsys, ["create", "--layers", "2", "2", "--seed", "0", "-o", str(base)])
    outputs = []
    for name in ("a.qfn", "b.qfn"):
        out = tmp_path / name
        _run(
            capsys,
            [
                "mutate", str(base), "--strength", "0.5", "--count", "3", "--seed", "9",
                "--clamp-weights", "0", "1", "-o", str(out),
            ],
        )
        outputs.append(serialization.load(out))
    assert outputs[0] == outputs[1]
    assert outputs[0] != serialization.load(base)


def test_cli_errors_exit_cleanly(tmp_path, capsys):
    bogus = tmp_path / "bogus.qfn"
    bogus.write_bytes(b"not a network")
    with pytest.raises(SystemExit, match="magic number"):
        main(["info", str(bogus)])
    with pytest.raises(SystemExit, match="layer_sizes"):
        main(["create", "-o", str(tmp_path / "x.qfn")])


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--list-presets"])
    assert exc.value.code == 0
    assert "xor-threshold" in capsys.readouterr().out.split()


def test_cli_bad_log_level_exits_cleanly(tmp_path):
    with pytest.raises(SystemExit, match="log level"):
        main(["--log-level", "chatty", "info", str(tmp_path / "net.qfn")])


def test_cli_yaml_without_pyyaml_exits_cleanly(tmp_path, monkeypatch):
    cfg = tmp_path / "net.yaml"
    cfg.write_text("layer_sizes: [2, 1]\n")
    monkeypatch.setitem(sys.modules, "yaml", None)
    with pytest.raises(SystemExit, match="PyYAML"):
        main(["create", "--config", str(cfg), "-o", str(tmp_path / "x.qfn")])
