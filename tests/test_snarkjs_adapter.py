import json
import subprocess
from pathlib import Path
import pytest

from zkbp.config import DEFAULT_CONFIG, load_config
from zkbp.integrations import snarkjs_adapter
from zkbp.integrations.snarkjs_adapter import CircuitPaths, FrontendError, compute_witness
from zkbp.integrations.engine import load_engine

def test_resolve_default_layout(tmp_path):
    paths = CircuitPaths.resolve("multiplier2", tmp_path)
    assert paths.wasm == tmp_path / "multiplier2_js" / "multiplier2.wasm"
    assert paths.r1cs == tmp_path / "multiplier2.r1cs.json"
    assert paths.input == tmp_path / "multiplier2.input.json"
    assert set(paths.missing()) == {paths.wasm, paths.r1cs, paths.input}
    assert set(paths.missing(need_wasm=False)) == {paths.r1cs, paths.input}

def test_resolve_from_config(tmp_path):
    cfg_file = tmp_path / "cfg.json"
    cfg_file.write_text(json.dumps({"circuits_dir": str(tmp_path / "c"), "r1cs_template": "{id}/{id}.json"}))
    cfg = load_config(str(cfg_file))
    assert cfg["snarkjs_bin"] == DEFAULT_CONFIG["snarkjs_bin"]
    paths = CircuitPaths.resolve("m", None, cfg)
    assert paths.r1cs == tmp_path / "c" / "m" / "m.json"

def test_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))

def test_compute_witness(tmp_path, monkeypatch):
    calls = []
    def fake_run(cmd, **kw):
        calls.append(cmd)
        if cmd[1:4] == ["wtns", "export", "json"]:
            Path(cmd[-1]).write_text(json.dumps(["1", "33", "3", "11"]))
        return subprocess.CompletedProcess(cmd, 0, "", "")
    monkeypatch.setattr(snarkjs_adapter.subprocess, "run", fake_run)
    paths = CircuitPaths.resolve("multiplier2", tmp_path)
    w = compute_witness(paths, 97, snarkjs_bin="sj", workdir=tmp_path)
    assert w == [1, 33, 3, 11]
    assert calls[0][:3] == ["sj", "wtns", "calculate"]
    assert calls[0][3:5] == [str(paths.wasm), str(paths.input)]
    assert calls[1][:4] == ["sj", "wtns", "export", "json"]

def test_compute_witness_failure(tmp_path, monkeypatch):
    def fake_run(cmd, **kw):
        return subprocess.CompletedProcess(cmd, 1, "", "bad input")
    monkeypatch.setattr(snarkjs_adapter.subprocess, "run", fake_run)
    with pytest.raises(FrontendError, match="bad input"):
        compute_witness(CircuitPaths.resolve("x", tmp_path), 97, workdir=tmp_path)

def test_missing_snarkjs(tmp_path):
    with pytest.raises(FrontendError, match="not found"):
        compute_witness(CircuitPaths.resolve("x", tmp_path), 97,
                        snarkjs_bin=str(tmp_path / "no-such-snarkjs"), workdir=tmp_path)

def test_load_engine(tmp_path, monkeypatch):
    (tmp_path / "fake_engine.py").write_text("def prove(circuit, witness):\n    return 'ok'\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    assert load_engine("fake_engine:prove")(None, None) == "ok"
    with pytest.raises(ValueError):
        load_engine("fake_engine")
    with pytest.raises(ValueError):
        load_engine("fake_engine:missing")
