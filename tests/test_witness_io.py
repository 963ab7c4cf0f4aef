import json
import pytest

from zkbp.core.witness_io import load_witness_json, load_inputs_json, assemble_full_z

def test_snarkjs_array(tmp_path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps(["1", "0x10", 5, "-1"]))
    assert load_witness_json(p, 97) == [1, 16, 5, 96]

def test_wrapped_values(tmp_path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps({"values": ["1", "2"]}))
    assert load_witness_json(p, 97) == [1, 2]

def test_rejects_non_array(tmp_path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps({"values": "1,2"}))
    with pytest.raises(ValueError):
        load_witness_json(p, 97)

def test_named_inputs(tmp_path):
    p = tmp_path / "in.json"
    p.write_text(json.dumps({"a": 3, "b": ["11", "0x2"], "m": [[1, 2], [3, 4]]}))
    assert load_inputs_json(p) == {"a": [3], "b": [11, 2], "m": [1, 2, 3, 4]}

def test_named_inputs_non_numeric(tmp_path):
    p = tmp_path / "in.json"
    p.write_text(json.dumps({"a": "three"}))
    with pytest.raises(ValueError):
        load_inputs_json(p)

def test_assemble_with_map():
    z = assemble_full_z([10, 20, 30], [2, 0, 1], 3, 97)
    assert list(z) == [30, 10, 20]

def test_assemble_map_out_of_range_and_short():
    z = assemble_full_z([10, 20], [1, 7], 3, 97)
    assert list(z) == [20, 0, 0]
