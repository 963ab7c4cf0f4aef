import json
import numpy as np
import pytest

from zkbp.core.r1cs_io import load_r1cs_json, r1cs_from_obj
from zkbp.core.witness_io import assemble_full_z
from zkbp.core.check import r1cs_residual, first_unsatisfied_row, circuit_residual
from zkbp.core.convert import convert, InvalidConstraint

def test_add_residual(tmp_path):
    # tiny add in snarkjs dict form: 0 = a + b - c
    obj = {
        "prime": str(21888242871839275222246405745257275088548364400416034343698204186575808495617),
        "nVars": 4,
        "nOutputs": 1,
        "nPubInputs": 0,
        "nPrvInputs": 2,
        "nConstraints": 1,
        "constraints": [
            [ {}, {}, {"1":"-1","2":"1","3":"1"} ]
        ],
        "map": [0,1,2,3]
    }
    r1 = tmp_path / "add.r1cs.json"
    r1.write_text(json.dumps(obj))
    R = load_r1cs_json(str(r1))

    # witness ["1","8","3","5"] -> c=8, a=3, b=5
    z = assemble_full_z([1, 8, 3, 5], R.var_map, R.n_vars, R.prime)
    assert list(r1cs_residual(R, z)) == [0]
    assert first_unsatisfied_row(R, [1, 8, 3, 5]) is None
    assert first_unsatisfied_row(R, [1, 9, 3, 5]) == 0

def test_converted_pair_holds(tmp_path):
    obj = {"prime": "97", "nVars": 5,
           "constraints": [[{"1": 1}, {"2": 1}, {"3": 1}], [{"3": 1}, {"3": 1}, {"4": 1}]]}
    r1 = tmp_path / "sq.r1cs.json"
    r1.write_text(json.dumps(obj))
    R = load_r1cs_json(r1)
    w = [1, 3, 4, 12, 144 % 97]
    assert first_unsatisfied_row(R, w) is None
    circuit, wit = convert(R, w)
    res = circuit_residual(circuit, wit)
    assert res.shape == (2,)
    assert not np.any(res != 0)

@pytest.mark.parametrize("bad_row", [{"3": "1"}, {"-1": "1"}])
def test_residual_rejects_bad_index(bad_row):
    R = r1cs_from_obj({"prime": "97", "nVars": 2, "constraints": [[bad_row, {"0": "1"}, {}]]})
    with pytest.raises(InvalidConstraint):
        first_unsatisfied_row(R, [1, 0])
