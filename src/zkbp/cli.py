import json
import logging
import click
from zkbp.config import DEFAULT_CONFIG, load_config
from zkbp.log import setup_basic_logger
from zkbp.core.r1cs_io import load_r1cs_json, summarize_r1cs
from zkbp.core.witness_io import load_witness_json, load_inputs_json
from zkbp.core.convert import convert, ConversionError
from zkbp.core.check import first_unsatisfied_row
from zkbp.core.circuit_io import write_circuit_json
from zkbp.integrations.snarkjs_adapter import CircuitPaths, FrontendError, compute_witness
from zkbp.integrations.engine import load_engine

log = logging.getLogger("zkbp.cli")

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose):
    """zkbp command line interface"""
    setup_basic_logger("zkbp", logging.DEBUG if verbose else logging.INFO)

def _check_witness(R, wit_vals):
    bad = first_unsatisfied_row(R, wit_vals)
    if bad is not None:
        raise click.ClickException(f"Witness does not satisfy R1CS (first failing row {bad})")

def _convert(R, wit_vals):
    try:
        circuit, witness = convert(R, wit_vals)
    except ConversionError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")
    return circuit, witness

def _report(circuit):
    return {
        "n_constraints": circuit.n_constraints,
        "n_vars": circuit.n_vars,
        "padded_n_vars": circuit.padded_n_vars,
    }

@cli.command(name="parse")
@click.option("--r1cs", type=click.Path(exists=True, dir_okay=False), required=True,
              help="Path to snarkjs-exported R1CS JSON")
def parse_cmd(r1cs):
    """Parse and summarize an R1CS JSON."""
    try:
        r = load_r1cs_json(r1cs)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps(summarize_r1cs(r), indent=2))

@cli.command(name="convert")
@click.option("--r1cs", type=click.Path(exists=True, dir_okay=False), required=True,
              help="Path to snarkjs-exported R1CS JSON")
@click.option("--witness", type=click.Path(exists=True, dir_okay=False), required=True,
              help="Witness JSON (snarkjs wtns export json)")
@click.option("--out", type=click.Path(dir_okay=False), required=False,
              help="Write the converted circuit and witness to this JSON file")
@click.option("--check/--no-check", default=True, show_default=True,
              help="Verify the witness satisfies the R1CS")
def convert_cmd(r1cs, witness, out, check):
    """Convert an R1CS + witness to a padded Bulletproofs arithmetic circuit."""
    try:
        R = load_r1cs_json(r1cs)
        wit_vals = load_witness_json(witness, R.prime)
    except ValueError as e:
        raise click.ClickException(str(e))
    # convert rejects bad indices and short witnesses before the residual runs
    circuit, bp_witness = _convert(R, wit_vals)
    if check:
        _check_witness(R, wit_vals)
    if out:
        write_circuit_json(out, circuit, bp_witness)
        log.info("wrote %s", out)
    click.echo(json.dumps(_report(circuit), indent=2))

@cli.command(name="run")
@click.argument("circuit_id")
@click.option("--circuits-dir", type=click.Path(file_okay=False), default=None,
              help="Directory holding the circuit artifacts")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="JSON config overriding the defaults")
@click.option("--witness", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Use this witness JSON instead of running snarkjs")
@click.option("--engine", "engine_spec", default=None,
              help="Proof engine callable as module:function")
@click.option("--out", type=click.Path(dir_okay=False), required=False,
              help="Write the converted circuit and witness to this JSON file")
def run_cmd(circuit_id, circuits_dir, config_path, witness, engine_spec, out):
    """Front-end, conversion and proof engine for one circuit."""
    cfg = DEFAULT_CONFIG.copy()
    try:
        if config_path:
            cfg = load_config(config_path, base=cfg)
        paths = CircuitPaths.resolve(circuit_id, circuits_dir, cfg)
        missing = paths.missing(need_wasm=witness is None)
        if missing:
            raise click.ClickException("missing circuit files: " + ", ".join(str(p) for p in missing))

        click.echo(f"[1/4] loading {paths.r1cs}")
        R = load_r1cs_json(paths.r1cs)
        inputs = load_inputs_json(paths.input)
        log.info("inputs: %s", ", ".join(f"{k}={v}" for k, v in inputs.items()))

        click.echo("[2/4] computing witness")
        if witness:
            wit_vals = load_witness_json(witness, R.prime)
        else:
            wit_vals = compute_witness(paths, R.prime, snarkjs_bin=cfg["snarkjs_bin"])

        click.echo("[3/4] converting")
        circuit, bp_witness = _convert(R, wit_vals)
        if cfg.get("check_witness", True):
            _check_witness(R, wit_vals)
        report = _report(circuit)
        click.echo(json.dumps(report, indent=2))

        click.echo("[4/4] proving")
        if engine_spec:
            engine = load_engine(engine_spec)
            try:
                result = engine(circuit, bp_witness)
            except Exception as e:
                raise click.ClickException(f"engine {engine_spec} failed: {e}")
            click.echo(f"engine result: {result!r}")
        else:
            click.echo("no engine configured, skipping")
        if out:
            write_circuit_json(out, circuit, bp_witness)
            log.info("wrote %s", out)
    except (ValueError, FileNotFoundError, FrontendError, ImportError) as e:
        raise click.ClickException(str(e))


def main():
    cli()

if __name__ == "__main__":
    main()
