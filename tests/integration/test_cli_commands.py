"""Run the CLI end to end on a sample file."""

import json

from typer.testing import CliRunner

from chargefit.cli.app import app
from chargefit.io.samples import write_samples

runner = CliRunner()


def test_fit_with_config_and_log(tmp_path, cluster):
    samples = tmp_path / "hits.csv"
    write_samples(samples, *cluster)
    config = tmp_path / "chargefit.toml"
    assert runner.invoke(app, ["init", str(config)]).exit_code == 0

    log_file = tmp_path / "logs" / "run.log"
    output = tmp_path / "fit.json"
    result = runner.invoke(
        app,
        [
            "fit",
            str(samples),
            "--center-x",
            "0",
            "--center-y",
            "0",
            "--pitch",
            "1",
            "--config",
            str(config),
            "--log-file",
            str(log_file),
            "--output",
            str(output),
            "--verbose",
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert "session started" in log_file.read_text()
    document = json.loads(output.read_text())
    assert document["metadata"]["pitch"] == 1.0
    assert document["result"]["y"]["success"] is True


def test_diagonal_json(tmp_path, centered_cluster):
    samples = tmp_path / "hits.csv"
    write_samples(samples, *centered_cluster)
    output = tmp_path / "diagonal.json"
    result = runner.invoke(
        app,
        ["diagonal", str(samples), "-x", "0", "-y", "0", "-p", "1", "--no-filter"]
        + ["-o", str(output)],
    )

    assert result.exit_code == 0, result.stdout
    document = json.loads(output.read_text())
    assert document["kind"] == "diagonal"
    assert set(document["result"]) == {
        "main_x",
        "main_y",
        "secondary_x",
        "secondary_y",
        "fit_successful",
    }
