"""
Tests for the command-line interface.
"""
import io
import json

import pytest

from clinscore.cli import EXIT_FAILED, EXIT_OK, EXIT_USAGE, main

pytestmark = pytest.mark.usefixtures("reset_logging")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run from an empty directory so no local YAML or .env is picked up."""
    monkeypatch.chdir(tmp_path)
    for name in ("CLINSCORE_CONFIG", "CLINSCORE_LOG_LEVEL", "CLINSCORE_LOG_FILE",
                 "CLINSCORE_STRICT_RANGES", "CLINSCORE_AUDIT_TRACE"):
        monkeypatch.delenv(name, raising=False)


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


def test_list(capsys):
    assert main(["list"]) == EXIT_OK
    calcs = _stdout_json(capsys)
    assert len(calcs) == 77


def test_list_by_tag(capsys):
    assert main(["list", "--tag", "sepsis"]) == EXIT_OK
    assert [c["id"] for c in _stdout_json(capsys)] == ["qsofa", "sofa"]


def test_info_json(capsys):
    assert main(["info", "apgar"]) == EXIT_OK
    assert _stdout_json(capsys)["calc_id"] == "apgar"


def test_info_text(capsys):
    assert main(["info", "apgar", "--text"]) == EXIT_OK
    assert capsys.readouterr().out.startswith("Calculator: APGAR")


def test_info_unknown(capsys):
    assert main(["info", "nope"]) == EXIT_FAILED
    assert _stdout_json(capsys)["errors"][0]["error"] == "UNKNOWN_CALCULATOR"


def test_run_with_units(capsys):
    code = main(["run", "has_bled", "--var", "htn=yes", "--var", "serum_creatinine=221 umol/L",
                 "--var", "age=70"])
    assert code == EXIT_OK
    response = _stdout_json(capsys)
    assert response["outputs"]["total_score"] == 3


def test_run_failure_exit_code(capsys):
    assert main(["run", "has_bled", "--var", "age=70"]) == EXIT_FAILED
    assert _stdout_json(capsys)["errors"][0]["error"] == "MISSING_FIELD"


def test_run_json_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"e": 4, "v": 5, "m": 6})))
    assert main(["run", "gcs", "--json", "-"]) == EXIT_OK
    assert _stdout_json(capsys)["outputs"]["tier"] == "Normal"


def test_run_json_file_then_var_override(capsys, tmp_path):
    path = tmp_path / "vars.json"
    path.write_text(json.dumps({"e": 4, "v": 5, "m": 6}))
    assert main(["run", "gcs", "--json", str(path), "--var", "m=1"]) == EXIT_OK
    assert _stdout_json(capsys)["outputs"]["total_score"] == 10


def test_strict_ranges_flag(capsys):
    args = ["run", "teichholz_ef", "--var", "lvid_diastole=11", "--var", "lvid_systole=5"]
    assert main(args) == EXIT_OK
    capsys.readouterr()
    assert main(["--strict-ranges", *args]) == EXIT_FAILED


def test_bad_var_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        main(["run", "gcs", "--var", "no-equals-sign"])
    assert exc_info.value.code == EXIT_USAGE


def test_unknown_log_level_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        main(["--log-level", "CHATTY", "list"])
    assert exc_info.value.code == EXIT_USAGE


def test_logs_go_to_stderr(capsys):
    main(["--log-level", "INFO", "list"])
    captured = capsys.readouterr()
    assert "calculators registered" in captured.err
    json.loads(captured.out)
