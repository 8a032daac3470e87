"""
Tests for configuration loading and logging setup.
"""
import logging

import pytest

from clinscore.config import DEFAULTS, get_config
from clinscore.logging_setup import StructuredFormatter, setup_logging


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("CLINSCORE_CONFIG", "CLINSCORE_LOG_LEVEL", "CLINSCORE_LOG_FILE",
                 "CLINSCORE_STRICT_RANGES", "CLINSCORE_AUDIT_TRACE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert get_config() == DEFAULTS


def test_yaml_in_working_directory(tmp_path):
    (tmp_path / "clinscore.yaml").write_text("strict_ranges: true\nlog_level: DEBUG\nunknown_key: 1\n")
    cfg = get_config()
    assert cfg["strict_ranges"] is True
    assert cfg["log_level"] == "DEBUG"
    assert "unknown_key" not in cfg


def test_explicit_path(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("include_audit_trace: false\n")
    assert get_config(path)["include_audit_trace"] is False


def test_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "elsewhere.yaml"
    path.write_text("log_level: WARNING\n")
    monkeypatch.setenv("CLINSCORE_CONFIG", str(path))
    assert get_config()["log_level"] == "WARNING"


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    (tmp_path / "clinscore.yaml").write_text("strict_ranges: true\n")
    monkeypatch.setenv("CLINSCORE_STRICT_RANGES", "0")
    monkeypatch.setenv("CLINSCORE_LOG_LEVEL", "ERROR")
    cfg = get_config()
    assert cfg["strict_ranges"] is False
    assert cfg["log_level"] == "ERROR"


def test_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("CLINSCORE_AUDIT_TRACE=no\n")
    # load_dotenv writes into os.environ; registering the key restores it afterwards
    monkeypatch.setenv("CLINSCORE_AUDIT_TRACE", "")
    monkeypatch.delenv("CLINSCORE_AUDIT_TRACE")
    assert get_config()["include_audit_trace"] is False


def test_non_mapping_yaml_rejected(tmp_path):
    (tmp_path / "clinscore.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        get_config()


class TestLogging:
    pytestmark = pytest.mark.usefixtures("reset_logging")

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("CHATTY")

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "clinscore.log"
        setup_logging("DEBUG", str(log_file))
        logging.getLogger("clinscore.test").debug("hello from the test")
        for handler in logging.getLogger("clinscore").handlers:
            handler.flush()
        assert "hello from the test" in log_file.read_text()

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging("INFO")
        setup_logging("INFO")
        assert len(logging.getLogger("clinscore").handlers) == 1

    def test_formatter_without_colour(self):
        record = logging.LogRecord("clinscore.x", logging.WARNING, __file__, 1, "careful", None, None)
        line = StructuredFormatter(use_color=False).format(record)
        assert "WARNING" in line
        assert "[clinscore.x] careful" in line
        assert "\033[" not in line
