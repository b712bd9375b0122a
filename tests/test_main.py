"""Entry point tests."""

import logging

from gateway.logger import LOGGER_NAME
from main import main


class TestMain:
    """Test the command-line entry point."""

    def test_summary(self, write_config, gateway_records):
        """Test listeners and ACL entries are logged."""
        path = write_config({"http_port": 8080, "acl": [{"ip": "10.0.0.0/8"}, {}]})

        assert main([str(path)]) == 0

        events = [r.msg["event"] for r in gateway_records if isinstance(r.msg, dict)]
        assert events == ["config_loaded", "listeners", "acl_entry", "acl_entry"]

    def test_config_from_env(self, write_config, gateway_records, monkeypatch):
        """Test the path falls back to GATEWAY_CONFIG."""
        path = write_config({"redis_port": 7000})
        monkeypatch.setenv("GATEWAY_CONFIG", str(path))

        assert main([]) == 0

        listeners = next(r.msg for r in gateway_records if r.msg["event"] == "listeners")
        assert listeners["redis_port"] == 7000

    def test_missing_config_still_starts(self, tmp_path, gateway_records):
        """Test a bad path degrades to defaults."""
        assert main([str(tmp_path / "nope.json")]) == 0

        assert gateway_records[0].msg["event"] == "config_error"

    def test_invalid_log_level(self, write_config, gateway_records, monkeypatch):
        """Test an unknown log level falls back to INFO."""
        monkeypatch.setenv("GATEWAY_LOG_LEVEL", "verbose")

        assert main([str(write_config({}))]) == 0

        assert logging.getLogger(LOGGER_NAME).level == logging.INFO
        assert any(r.msg["event"] == "listeners" for r in gateway_records)
