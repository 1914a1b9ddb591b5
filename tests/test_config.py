"""
Tests for BoardConfig loading: YAML file, environment overrides, validation.
"""

import textwrap

import pytest

from taskboard.config import BoardConfig
from taskboard.errors import ConfigError


def write_config(tmp_path, text):
    path = tmp_path / "taskboard.yaml"
    path.write_text(textwrap.dedent(text))
    return str(path)


class TestBoardConfig:

    def test_defaults_when_file_missing(self, tmp_path):
        cfg = BoardConfig.load(str(tmp_path / "absent.yaml"), environ={})
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 3000
        assert cfg.seed_examples is True
        assert cfg.log_level == "INFO"

    def test_loads_yaml(self, tmp_path):
        path = write_config(tmp_path, """
            host: 0.0.0.0
            port: 8080
            seed_examples: false
            log_level: debug
        """)
        cfg = BoardConfig.load(path, environ={})
        assert cfg.host == "0.0.0.0"
        assert cfg.port == 8080
        assert cfg.seed_examples is False
        assert cfg.log_level == "DEBUG"

    def test_unknown_keys_ignored(self, tmp_path):
        path = write_config(tmp_path, """
            port: 4000
            database: /tmp/kanban.db
        """)
        cfg = BoardConfig.load(path, environ={})
        assert cfg.port == 4000

    def test_malformed_yaml_falls_back_to_defaults(self, tmp_path):
        path = write_config(tmp_path, "port: [unclosed\n")
        cfg = BoardConfig.load(path, environ={})
        assert cfg.port == 3000

    def test_config_path_from_env(self, tmp_path):
        path = write_config(tmp_path, "port: 5050\n")
        cfg = BoardConfig.load(environ={"TASKBOARD_CONFIG": path})
        assert cfg.port == 5050

    def test_env_overrides_file(self, tmp_path):
        path = write_config(tmp_path, "port: 8080\nhost: localhost\n")
        cfg = BoardConfig.load(path, environ={
            "PORT": "9000",
            "TASKBOARD_HOST": "0.0.0.0",
            "TASKBOARD_LOG_LEVEL": "warning",
        })
        assert cfg.port == 9000
        assert cfg.host == "0.0.0.0"
        assert cfg.log_level == "WARNING"

    def test_taskboard_port_beats_port(self, tmp_path):
        cfg = BoardConfig.load(str(tmp_path / "absent.yaml"),
                               environ={"PORT": "9000", "TASKBOARD_PORT": "9100"})
        assert cfg.port == 9100

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_bad_port(self, tmp_path, port):
        with pytest.raises(ConfigError):
            BoardConfig.load(str(tmp_path / "absent.yaml"), environ={"PORT": port})

    def test_bad_log_level(self, tmp_path):
        with pytest.raises(ConfigError):
            BoardConfig.load(str(tmp_path / "absent.yaml"),
                             environ={"TASKBOARD_LOG_LEVEL": "chatty"})
