# tests/test_config.py
import pytest
import yaml

from askterminal.config import AppConfig, ConfigError, InterpreterConfig, load_config


class TestLoadConfig:
    def test_loads_valid_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({
            "shell": {
                "command": "/bin/bash",
                "args": ["--login"],
                "cwd": "/tmp",
                "env": {"LANG": "C.UTF-8"},
                "cols": 120,
                "rows": 40,
            },
            "interpreter": {
                "activity_log_limit": 50,
                "recent_activity_count": 5,
                "poll_interval_ms": 20,
            },
            "debug": {"enabled": True, "trace": True, "verbose": False},
        }))
        config = load_config(str(config_file))
        assert config.shell.command == "/bin/bash"
        assert config.shell.args == ["--login"]
        assert config.shell.cwd == "/tmp"
        assert config.shell.env == {"LANG": "C.UTF-8"}
        assert (config.shell.cols, config.shell.rows) == (120, 40)
        assert config.interpreter.activity_log_limit == 50
        assert config.interpreter.recent_activity_count == 5
        assert config.interpreter.poll_interval_ms == 20
        assert config.debug.enabled is True
        assert config.debug.trace is True
        assert config.debug.verbose is False

    def test_missing_file_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("/nonexistent/config.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        config = load_config(str(config_file))
        assert config == AppConfig()

    def test_null_sections_use_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("shell:\ninterpreter:\ndebug:\n")
        config = load_config(str(config_file))
        assert config.shell.command == ""
        assert config.shell.cwd == "~"
        assert config.interpreter == InterpreterConfig()

    def test_non_mapping_root_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(config_file))

    def test_zero_log_limit_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"interpreter": {"activity_log_limit": 0}}))
        with pytest.raises(ConfigError, match="activity_log_limit"):
            load_config(str(config_file))

    def test_non_integer_size_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"shell": {"cols": "wide"}}))
        with pytest.raises(ConfigError, match="shell.cols"):
            load_config(str(config_file))

    def test_boolean_is_not_an_integer(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"shell": {"rows": True}}))
        with pytest.raises(ConfigError, match="shell.rows"):
            load_config(str(config_file))

    def test_env_values_are_strings(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"shell": {"env": {"HISTSIZE": 0}}}))
        config = load_config(str(config_file))
        assert config.shell.env == {"HISTSIZE": "0"}


class TestDefaults:
    def test_interpreter_defaults(self):
        config = InterpreterConfig()
        assert config.activity_log_limit == 100
        assert config.recent_activity_count == 10
        assert config.poll_interval_ms == 50

    def test_shell_defaults(self):
        config = AppConfig()
        assert config.shell.command == ""
        assert config.shell.args == []
        assert (config.shell.cols, config.shell.rows) == (80, 24)
        assert config.debug.enabled is False
