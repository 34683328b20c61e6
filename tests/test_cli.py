"""
Tests for the command-line interface.
"""

from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from homework_checker import __version__
from homework_checker.cli import app, run
from homework_checker.main import EXIT_OK

runner = CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A working directory with cfg/ and a submission folder."""
    cfg = tmp_path / "cfg"
    cfg.mkdir()
    (cfg / "default.yaml").write_text(yaml.safe_dump({
        "smtp_config": {"encryption": "tls"},
        "stu_config": {"list": [
            {"name": "A", "email": "a@x.com"},
            {"name": "B", "email": "b@x.com"},
        ]},
    }), encoding="utf-8")
    (tmp_path / "A_hw1.pdf").write_text("x", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("CONFIG_DIR", raising=False)
    return tmp_path


class TestCli:
    """Test option parsing and wiring."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_send_requires_name(self, project):
        result = runner.invoke(app, ["--send"])

        assert result.exit_code == 2

    def test_name_requires_send(self, project):
        result = runner.invoke(app, ["--name", "HW1"])

        assert result.exit_code == 2

    def test_default_run(self, project):
        result = runner.invoke(app, ["--log-dir", str(project / "log")])

        assert result.exit_code == 0
        assert "B" in result.output.splitlines()

    def test_config_dir_option(self, project):
        result = runner.invoke(app, ["--config", str(project / "elsewhere")])

        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output

    def test_options_passed_through(self, project):
        with patch("homework_checker.cli.run_check", return_value=EXIT_OK) as run_check:
            result = runner.invoke(app, [
                "-s", "-n", "HW1", "-c", "conf", "-e", "prod", "-d", "subs",
            ])

        assert result.exit_code == 0
        options = run_check.call_args.args[0]
        assert options.send is True
        assert options.homework_name == "HW1"
        assert str(options.config_dir) == "conf"
        assert options.environment == "prod"
        assert str(options.check_dir) == "subs"
        assert options.strict is True

    def test_environment_variables(self, project):
        with patch("homework_checker.cli.run_check", return_value=EXIT_OK) as run_check:
            result = runner.invoke(app, [], env={"APP_ENV": "staging", "CONFIG_DIR": "conf"})

        assert result.exit_code == 0
        options = run_check.call_args.args[0]
        assert options.environment == "staging"
        assert str(options.config_dir) == "conf"
        assert options.strict is False

    def test_strict_override(self, project):
        with patch("homework_checker.cli.run_check", return_value=EXIT_OK) as run_check:
            runner.invoke(app, ["-e", "prod", "--no-strict"])

        assert run_check.call_args.args[0].strict is False

    def test_entry_point_loads_dotenv_before_app(self):
        calls = []
        with patch("homework_checker.cli.load_dotenv", side_effect=lambda: calls.append("dotenv")), \
                patch("homework_checker.cli.app", side_effect=lambda: calls.append("app")):
            run()

        assert calls == ["dotenv", "app"]
