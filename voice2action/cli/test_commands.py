from typer.testing import CliRunner

from voice2action import __version__
from voice2action.cli.commands import app

runner = CliRunner()


def _isolate(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr("voice2action.config.loader.get_config_path", lambda: tmp_path / "config.json")
    monkeypatch.setenv("VOICE2ACTION_TIMEZONE", "Europe/Berlin")
    monkeypatch.delenv("VOICE2ACTION_TELEGRAM_TOKEN", raising=False)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_resolve_offline_email(monkeypatch, tmp_path) -> None:
    _isolate(monkeypatch, tmp_path)

    result = runner.invoke(app, ["resolve", "--offline", "send email to bob@example.com"])

    assert result.exit_code == 0
    assert "email" in result.output
    assert "bob@example.com" in result.output
    assert "keyword" in result.output


def test_run_without_token_exits_with_error(monkeypatch, tmp_path) -> None:
    _isolate(monkeypatch, tmp_path)

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "token" in result.output


def test_status_hides_secrets(monkeypatch, tmp_path) -> None:
    _isolate(monkeypatch, tmp_path)
    monkeypatch.setenv("VOICE2ACTION_LLM_API_KEY", "sk-very-secret")

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "sk-very-secret" not in result.output
