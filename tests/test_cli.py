from typer.testing import CliRunner

import cli.doctor as doctor_mod
import cli.main as main_mod
import core.config as config_mod
from core.config import AppSettings
from core.domain.models import ContentTypeDescriptor

runner = CliRunner()


def _settings_factory(**overrides):
    def _factory():
        return AppSettings(_env_file=None, **overrides)

    return _factory


class _FakeServer:
    def __init__(self):
        self.ran = False

    async def run_stdio(self):
        self.ran = True


def test_serve_without_token_exits_with_error(monkeypatch):
    monkeypatch.delenv("STRAPI_API_TOKEN", raising=False)
    monkeypatch.setattr(main_mod, "AppSettings", _settings_factory())
    monkeypatch.setattr(main_mod, "build_server", lambda _settings: _FakeServer())

    result = runner.invoke(main_mod.app, ["serve"])

    assert result.exit_code == 1


def test_serve_runs_stdio_server(monkeypatch):
    fake = _FakeServer()
    seen = {}

    def _build(settings):
        seen["url"] = settings.base_url
        return fake

    monkeypatch.setattr(main_mod, "AppSettings", _settings_factory(api_token="t", url="http://cms.test"))
    monkeypatch.setattr(main_mod, "build_server", _build)

    result = runner.invoke(main_mod.app, [])

    assert result.exit_code == 0
    assert fake.ran
    assert seen["url"] == "http://cms.test"


def test_doctor_without_token_fails(monkeypatch):
    monkeypatch.setattr(doctor_mod, "AppSettings", _settings_factory())

    result = runner.invoke(main_mod.app, ["doctor", "run"])

    assert result.exit_code == 1


def test_doctor_prints_content_types_when_backend_answers(monkeypatch, content_types_payload):
    descriptors = [ContentTypeDescriptor.from_backend(item) for item in content_types_payload["data"][:2]]

    async def _check(_settings):
        return True, "2 content types", descriptors

    monkeypatch.setattr(doctor_mod, "AppSettings", _settings_factory(api_token="t", url="http://cms.test"))
    monkeypatch.setattr(doctor_mod, "_check_backend", _check)

    result = runner.invoke(main_mod.app, ["doctor", "run"])

    assert result.exit_code == 0
    assert "Content Types" in result.output
    assert "api::article.article" in result.output
    assert "api::category.category" in result.output


def test_doctor_setup_writes_user_env_file(monkeypatch, tmp_path):
    env_path = tmp_path / "strapi-mcp" / ".env"
    monkeypatch.setattr(doctor_mod, "AppSettings", _settings_factory())
    monkeypatch.setattr(config_mod, "get_user_env_file", lambda: env_path)

    result = runner.invoke(main_mod.app, ["doctor", "setup"], input="http://cms.test\ntok\ny\n")

    assert result.exit_code == 0
    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[1:] == [
        "STRAPI_API_TOKEN=tok",
        "STRAPI_DEV_MODE=true",
        "STRAPI_URL=http://cms.test",
    ]


def test_info_masks_token(monkeypatch):
    token = "supersecrettoken123"
    monkeypatch.setattr(main_mod, "AppSettings", _settings_factory(api_token=token, url="http://cms.test"))

    result = runner.invoke(main_mod.app, ["info"])

    assert result.exit_code == 0
    assert token not in result.output
    assert "supe…n123" in result.output
    assert "http://cms.test" in result.output


def test_unknown_log_level_exits_cleanly(monkeypatch):
    monkeypatch.setenv("STRAPI_LOG_LEVEL", "verbose")
    monkeypatch.setattr(main_mod, "AppSettings", _settings_factory(api_token="t"))
    monkeypatch.setattr(main_mod, "build_server", lambda _settings: _FakeServer())

    result = runner.invoke(main_mod.app, ["serve"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Invalid configuration" in result.output
