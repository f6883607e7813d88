"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from tarjouspalvelu import TarjouspalveluClient, __version__
from tarjouspalvelu.cli.commands import companies, notices
from tarjouspalvelu.cli.main import app

from .conftest import FakeBackend, page, redirect
from .test_companies import INDEX_HTML
from .test_notices import notices_page

runner = CliRunner()


@pytest.fixture
def fake_backend(monkeypatch, tmp_path):
    """Route every CLI client through a fake backend, with no config file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TP_USERNAME", raising=False)
    monkeypatch.delenv("TP_PASSWORD", raising=False)
    monkeypatch.delenv("TARJOUSPALVELU_CONFIG", raising=False)

    backend = FakeBackend()

    def make_client(config=None):
        return TarjouspalveluClient(config, backend=backend)

    monkeypatch.setattr(companies, "TarjouspalveluClient", make_client)
    monkeypatch.setattr(notices, "TarjouspalveluClient", make_client)
    return backend


class TestCli:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_list_companies_as_json(self, fake_backend):
        fake_backend.add("GET", "/Default/Index", page(INDEX_HTML))

        result = runner.invoke(app, ["companies", "list", "--format", "json"])

        assert result.exit_code == 0
        assert "acme" in result.output
        assert "Helsingin kaupunki" in result.output

    def test_resolve_invalid_slug(self, fake_backend):
        fake_backend.add("HEAD", "/nope", redirect("/Default/Index"))

        result = runner.invoke(app, ["companies", "resolve", "nope"])

        assert result.exit_code == 1
        assert "InvalidSlug" in result.output

    def test_show_notice_requires_login(self, fake_backend):
        result = runner.invoke(app, ["notices", "show", "helsinki", "502"])

        assert result.exit_code == 1
        assert "Login required" in result.output
        assert fake_backend.requests == []

    def test_list_notices_to_file(self, fake_backend, tmp_path):
        fake_backend.add(
            "HEAD",
            "/helsinki",
            redirect("/tarjouspyynnot.aspx?p=13&g=3f1c-uuid", set_cookies=["ASP.NET_SessionId_TP=sess123"]),
        )
        fake_backend.add("GET", "/tarjouspyynnot.aspx", page(notices_page()))
        output = tmp_path / "notices.json"

        result = runner.invoke(app, ["notices", "list", "helsinki", "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["language"] == "fi-FI"
        assert [n["id"] for n in data["notices"]] == [502, 504]
        assert data["notices"][0]["deadline"] == "2026-03-15T14:00:00+00:00"
