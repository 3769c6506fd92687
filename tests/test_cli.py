"""Tests for CLI entrypoint behavior."""

import json
from unittest.mock import patch

import httpx
from typer.testing import CliRunner

from conftest import FakeAPI, auth_body
from invo import __version__
from invo.cli.main import app

runner = CliRunner()

INVOICE = {"issueDate": "2024-01-15T10:30:00Z", "invoiceNumber": "FAC-2024-001", "totalAmount": 1210.0}


def _write_json(tmp_path, data, name="invoice.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


def test_root_version_option():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"invo {__version__}"


def test_version_subcommand():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"invo {__version__}"


class TestInvoicesCommands:
    def test_create(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVO_API_TOKEN", "invo_tok_prod_test")
        api = FakeAPI(
            **{
                "/auth/token": httpx.Response(200, json=auth_body()),
                "/invoice/store": httpx.Response(200, json={"success": True, "invoiceId": "inv-42", "chainIndex": 3}),
            }
        )
        payload = _write_json(tmp_path, INVOICE)

        with patch.object(httpx.Client, "request", side_effect=api):
            result = runner.invoke(app, ["invoices", "create", str(payload), "--callback", "https://example.com/hook"])

        assert result.exit_code == 0
        assert "inv-42" in result.stdout
        assert api.last("/invoice/store")["json"]["callback"] == "https://example.com/hook"

    def test_create_without_credentials(self, tmp_path):
        payload = _write_json(tmp_path, INVOICE)

        result = runner.invoke(app, ["invoices", "create", str(payload)])

        assert result.exit_code == 1

    def test_create_with_invalid_json(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVO_API_TOKEN", "invo_tok_prod_test")
        payload = tmp_path / "broken.json"
        payload.write_text("{not json")

        result = runner.invoke(app, ["invoices", "create", str(payload)])

        assert result.exit_code == 1

    def test_create_api_error(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVO_API_TOKEN", "invo_tok_prod_test")
        api = FakeAPI(
            **{
                "/auth/token": httpx.Response(200, json=auth_body()),
                "/invoice/store": httpx.Response(400, json={"message": "Invalid NIF"}),
            }
        )
        payload = _write_json(tmp_path, INVOICE)

        with patch.object(httpx.Client, "request", side_effect=api):
            result = runner.invoke(app, ["invoices", "create", str(payload)])

        assert result.exit_code == 1
        assert "Invalid NIF" in result.stdout

    def test_pdf_writes_output(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVO_API_TOKEN", "invo_tok_prod_test")
        api = FakeAPI(
            **{
                "/auth/token": httpx.Response(200, json=auth_body()),
                "/makeup": httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"}),
            }
        )
        payload = _write_json(tmp_path, {"id": "INV-1"})
        output = tmp_path / "out.pdf"

        with patch.object(httpx.Client, "request", side_effect=api):
            result = runner.invoke(app, ["invoices", "pdf", str(payload), "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_bytes() == b"%PDF-1.4"

    def test_read_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVO_API_TOKEN", "invo_tok_prod_test")

        result = runner.invoke(app, ["invoices", "read", str(tmp_path / "missing.pdf")])

        assert result.exit_code == 1


class TestAuthStatus:
    def test_status_with_password(self, monkeypatch):
        monkeypatch.setenv("INVO_EMAIL", "user@example.com")
        monkeypatch.setenv("INVO_PASSWORD", "secret")
        api = FakeAPI(**{"/auth/login": httpx.Response(200, json=auth_body())})

        with patch.object(httpx.Client, "request", side_effect=api):
            result = runner.invoke(app, ["auth", "status"])

        assert result.exit_code == 0
        assert "Authenticated" in result.stdout
        assert api.count("/auth/login") == 1

    def test_status_with_rejected_key(self, monkeypatch):
        monkeypatch.setenv("INVO_API_TOKEN", "invo_tok_sand_test")
        api = FakeAPI("https://sandbox.invo.rest", **{"/auth/token": httpx.Response(401, json={"message": "Bad key"})})

        with patch.object(httpx.Client, "request", side_effect=api):
            result = runner.invoke(app, ["auth", "status"])

        assert result.exit_code == 1
        assert "Bad key" in result.stdout
