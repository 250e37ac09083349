"""CLI tests for the ``quotes`` command group."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from conftest import FakeQuoteClient, RecordingSleep, raw
from loguru import logger
from typer.testing import CliRunner

from kisquote.cli import quotes as quotes_module
from kisquote.cli.main import create_app
from kisquote.core.data import catalog
from kisquote.core.exceptions import ConfigurationError, UpstreamError
from kisquote.core.monitoring import MetricsCollector
from kisquote.core.services import QuoteService


@pytest.fixture
def runner() -> Iterator[CliRunner]:
    yield CliRunner()
    logger.remove()


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch, metrics: MetricsCollector) -> FakeQuoteClient:
    fake = FakeQuoteClient({f"KRX:{etf.symbol}": raw("10000", "-50", "-0.5") for etf in catalog.KOREAN_ETFS})
    monkeypatch.setattr(
        quotes_module,
        "get_quote_service",
        lambda: QuoteService(fake, metrics=metrics, sleep=RecordingSleep()),
    )
    return fake


def _stderr_payloads(stderr: str) -> list[dict[str, object]]:
    payloads = []
    for line in stderr.splitlines():
        try:
            payloads.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return payloads


def test_etf_command_writes_jsonl(runner: CliRunner, fake_client: FakeQuoteClient) -> None:
    result = runner.invoke(create_app(), ["--format", "jsonl", "quotes", "etf", "--category", "bond"])

    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in result.stdout.splitlines()]
    assert [row["symbol"] for row in rows] == ["148070", "132030", "261220", "130730"]
    assert rows[0]["name"] == "KOSEF 국고채10년"
    assert rows[0]["change"] == "-50"
    assert fake_client.closed is True


def test_partial_failure_is_reported_on_stderr(runner: CliRunner, fake_client: FakeQuoteClient) -> None:
    fake_client.responses["KRX:132030"] = UpstreamError("no data", msg_cd="EGW00201")

    result = runner.invoke(
        create_app(), ["--format", "jsonl", "--log-level", "ERROR", "quotes", "etf", "-c", "bond"]
    )

    assert result.exit_code == 0
    assert len(result.stdout.splitlines()) == 3
    partial = [payload for payload in _stderr_payloads(result.stderr) if payload.get("code") == "PARTIAL_FAILURE"]
    assert partial == [
        {
            "code": "PARTIAL_FAILURE",
            "message": "1 of 4 instruments failed",
            "details": {"failed": ["KRX:132030"], "kinds": ["upstream"]},
        }
    ]


def test_table_output_with_no_quotes(runner: CliRunner, fake_client: FakeQuoteClient) -> None:
    fake_client.responses = {}

    result = runner.invoke(create_app(), ["--no-color", "--log-level", "ERROR", "quotes", "etf", "-c", "bond"])

    assert result.exit_code == 0
    assert "No quotes available." in result.stdout


def test_output_file(runner: CliRunner, fake_client: FakeQuoteClient, tmp_path: Path) -> None:
    target = tmp_path / "etf.jsonl"

    result = runner.invoke(create_app(), ["-f", "jsonl", "-o", str(target), "quotes", "etf", "-c", "index"])

    assert result.exit_code == 0
    assert result.stdout == ""
    assert len(target.read_text(encoding="utf-8").splitlines()) == 6


def test_invalid_category_exits_with_validation_code(runner: CliRunner, fake_client: FakeQuoteClient) -> None:
    result = runner.invoke(create_app(), ["quotes", "etf", "--category", "crypto"])

    assert result.exit_code == 2
    assert fake_client.calls == []
    assert any(payload.get("code") == "VALIDATION_ERROR" for payload in _stderr_payloads(result.stderr))


def test_missing_credentials_exit_with_provider_code(runner: CliRunner, fake_client: FakeQuoteClient) -> None:
    fake_client.ready_error = ConfigurationError("KIS API credentials are not configured")

    result = runner.invoke(create_app(), ["quotes", "indices"])

    assert result.exit_code == 3
    assert fake_client.closed is True
    assert any(payload.get("code") == "API_KEY_NOT_CONFIGURED" for payload in _stderr_payloads(result.stderr))


def test_unknown_format_is_rejected(runner: CliRunner, fake_client: FakeQuoteClient) -> None:
    result = runner.invoke(create_app(), ["--format", "xml", "quotes", "etf"])

    assert result.exit_code == 2
    assert fake_client.calls == []
