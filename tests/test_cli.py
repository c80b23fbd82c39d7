"""Tests for the council CLI."""

from __future__ import annotations

import pytest
from click.testing import CliRunner
from conftest import FakeGateway

from council import cli
from council.cli import main
from council.config import CouncilConfig


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)


@pytest.fixture
def use_config(monkeypatch: pytest.MonkeyPatch, config: CouncilConfig) -> CouncilConfig:
    monkeypatch.setattr(cli, "_load_config", lambda: config)
    return config


def test_version() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_config(use_config: CouncilConfig) -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["config"])
    assert result.exit_code == 0
    assert "be2" in result.output
    assert "CODE_REVIEW_MODELS" in result.output


def test_review_code_from_stdin(monkeypatch: pytest.MonkeyPatch, use_config: CouncilConfig) -> None:
    gateway = FakeGateway()
    monkeypatch.setattr(cli, "_get_gateway", lambda config: gateway)

    runner = CliRunner()
    result = runner.invoke(main, ["review-code", "-", "--language", "python"], input="x = 1\n")

    assert result.exit_code == 0
    assert "review from m1" in result.output
    assert "review from m2" in result.output
    assert [call[0] for call in gateway.calls] == ["m1", "m2"]


def test_review_plan_file(tmp_path, monkeypatch: pytest.MonkeyPatch, use_config: CouncilConfig) -> None:
    gateway = FakeGateway()
    monkeypatch.setattr(cli, "_get_gateway", lambda config: gateway)
    plan = tmp_path / "plan.md"
    plan.write_text("1. Build it\n")

    runner = CliRunner()
    result = runner.invoke(main, ["review-plan", str(plan), "--review-type", "risks"])

    assert result.exit_code == 0
    assert "Focus specifically on risks" in gateway.calls[0][2]


def test_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "_load_config", lambda: CouncilConfig())

    runner = CliRunner()
    result = runner.invoke(main, ["review-code", "-"], input="x = 1\n")

    assert result.exit_code == 1


def test_invalid_review_type() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["review-git", "--review-type", "stash"])
    assert result.exit_code == 2
