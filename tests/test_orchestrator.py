"""Tests for the review orchestrator."""

from __future__ import annotations

import subprocess

import pytest
from conftest import FakeGateway

from council.engine.orchestrator import ReviewOrchestrator, ReviewReport
from council.errors import GatewayError, GitError, ValidationError
from council.git_diff import GitDiffSource
from council.reviews import CodeReview, ReviewRequest

pytestmark = pytest.mark.anyio


def _git(stdout: str = "", returncode: int = 0, stderr: str = "") -> tuple[GitDiffSource, list]:
    calls: list[list[str]] = []

    def runner(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    return GitDiffSource(runner=runner), calls


async def test_code_review_uses_code_models(config, fake_gateway) -> None:
    orchestrator = ReviewOrchestrator(config, fake_gateway)

    report = await orchestrator.review_code(ReviewRequest("x = 1", metadata={"language": "python"}))

    assert isinstance(report, ReviewReport)
    assert report.task == "code"
    assert report.models == ["m1", "m2"]
    assert [r.content for r in report.results] == ["review from m1", "review from m2"]
    assert report.focus is None
    assert report.success_count == 2
    assert report.error_count == 0
    assert report.errors == []


async def test_prompt_is_built_once_and_shared(config, fake_gateway) -> None:
    orchestrator = ReviewOrchestrator(config, fake_gateway)

    await orchestrator.review_plan(ReviewRequest("1. Do it", "risks"))

    assert [call[0] for call in fake_gateway.calls] == ["pl1", "pl2", "pl3"]
    messages = {call[2] for call in fake_gateway.calls}
    assert len(messages) == 1
    assert "Focus specifically on risks" in messages.pop()


@pytest.mark.parametrize(
    ("method", "task", "models"),
    [
        ("review_frontend", "frontend", ["fe1"]),
        ("review_backend", "backend", ["be1", "be2"]),
        ("review_plan", "plan", ["pl1", "pl2", "pl3"]),
    ],
)
async def test_focus_defaults_to_full(config, fake_gateway, method, task, models) -> None:
    orchestrator = ReviewOrchestrator(config, fake_gateway)

    report = await getattr(orchestrator, method)(ReviewRequest("subject"))

    assert report.task == task
    assert report.models == models
    assert report.focus == "full"


async def test_partial_failure_keeps_order(config) -> None:
    gateway = FakeGateway(
        failures={"be1": GatewayError("429 Rate limit exceeded", 429, retryable=True)},
        delays={"be2": 0.0, "be1": 0.02},
    )
    orchestrator = ReviewOrchestrator(config, gateway)

    report = await orchestrator.review_backend(ReviewRequest("code", "security"))

    assert [r.model for r in report.results] == ["be1", "be2"]
    assert report.results[0].error == "429 Rate limit exceeded"
    assert report.results[0].retryable is True
    assert report.results[1].content == "review from be2"
    assert report.errors == ["be1: 429 Rate limit exceeded"]
    assert report.error_count == 1


async def test_total_failure_still_returns_report(config) -> None:
    gateway = FakeGateway(failures={"m1": RuntimeError("down"), "m2": RuntimeError("down")})
    orchestrator = ReviewOrchestrator(config, gateway)

    report = await orchestrator.review_code(ReviewRequest("x"))

    assert report.success_count == 0
    assert report.error_count == 2


async def test_unknown_task_rejected(config, fake_gateway) -> None:
    orchestrator = ReviewOrchestrator(config, fake_gateway)

    with pytest.raises(ValidationError) as exc_info:
        await orchestrator.run("database", ReviewRequest("x"))

    assert exc_info.value.field == "task"
    assert fake_gateway.calls == []


async def test_invalid_focus_rejected(config, fake_gateway) -> None:
    orchestrator = ReviewOrchestrator(config, fake_gateway)

    with pytest.raises(ValidationError) as exc_info:
        await orchestrator.review_frontend(ReviewRequest("<div/>", "security"))

    assert exc_info.value.field == "review_type"
    assert "accessibility" in exc_info.value.message
    assert fake_gateway.calls == []


async def test_max_concurrency_is_passed_through(config) -> None:
    gateway = FakeGateway(delays={"pl1": 0.01, "pl2": 0.01, "pl3": 0.01})
    orchestrator = ReviewOrchestrator(config, gateway, max_concurrency=1)

    report = await orchestrator.review_plan(ReviewRequest("plan"))

    assert report.success_count == 3


class TestGitReview:
    async def test_reviews_diff_with_code_template(self, config, fake_gateway) -> None:
        git, calls = _git(stdout="diff --git a/x b/x\n+new line\n")
        orchestrator = ReviewOrchestrator(config, fake_gateway, git=git)

        report = await orchestrator.review_git("unstaged", context="refactor")

        assert calls == [["git", "diff"]]
        assert report.task == "git"
        assert report.focus == "unstaged"
        assert report.models == ["m1", "m2"]
        system_prompt, message = fake_gateway.calls[0][1:]
        assert system_prompt == CodeReview.system_prompt
        assert message.startswith("refactor\n\nCode to review:\n```\ndiff --git")

    async def test_commit_review(self, config, fake_gateway) -> None:
        git, calls = _git(stdout="commit abc123\n")
        orchestrator = ReviewOrchestrator(config, fake_gateway, git=git)

        report = await orchestrator.review_git("commit", "abc123")

        assert calls == [["git", "show", "abc123"]]
        assert report.focus == "commit"

    async def test_git_failure_calls_no_model(self, config, fake_gateway) -> None:
        git, _ = _git(returncode=128, stderr="fatal: not a git repository")
        orchestrator = ReviewOrchestrator(config, fake_gateway, git=git)

        with pytest.raises(GitError, match="not a git repository"):
            await orchestrator.review_git()

        assert fake_gateway.calls == []

    async def test_empty_diff_calls_no_model(self, config, fake_gateway) -> None:
        git, _ = _git(stdout="")
        orchestrator = ReviewOrchestrator(config, fake_gateway, git=git)

        with pytest.raises(GitError, match="No changes found for review type: staged"):
            await orchestrator.review_git()

        assert fake_gateway.calls == []
