"""Git diff retrieval for reviewing working-tree and commit changes."""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from council.errors import GitError, ValidationError

logger = logging.getLogger(__name__)

MAX_DIFF_BYTES = 10 * 1024 * 1024
GIT_TIMEOUT = 60

# A revision token: no leading dash (option injection) and no whitespace
_REVISION_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._/~^@{}\-]*$")


class DiffKind(str, Enum):
    STAGED = "staged"
    UNSTAGED = "unstaged"
    DIFF = "diff"
    COMMIT = "commit"


Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class GitDiffSource:
    """Runs git to fetch one of the supported diff forms as text."""

    COMMANDS: dict[DiffKind, list[str]] = {
        DiffKind.STAGED: ["git", "diff", "--cached"],
        DiffKind.UNSTAGED: ["git", "diff"],
        DiffKind.DIFF: ["git", "diff", "main..HEAD"],
        DiffKind.COMMIT: ["git", "show"],
    }

    def __init__(self, cwd: Path | None = None, runner: Runner = subprocess.run) -> None:
        self.cwd = cwd
        self._run = runner

    def build_command(self, kind: str = "staged", commit_hash: str | None = None) -> list[str]:
        """Return the git argv for a diff kind.

        Raises:
            ValidationError: If ``kind`` is unknown or the hash is malformed.
            GitError: If ``kind`` is "commit" and no hash was given.
        """
        try:
            diff_kind = DiffKind(kind)
        except ValueError:
            valid = ", ".join(k.value for k in DiffKind)
            raise ValidationError(f"must be one of: {valid}", "review_type") from None

        cmd = list(self.COMMANDS[diff_kind])
        if diff_kind is DiffKind.COMMIT:
            if not commit_hash:
                raise GitError("commit_hash is required when review_type is 'commit'")
            if not _REVISION_PATTERN.match(commit_hash):
                raise ValidationError("not a valid commit reference", "commit_hash")
            cmd.append(commit_hash)
        return cmd

    def get_diff(self, kind: str = "staged", commit_hash: str | None = None) -> str:
        """
        Fetch a diff as a single text blob.

        Args:
            kind: "staged", "unstaged", "diff" (main..HEAD), or "commit"
            commit_hash: Commit to show (required for "commit")

        Returns:
            Diff text

        Raises:
            GitError: If git fails or there is nothing to review
        """
        cmd = self.build_command(kind, commit_hash)
        logger.debug("Executing git command", extra={"command": " ".join(cmd)})

        kwargs: dict[str, Any] = {
            "capture_output": True,
            "encoding": "utf-8",
            "errors": "replace",
            "timeout": GIT_TIMEOUT,
            "check": False,
        }
        if self.cwd is not None:
            kwargs["cwd"] = str(self.cwd)

        try:
            result = self._run(cmd, **kwargs)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.error("Failed to get git diff", exc_info=True)
            raise GitError(f"Git command failed: {exc}") from exc

        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit code {result.returncode}"
            logger.error("Failed to get git diff", extra={"stderr": detail})
            raise GitError(f"Git command failed: {detail}")

        diff = result.stdout or ""
        if not diff.strip():
            raise GitError(f"Git command failed: No changes found for review type: {kind}")

        if len(diff.encode("utf-8", errors="replace")) > MAX_DIFF_BYTES:
            raise GitError("Git command failed: diff exceeds 10MB output limit")

        return diff
