"""Production Git implementation using subprocess."""

from pathlib import Path

from ccm.integrations.git.abc import Git
from ccm.subprocess_utils import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def clone(self, url: str, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        run_subprocess_with_context(
            ["git", "clone", "--depth", "1", url, str(destination)],
            operation_context=f"clone {url}",
        )

    def refresh(self, repo_dir: Path) -> None:
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            operation_context="get current branch",
            cwd=repo_dir,
        )
        branch = result.stdout.strip()

        run_subprocess_with_context(
            ["git", "fetch", "origin"],
            operation_context=f"fetch origin in {repo_dir}",
            cwd=repo_dir,
        )
        run_subprocess_with_context(
            ["git", "reset", "--hard", f"origin/{branch}"],
            operation_context=f"reset {repo_dir} to origin/{branch}",
            cwd=repo_dir,
        )
