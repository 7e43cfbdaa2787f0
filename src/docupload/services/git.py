"""Git operations against the documentation repository."""

import os
import shlex
from typing import Mapping, Optional

from docupload.errors import PublishError


class GitService:
    """Thin wrapper over the git executable, authenticated with a deploy key."""

    def __init__(
        self,
        command_runner,
        logger,
        ssh_key_path: Optional[str] = None,
        base_env: Optional[Mapping[str, str]] = None,
    ):
        self.command_runner = command_runner
        self.logger = logger
        self.ssh_key_path = ssh_key_path
        self.base_env = dict(os.environ if base_env is None else base_env)

    def _env(self):
        env = dict(self.base_env)
        if self.ssh_key_path:
            env["GIT_SSH_COMMAND"] = (
                f"ssh -i {shlex.quote(str(self.ssh_key_path))} -o IdentitiesOnly=yes"
            )
        return env

    def _git(self, args, cwd: Optional[str] = None, check: bool = True):
        return self.command_runner.run(
            ["git"] + list(args),
            check=check,
            capture_output=True,
            cwd=cwd,
            env=self._env(),
        )

    def clone(self, remote: str, branch: str, destination: str):
        self._git(["clone", "--quiet", "--branch", branch, "--single-branch", remote, destination])

    def configure_identity(self, repo_dir: str, name: str, email: str):
        self._git(["config", "user.name", name], cwd=repo_dir)
        self._git(["config", "user.email", email], cwd=repo_dir)

    def stage(self, repo_dir: str, pathspec: str):
        self._git(["add", "-A", "--", pathspec], cwd=repo_dir)

    def has_staged_changes(self, repo_dir: str, pathspec: str) -> bool:
        result = self._git(["diff", "--cached", "--quiet", "--", pathspec], cwd=repo_dir, check=False)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        stderr = (result.stderr or "").strip()
        raise PublishError(f"Could not inspect staged changes in {repo_dir}: {stderr}")

    def commit(self, repo_dir: str, message: str):
        self._git(["commit", "-q", "-m", message], cwd=repo_dir)

    def push(self, repo_dir: str, branch: str):
        self._git(["push", "-q", "origin", branch], cwd=repo_dir)
