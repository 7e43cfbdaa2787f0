import subprocess

import pytest

from docupload.errors import PublishError
from docupload.services.git import GitService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


class StubRunner:
    def __init__(self, returncode=0, stderr=""):
        self.calls = []
        self.returncode = returncode
        self.stderr = stderr

    def run(self, cmd, check=True, capture_output=False, cwd=None, env=None, redact=()):
        self.calls.append({"cmd": cmd, "cwd": cwd, "env": env, "check": check})
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr=self.stderr)


def test_clone_fetches_only_target_branch():
    runner = StubRunner()
    service = GitService(command_runner=runner, logger=DummyLogger(), base_env={})

    service.clone("git@github.com:someone/docs", "gh-pages", "deploy_docs")

    cmd = runner.calls[0]["cmd"]
    assert cmd[:2] == ["git", "clone"]
    assert "--single-branch" in cmd
    assert cmd[cmd.index("--branch") + 1] == "gh-pages"
    assert cmd[-2:] == ["git@github.com:someone/docs", "deploy_docs"]


def test_ssh_command_uses_deploy_key():
    runner = StubRunner()
    service = GitService(
        command_runner=runner,
        logger=DummyLogger(),
        ssh_key_path="/home/ci/.ssh/id_rsa",
        base_env={"PATH": "/usr/bin"},
    )

    service.push("deploy_docs", "gh-pages")

    env = runner.calls[0]["env"]
    assert env["PATH"] == "/usr/bin"
    assert env["GIT_SSH_COMMAND"] == "ssh -i /home/ci/.ssh/id_rsa -o IdentitiesOnly=yes"
    assert runner.calls[0]["cmd"] == ["git", "push", "-q", "origin", "gh-pages"]
    assert runner.calls[0]["cwd"] == "deploy_docs"


def test_identity_is_configured_in_clone():
    runner = StubRunner()
    service = GitService(command_runner=runner, logger=DummyLogger(), base_env={})

    service.configure_identity("deploy_docs", "doc upload bot", "nobody@example.com")

    assert [call["cmd"] for call in runner.calls] == [
        ["git", "config", "user.name", "doc upload bot"],
        ["git", "config", "user.email", "nobody@example.com"],
    ]
    assert all(call["cwd"] == "deploy_docs" for call in runner.calls)


@pytest.mark.parametrize("returncode, expected", [(0, False), (1, True)])
def test_has_staged_changes_reads_diff_status(returncode, expected):
    runner = StubRunner(returncode=returncode)
    service = GitService(command_runner=runner, logger=DummyLogger(), base_env={})

    assert service.has_staged_changes("deploy_docs", "myproject") is expected
    assert runner.calls[0]["check"] is False


def test_has_staged_changes_raises_on_git_error():
    runner = StubRunner(returncode=128, stderr="fatal: not a git repository")
    service = GitService(command_runner=runner, logger=DummyLogger(), base_env={})

    with pytest.raises(PublishError, match="not a git repository"):
        service.has_staged_changes("deploy_docs", "myproject")
