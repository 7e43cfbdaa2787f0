import shutil
import subprocess

import pytest

from docupload.models import RunContext


def _run_git(*args, cwd=None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def make_context():
    def factory(**overrides) -> RunContext:
        values = {
            "branch": "master",
            "pull_request": "false",
            "channel": "stable",
            "repo_slug": "someone/myproject",
            "project_name": "myproject",
            "docs_repo": "someone/someone.github.io",
            "secret_id": "0a1b2c3d",
            "secrets": {},
        }
        values.update(overrides)
        return RunContext(**values)

    return factory


@pytest.fixture
def git():
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return _run_git


@pytest.fixture
def docs_remote(tmp_path, git):
    """Bare repository with a gh-pages branch holding two projects and a root page."""
    remote = tmp_path / "docs.git"
    git("init", "-q", "--bare", str(remote))

    seed = tmp_path / "seed"
    git("init", "-q", str(seed))
    git("symbolic-ref", "HEAD", "refs/heads/gh-pages", cwd=seed)
    (seed / "index.html").write_text("root page", encoding="utf-8")
    (seed / "otherproject").mkdir()
    (seed / "otherproject" / "page.html").write_text("other docs", encoding="utf-8")
    (seed / "myproject").mkdir()
    (seed / "myproject" / "stale.html").write_text("old docs", encoding="utf-8")
    git("add", "-A", cwd=seed)
    git(
        "-c",
        "user.name=seed",
        "-c",
        "user.email=seed@example.com",
        "commit",
        "-q",
        "-m",
        "seed",
        cwd=seed,
    )
    git("remote", "add", "origin", str(remote), cwd=seed)
    git("push", "-q", "origin", "gh-pages", cwd=seed)
    return remote


@pytest.fixture
def generated_docs(tmp_path):
    docs = tmp_path / "target" / "doc"
    (docs / "myproject").mkdir(parents=True)
    (docs / "index.html").write_text("<html>new index</html>", encoding="utf-8")
    (docs / "myproject" / "struct.Thing.html").write_text("<html>Thing</html>", encoding="utf-8")
    return docs
