from click.testing import CliRunner

import docupload.cli as cli_module


class FakeUploader:
    captured = {}
    exit_code = 0

    def __init__(self, **kwargs):
        FakeUploader.captured = kwargs

    def run(self):
        return FakeUploader.exit_code


def test_cli_uses_config_and_allows_cli_override(tmp_path, monkeypatch):
    config_file = tmp_path / ".docupload.yml"
    config_file.write_text(
        "docs_dir: build/doc\n" "target_branch: pages\n" "bot_name: docs bot\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(cli_module, "DocUploader", FakeUploader)

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        ["--config", str(config_file), "--target-branch", "gh-pages", "--dry-run"],
    )

    assert result.exit_code == 0
    captured = FakeUploader.captured
    assert captured["docs_dir"] == "build/doc"
    assert captured["target_branch"] == "gh-pages"
    assert captured["bot_name"] == "docs bot"
    assert captured["bot_email"] == "nobody@example.com"
    assert captured["dry_run"] is True


def test_cli_uses_default_config_file_when_present(tmp_path, monkeypatch):
    (tmp_path / ".docupload.yml").write_text("publish_channel: beta\n", encoding="utf-8")
    monkeypatch.setattr(cli_module, "DocUploader", FakeUploader)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert FakeUploader.captured["publish_channel"] == "beta"
    assert FakeUploader.captured["release_branch"] == "master"
    assert FakeUploader.captured["settings_file"] == "scripts/travis-doc-upload.cfg"


def test_cli_propagates_failure_exit_code(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "DocUploader", FakeUploader)
    monkeypatch.setattr(FakeUploader, "exit_code", 1)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 1


def test_cli_rejects_unknown_config_keys(tmp_path, monkeypatch):
    config_file = tmp_path / "bad.yml"
    config_file.write_text("source: x\n", encoding="utf-8")
    monkeypatch.setattr(cli_module, "DocUploader", FakeUploader)

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code != 0
    assert "Unknown configuration keys" in result.output


def test_cli_skip_exits_zero_end_to_end(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TRAVIS_BRANCH", "feature-x")
    monkeypatch.setenv("TRAVIS_PULL_REQUEST", "false")
    monkeypatch.setenv("TRAVIS_RUST_VERSION", "stable")

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert not (tmp_path / "deploy_docs").exists()


def test_cli_skip_exits_zero_with_shell_settings_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "scripts").mkdir()
    (tmp_path / "scripts" / "travis-doc-upload.cfg").write_text(
        "set -e\nPROJECT_NAME=myproject\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TRAVIS_BRANCH", "feature-x")
    monkeypatch.setenv("TRAVIS_PULL_REQUEST", "false")
    monkeypatch.setenv("TRAVIS_RUST_VERSION", "stable")

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert "Invalid line" not in result.output
