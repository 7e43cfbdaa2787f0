import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    DEFAULT_BOT_EMAIL,
    DEFAULT_BOT_NAME,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DEPLOY_DIR,
    DEFAULT_DOCS_DIR,
    DEFAULT_ENCRYPTED_KEY,
    DEFAULT_KEY_PATH,
    DEFAULT_PUBLISH_CHANNEL,
    DEFAULT_RELEASE_BRANCH,
    DEFAULT_REMOTE_TEMPLATE,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_TARGET_BRANCH,
)
from .core import DocUploader, PublishError
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--docs-dir", required=False, help=f"Generated documentation (default: {DEFAULT_DOCS_DIR}).")
@click.option(
    "--encrypted-key",
    required=False,
    help=f"Encrypted deploy key (default: {DEFAULT_ENCRYPTED_KEY}).",
)
@click.option("--key-path", required=False, help=f"Where to write the decrypted key (default: {DEFAULT_KEY_PATH}).")
@click.option("--deploy-dir", required=False, help=f"Clone directory (default: {DEFAULT_DEPLOY_DIR}).")
@click.option(
    "--target-branch",
    required=False,
    help=f"Documentation branch to publish to (default: {DEFAULT_TARGET_BRANCH}).",
)
@click.option(
    "--release-branch",
    required=False,
    help=f"Only publish builds of this branch (default: {DEFAULT_RELEASE_BRANCH}).",
)
@click.option(
    "--publish-channel",
    required=False,
    help=f"Only publish builds on this toolchain channel (default: {DEFAULT_PUBLISH_CHANNEL}).",
)
@click.option(
    "--remote-template",
    required=False,
    help=f"Remote URL template with a {{repo}} placeholder (default: {DEFAULT_REMOTE_TEMPLATE}).",
)
@click.option(
    "--settings-file",
    required=False,
    type=click.Path(),
    help=f"Shell-style project settings file (default: {DEFAULT_SETTINGS_FILE}).",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Evaluate the gate and print the publish plan without decrypting, cloning or pushing.",
)
def main(
    config,
    docs_dir,
    encrypted_key,
    key_path,
    deploy_dir,
    target_branch,
    release_branch,
    publish_channel,
    remote_template,
    settings_file,
    verbose,
    log_file,
    dry_run,
):
    """Publish generated documentation from a CI build to a git branch."""
    logger = logging.getLogger("docupload")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except PublishError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        uploader = DocUploader(
            docs_dir=_resolve_option(docs_dir, config_values, "docs_dir", DEFAULT_DOCS_DIR),
            encrypted_key=_resolve_option(
                encrypted_key, config_values, "encrypted_key", DEFAULT_ENCRYPTED_KEY
            ),
            key_path=_resolve_option(key_path, config_values, "key_path", DEFAULT_KEY_PATH),
            deploy_dir=_resolve_option(deploy_dir, config_values, "deploy_dir", DEFAULT_DEPLOY_DIR),
            target_branch=_resolve_option(
                target_branch, config_values, "target_branch", DEFAULT_TARGET_BRANCH
            ),
            release_branch=_resolve_option(
                release_branch, config_values, "release_branch", DEFAULT_RELEASE_BRANCH
            ),
            publish_channel=_resolve_option(
                publish_channel, config_values, "publish_channel", DEFAULT_PUBLISH_CHANNEL
            ),
            remote_template=_resolve_option(
                remote_template, config_values, "remote_template", DEFAULT_REMOTE_TEMPLATE
            ),
            bot_name=_resolve_option(None, config_values, "bot_name", DEFAULT_BOT_NAME),
            bot_email=_resolve_option(None, config_values, "bot_email", DEFAULT_BOT_EMAIL),
            settings_file=_resolve_option(
                settings_file, config_values, "settings_file", DEFAULT_SETTINGS_FILE
            ),
            verbose=verbose,
            dry_run=dry_run,
        )
    except PublishError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(uploader.run())


if __name__ == "__main__":
    main()
