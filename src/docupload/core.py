import logging
import os
from typing import Mapping, Optional

from rich.console import Console
from rich.markup import escape

from .constants import (
    DEFAULT_BOT_EMAIL,
    DEFAULT_BOT_NAME,
    DEFAULT_DEPLOY_DIR,
    DEFAULT_DOCS_DIR,
    DEFAULT_ENCRYPTED_KEY,
    DEFAULT_KEY_PATH,
    DEFAULT_PUBLISH_CHANNEL,
    DEFAULT_RELEASE_BRANCH,
    DEFAULT_REMOTE_TEMPLATE,
    DEFAULT_SETTINGS_FILE,
    DEFAULT_TARGET_BRANCH,
    ENV_DOCS_REPO,
    ENV_PROJECT_NAME,
    ENV_SECRET_ID,
)
from .errors import PublishError
from .errors_catalog import actionable_error
from .models import GateDecision, GatePolicy, PublishResult
from .services.command_runner import CommandRunner
from .services.config_loader import ConfigLoader
from .services.credentials import CredentialMaterializer
from .services.environment import build_run_context
from .services.filesystem import FileSystemService
from .services.gate import evaluate_gate
from .services.git import GitService
from .services.publisher import Publisher, commit_message, validate_project_name

console = Console()
logger = logging.getLogger("docupload")


class DocUploader:
    def __init__(
        self,
        docs_dir: str = DEFAULT_DOCS_DIR,
        encrypted_key: str = DEFAULT_ENCRYPTED_KEY,
        key_path: str = DEFAULT_KEY_PATH,
        deploy_dir: str = DEFAULT_DEPLOY_DIR,
        target_branch: str = DEFAULT_TARGET_BRANCH,
        release_branch: str = DEFAULT_RELEASE_BRANCH,
        publish_channel: str = DEFAULT_PUBLISH_CHANNEL,
        remote_template: str = DEFAULT_REMOTE_TEMPLATE,
        bot_name: str = DEFAULT_BOT_NAME,
        bot_email: str = DEFAULT_BOT_EMAIL,
        settings_file: Optional[str] = DEFAULT_SETTINGS_FILE,
        verbose: bool = False,
        dry_run: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.verbose = verbose
        self.dry_run = dry_run
        self.target_branch = target_branch
        self.policy = GatePolicy(release_branch=release_branch, publish_channel=publish_channel)

        # Environment is read here, once; everything downstream uses the snapshot.
        if environ is None:
            environ = dict(os.environ)
        # A broken settings file only matters once the gate says proceed.
        self.settings_error: Optional[PublishError] = None
        try:
            settings = ConfigLoader().load_settings_file(settings_file)
        except PublishError as exc:
            self.settings_error = exc
            settings = {}
        self.run_context = build_run_context(environ, settings)

        self.decision: Optional[GateDecision] = None
        self.result: Optional[PublishResult] = None
        self.current_step_name: Optional[str] = None

        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.command_runner = CommandRunner(logger=logger)
        self.credential_materializer = CredentialMaterializer(
            encrypted_key=encrypted_key,
            key_path=key_path,
            command_runner=self.command_runner,
            filesystem_service=self.filesystem_service,
            logger=logger,
        )
        self.git_service = GitService(
            command_runner=self.command_runner,
            logger=logger,
            ssh_key_path=self.credential_materializer.key_path,
            base_env=environ,
        )
        self.publisher = Publisher(
            git_service=self.git_service,
            filesystem_service=self.filesystem_service,
            logger=logger,
            console=console,
            docs_dir=docs_dir,
            deploy_dir=deploy_dir,
            target_branch=target_branch,
            remote_template=remote_template,
            bot_name=bot_name,
            bot_email=bot_email,
        )

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.current_step_name = name
        logger.debug("Step started: %s", name)
        result = callback(*args, **kwargs)
        logger.debug("Step finished: %s", name)
        self.current_step_name = None
        return result

    def validate_settings(self):
        if self.settings_error is not None:
            raise self.settings_error

        required = (
            (ENV_PROJECT_NAME, self.run_context.project_name),
            (ENV_DOCS_REPO, self.run_context.docs_repo),
            (ENV_SECRET_ID, self.run_context.secret_id),
        )
        for name, value in required:
            if not value:
                raise PublishError(actionable_error("missing_setting", name=name))
        validate_project_name(self.run_context.project_name)

    def print_plan(self):
        context = self.run_context
        console.print("[bold]Dry run: nothing will be decrypted, cloned or pushed.[/bold]")
        materializer = self.credential_materializer
        message = commit_message(context.project_name, context.repo_slug or "")
        steps = [
            f"Decrypt {materializer.encrypted_key} -> {materializer.key_path}",
            f"Clone {self.publisher.remote_url(context.docs_repo)} ({self.target_branch}) "
            f"-> {self.publisher.deploy_dir}",
            f"Replace {context.project_name}/ with {self.publisher.docs_dir}",
            f"Commit '{message}'",
        ]
        for step in steps:
            console.print(f"  {escape(step)}")

    def run(self) -> int:
        try:
            logger.info("Starting docupload...")

            self.decision = evaluate_gate(self.run_context, self.policy)
            if not self.decision.proceed:
                console.print(f"[yellow]{escape(self.decision.message)}[/yellow]")
                logger.info("%s", self.decision.message)
                return 0

            console.print(f"[blue]{escape(self.decision.message)}[/blue]")
            logger.info("%s", self.decision.message)
            self.validate_settings()

            if self.dry_run:
                self.print_plan()
                return 0

            self._run_step(
                "materialize_credential",
                self.credential_materializer.materialize,
                self.run_context,
            )
            self.result = self._run_step("publish", self.publisher.publish, self.run_context)
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except PublishError as exc:
            console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
            logger.error("%s failed: %s", self.current_step_name or "run", exc)
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(exc))}")
            logger.exception("Unexpected error")
            return 1
