"""Replace-and-commit publishing of generated documentation."""

import os

from rich.markup import escape

from docupload.errors import PublishError
from docupload.errors_catalog import actionable_error
from docupload.models import PublishResult, RunContext


def commit_message(project_name: str, repo_slug: str) -> str:
    return f"doc upload for {project_name} ({repo_slug})"


def validate_project_name(project_name: str):
    if (
        not project_name
        or project_name in (".", "..")
        or "/" in project_name
        or "\\" in project_name
        or project_name == ".git"
    ):
        raise PublishError(actionable_error("invalid_project_name", name=project_name or ""))


class Publisher:
    """Clones the docs branch, swaps in the project's subtree, commits and pushes."""

    def __init__(
        self,
        git_service,
        filesystem_service,
        logger,
        console,
        docs_dir: str,
        deploy_dir: str,
        target_branch: str,
        remote_template: str,
        bot_name: str,
        bot_email: str,
    ):
        self.git = git_service
        self.filesystem_service = filesystem_service
        self.logger = logger
        self.console = console
        self.docs_dir = docs_dir
        self.deploy_dir = deploy_dir
        self.target_branch = target_branch
        self.remote_template = remote_template
        self.bot_name = bot_name
        self.bot_email = bot_email

    def remote_url(self, docs_repo: str) -> str:
        return self.remote_template.format(repo=docs_repo)

    def publish(self, context: RunContext) -> PublishResult:
        project = context.project_name
        validate_project_name(project)

        if not os.path.isdir(self.docs_dir):
            raise PublishError(actionable_error("docs_not_found", path=self.docs_dir))

        remote = self.remote_url(context.docs_repo)
        self.filesystem_service.cleanup_dir(self.deploy_dir)

        self.console.print(
            f"[blue]Cloning {escape(self.target_branch)} of {escape(context.docs_repo)}...[/blue]"
        )
        self.logger.info("Cloning branch %s of %s into %s", self.target_branch, remote, self.deploy_dir)
        try:
            self.git.clone(remote, self.target_branch, self.deploy_dir)
        except PublishError as exc:
            raise PublishError(
                f"{actionable_error('clone_failed', branch=self.target_branch, remote=remote)}\n{exc}"
            ) from exc

        self.git.configure_identity(self.deploy_dir, self.bot_name, self.bot_email)

        subtree = os.path.join(self.deploy_dir, project)
        try:
            self.filesystem_service.replace_tree(self.docs_dir, subtree)
        except OSError as exc:
            raise PublishError(actionable_error("replace_failed", path=subtree, error=str(exc))) from exc
        self.logger.info(
            "Replaced %s/ with %s files from %s",
            project,
            self.filesystem_service.count_files(subtree),
            self.docs_dir,
        )

        self.git.stage(self.deploy_dir, project)
        if not self.git.has_staged_changes(self.deploy_dir, project):
            self.console.print("[green]Documentation is unchanged; nothing to publish.[/green]")
            self.logger.info("No documentation changes for %s; skipping commit and push", project)
            return PublishResult(pushed=False)

        message = commit_message(project, context.repo_slug or "")
        self.git.commit(self.deploy_dir, message)
        self.logger.info("Pushing '%s' to %s", message, self.target_branch)
        try:
            self.git.push(self.deploy_dir, self.target_branch)
        except PublishError as exc:
            raise PublishError(
                f"{actionable_error('push_rejected', branch=self.target_branch)}\n{exc}"
            ) from exc

        self.console.print(f"[green]Published documentation for {escape(project)}.[/green]")
        return PublishResult(pushed=True, commit_message=message)
