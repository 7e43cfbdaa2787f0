"""Builds the run context from the CI environment."""

import os
from types import MappingProxyType
from typing import Mapping, Optional

from docupload.constants import (
    ENV_BRANCH,
    ENV_CHANNEL,
    ENV_DOCS_REPO,
    ENV_PROJECT_NAME,
    ENV_PULL_REQUEST,
    ENV_REPO_SLUG,
    ENV_SECRET_ID,
)
from docupload.models import RunContext
from docupload.services.credentials import decryption_param_names


def build_run_context(
    environ: Optional[Mapping[str, str]] = None,
    settings: Optional[Mapping[str, str]] = None,
) -> RunContext:
    """Snapshot everything the run needs from the environment.

    ``settings`` come from the project settings file and win over the
    environment for the keys they define.
    """
    if environ is None:
        environ = os.environ
    merged = dict(environ)
    merged.update(settings or {})

    secret_id = merged.get(ENV_SECRET_ID) or None
    secrets = {}
    if secret_id:
        for name in decryption_param_names(secret_id):
            if name in merged:
                secrets[name] = merged[name]

    return RunContext(
        branch=merged.get(ENV_BRANCH),
        pull_request=merged.get(ENV_PULL_REQUEST),
        channel=merged.get(ENV_CHANNEL),
        repo_slug=merged.get(ENV_REPO_SLUG),
        project_name=merged.get(ENV_PROJECT_NAME) or None,
        docs_repo=merged.get(ENV_DOCS_REPO) or None,
        secret_id=secret_id,
        secrets=MappingProxyType(secrets),
    )
