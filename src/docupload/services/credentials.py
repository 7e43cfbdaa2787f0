"""Deploy key decryption for docupload."""

import os
from pathlib import Path
from typing import Mapping, Tuple

from docupload.constants import KEY_DIR_MODE, KEY_FILE_MODE
from docupload.errors import PublishError
from docupload.errors_catalog import actionable_error
from docupload.models import DecryptionParams, RunContext


def decryption_param_names(secret_id: str) -> Tuple[str, str]:
    """Return the (key, iv) environment variable names for ``secret_id``."""
    return f"encrypted_{secret_id}_key", f"encrypted_{secret_id}_iv"


def resolve_decryption_params(secret_id: str, environ: Mapping[str, str]) -> DecryptionParams:
    if not secret_id:
        raise PublishError(actionable_error("missing_setting", name="SSH_KEY_TRAVIS_ID"))

    key_name, iv_name = decryption_param_names(secret_id)
    key = environ.get(key_name)
    if not key:
        raise PublishError(actionable_error("missing_decryption_param", name=key_name))
    iv = environ.get(iv_name)
    if not iv:
        raise PublishError(actionable_error("missing_decryption_param", name=iv_name))

    return DecryptionParams(key=key, iv=iv)


class CredentialMaterializer:
    """Decrypts the encrypted deploy key into an owner-only private key file."""

    def __init__(
        self,
        encrypted_key: str,
        key_path: str,
        command_runner,
        filesystem_service,
        logger,
    ):
        self.encrypted_key = encrypted_key
        self.key_path = os.path.expanduser(key_path)
        self.command_runner = command_runner
        self.filesystem_service = filesystem_service
        self.logger = logger

    def materialize(self, context: RunContext) -> Path:
        params = resolve_decryption_params(context.secret_id, context.secrets)

        if not os.path.isfile(self.encrypted_key):
            raise PublishError(actionable_error("encrypted_key_not_found", path=self.encrypted_key))

        key_dir = os.path.dirname(self.key_path) or "."
        try:
            self.filesystem_service.ensure_private_dir(key_dir, KEY_DIR_MODE)
        except (OSError, PublishError) as exc:
            raise PublishError(actionable_error("key_permissions", path=key_dir)) from exc

        # Decrypt beside the key and swap it in, so a failure never touches an existing key.
        try:
            temp_path = self.filesystem_service.create_private_temp_file(
                key_dir, prefix=".docupload-key-", mode=KEY_FILE_MODE
            )
        except OSError as exc:
            raise PublishError(actionable_error("key_permissions", path=key_dir)) from exc

        try:
            self._decrypt(params, temp_path)
            try:
                self.filesystem_service.set_permissions(temp_path, KEY_FILE_MODE)
                os.replace(temp_path, self.key_path)
            except (OSError, PublishError) as exc:
                raise PublishError(
                    f"{actionable_error('key_permissions', path=self.key_path)}\n{exc}"
                ) from exc
        finally:
            self._discard_temp_key(temp_path)

        return Path(self.key_path)

    def _decrypt(self, params: DecryptionParams, output_path: str):
        self.logger.info("Decrypting deploy key to %s", self.key_path)
        cmd = [
            "openssl",
            "aes-256-cbc",
            "-K",
            params.key,
            "-iv",
            params.iv,
            "-in",
            self.encrypted_key,
            "-out",
            output_path,
            "-d",
        ]
        try:
            self.command_runner.run(cmd, capture_output=True, redact=params.values())
        except PublishError as exc:
            raise PublishError(
                f"{actionable_error('decryption_failed', path=self.encrypted_key)}\n{exc}"
            ) from exc

        if not os.path.isfile(output_path) or os.path.getsize(output_path) == 0:
            raise PublishError(actionable_error("decryption_failed", path=self.encrypted_key))

    def _discard_temp_key(self, temp_path: str):
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError as exc:
                self.logger.warning("Could not remove partial key %s: %s", temp_path, exc)
