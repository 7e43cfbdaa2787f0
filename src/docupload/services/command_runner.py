"""Subprocess execution service for docupload."""

import subprocess
from typing import Iterable, List, Mapping, Optional

from docupload.errors import PublishError

REDACTED = "***"


def redact_text(text: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


class CommandRunner:
    """Runs external commands with consistent error handling.

    Strings passed in ``redact`` never reach the log or an error message.
    Commands run exactly once; failures are not retried.
    """

    def __init__(self, logger):
        self.logger = logger

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        redact: Iterable[str] = (),
    ) -> subprocess.CompletedProcess:
        secrets = [value for value in redact if value]
        cmd_str = redact_text(" ".join(cmd), secrets)
        self.logger.debug("Executing: %s", cmd_str)

        try:
            result = subprocess.run(
                cmd,
                text=True,
                capture_output=capture_output,
                cwd=cwd,
                env=dict(env) if env is not None else None,
            )
        except FileNotFoundError as exc:
            raise PublishError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except OSError as exc:
            message = redact_text(str(exc), secrets)
            # exc may echo argv
            raise PublishError(f"Failed to execute command: {cmd_str}. {message}") from None

        if capture_output and result.stdout:
            self.logger.debug("Command output: %s", redact_text(result.stdout.strip(), secrets))

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if capture_output else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{redact_text(stderr, secrets)}"

        if check:
            raise PublishError(message)

        self.logger.debug(message)
        return result
