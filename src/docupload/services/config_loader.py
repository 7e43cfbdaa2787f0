"""Configuration loaders for docupload."""

import shlex
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from docupload.constants import SETTINGS_KEYS
from docupload.errors import PublishError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults and the project settings file."""

    SUPPORTED_KEYS = {
        "docs_dir",
        "encrypted_key",
        "key_path",
        "deploy_dir",
        "target_branch",
        "release_branch",
        "publish_channel",
        "remote_template",
        "bot_name",
        "bot_email",
        "settings_file",
        "verbose",
        "log_file",
        "dry_run",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise PublishError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise PublishError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise PublishError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise PublishError(f"Unknown configuration keys: {unknown_list}")

        return parsed

    def load_settings_file(self, settings_path: Optional[str]) -> Dict[str, str]:
        """Read ``NAME=value`` assignments from a shell-style settings file.

        Only PROJECT_NAME, DOCS_REPO and SSH_KEY_TRAVIS_ID are recognised;
        any other line is ignored. A missing file yields no settings.
        """
        if not settings_path:
            return {}

        path = Path(settings_path)
        if not path.is_file():
            return {}

        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise PublishError(f"Could not read settings file '{settings_path}': {exc}") from exc

        settings: Dict[str, str] = {}
        for raw_line in lines:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export ") :].strip()

            name, sep, raw_value = line.partition("=")
            name = name.strip()
            # Other shell statements (set -e, bare exports, tests) are not settings.
            if not sep or name not in SETTINGS_KEYS:
                continue

            try:
                tokens = shlex.split(raw_value, comments=True)
            except ValueError as exc:
                raise PublishError(
                    f"Invalid value for {name} in settings file '{settings_path}': {exc}"
                ) from exc
            settings[name] = " ".join(tokens)

        return settings
