"""Actionable error catalog for docupload."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_setting": {
        "what": "Required setting {name} is not set.",
        "next": "Export {name} in the CI environment or define it in the project settings file.",
    },
    "missing_decryption_param": {
        "what": "Decryption parameter {name} is not set.",
        "next": "Re-encrypt the deploy key for this repository and check the secret id.",
    },
    "encrypted_key_not_found": {
        "what": "Encrypted deploy key not found: {path}",
        "next": "Commit the encrypted key or point `--encrypted-key` at it.",
    },
    "decryption_failed": {
        "what": "Could not decrypt the deploy key {path}.",
        "next": "Check that the key/iv variables belong to this ciphertext.",
    },
    "key_permissions": {
        "what": "Could not restrict permissions on {path}.",
        "next": "Make sure the key directory is owned by the CI user.",
    },
    "docs_not_found": {
        "what": "Generated documentation not found: {path}",
        "next": "Run the documentation build before publishing or set `--docs-dir`.",
    },
    "invalid_project_name": {
        "what": "Project name '{name}' is not a single directory name.",
        "next": "Use a plain name without path separators or `..`.",
    },
    "clone_failed": {
        "what": "Could not clone branch {branch} of {remote}.",
        "next": "Check that the branch exists and the deploy key has access.",
    },
    "replace_failed": {
        "what": "Could not replace documentation in {path}: {error}",
        "next": "Inspect the clone directory and file permissions, then re-run.",
    },
    "push_rejected": {
        "what": "Push to {branch} was rejected.",
        "next": "Another job may have published concurrently; re-run this job.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
