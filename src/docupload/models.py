"""Shared domain models for docupload."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .constants import (
    DEFAULT_PUBLISH_CHANNEL,
    DEFAULT_RELEASE_BRANCH,
    PULL_REQUEST_FALSE_VALUE,
)


@dataclass(frozen=True)
class RunContext:
    """Facts about the CI run, captured once at startup."""

    branch: Optional[str]
    pull_request: Optional[str]
    channel: Optional[str]
    repo_slug: Optional[str]
    project_name: Optional[str]
    docs_repo: Optional[str]
    secret_id: Optional[str]
    # Snapshot of the encrypted_<id>_key/iv variables; excluded from repr.
    secrets: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}),
        repr=False,
        compare=False,
    )


@dataclass(frozen=True)
class GatePolicy:
    release_branch: str = DEFAULT_RELEASE_BRANCH
    publish_channel: str = DEFAULT_PUBLISH_CHANNEL
    pull_request_false_value: str = PULL_REQUEST_FALSE_VALUE


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the publish gate: proceed, or skip with a reason tag."""

    proceed: bool
    reason: Optional[str] = None
    message: str = ""

    @classmethod
    def allow(cls, message: str) -> "GateDecision":
        return cls(proceed=True, reason=None, message=message)

    @classmethod
    def skip(cls, reason: str, message: str) -> "GateDecision":
        return cls(proceed=False, reason=reason, message=message)


@dataclass(frozen=True)
class DecryptionParams:
    key: str = field(repr=False)
    iv: str = field(repr=False)

    def values(self):
        return (self.key, self.iv)


@dataclass(frozen=True)
class PublishResult:
    pushed: bool
    commit_message: Optional[str] = None
