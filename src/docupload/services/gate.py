"""Publish gate: decides whether this CI run should publish documentation."""

from docupload.models import GateDecision, GatePolicy, RunContext


def evaluate_gate(context: RunContext, policy: GatePolicy = GatePolicy()) -> GateDecision:
    """Check branch, pull-request flag and channel, stopping at the first mismatch.

    The pull-request flag must equal the policy's false literal exactly; an
    unset or unrecognised value is treated as a pull-request build.
    """
    if context.branch != policy.release_branch:
        return GateDecision.skip(
            "branch",
            f"Skipping doc step: branch is {context.branch or '<unset>'}, "
            f"docs are only published from {policy.release_branch}",
        )

    if context.pull_request != policy.pull_request_false_value:
        return GateDecision.skip(
            "pull_request",
            f"Skipping doc step: pull request flag is {context.pull_request or '<unset>'}",
        )

    if context.channel != policy.publish_channel:
        return GateDecision.skip(
            "channel",
            f"Skipping doc step: rust version is {context.channel or '<unset>'}",
        )

    return GateDecision.allow(f"Proceeding with doc step: rust version is {context.channel}")
