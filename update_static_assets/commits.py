"""Commit message generation for asset updates."""

from __future__ import annotations

from .utils import leading_int


def _is_greater(latest, current) -> bool:
    return latest is not None and current is not None and latest > current


def classify_update(current_version: str, latest_version: str) -> str:
    """Classify a version change as ``major``, ``minor`` or ``patch``."""
    current = current_version.split(".")
    latest = latest_version.split(".")

    def component(parts, index):
        return leading_int(parts[index]) if index < len(parts) else None

    if _is_greater(component(latest, 0), component(current, 0)):
        return "major"
    if _is_greater(component(latest, 1), component(current, 1)):
        return "minor"
    return "patch"


def generate_commit_message(
    asset_name: str,
    current_version: str,
    latest_version: str,
) -> str:
    """Build a commit message in the format Dependabot uses for updates."""
    update_kind = classify_update(current_version, latest_version)
    lines = [
        f"Update {asset_name}",
        "",
        f"Updates {asset_name} to version {latest_version}.",
        "",
        "---",
        "updated-dependencies:",
        f"- dependency-name: {asset_name}",
        "  dependency-type: direct:production",
        f"  update-type: version-update:semver-{update_kind}",
        "...",
        "",
        "",
    ]
    return "\n".join(lines)
