"""Artifact naming: derives the (owner, name) identity of a repository locator."""

from flightcontrol.core.exceptions.errors import MalformedLocatorError
from flightcontrol.models.job import ArtifactIdentity

# Trailing tokens removed from the name segment, longest first
STRIPPED_EXTENSIONS = (".tar.gz", ".tgz", ".tar", ".zip", ".jar", ".git")


def _strip_extensions(segment: str) -> str:
    lowered = segment.lower()
    changed = True
    while changed:
        changed = False
        for ext in STRIPPED_EXTENSIONS:
            if lowered.endswith(ext):
                lowered = lowered[: -len(ext)]
                changed = True
                break
    return lowered


def name(locator: str) -> ArtifactIdentity:
    """Derive the artifact identity of a locator.

    The last two path segments become owner and name. Backslashes count as
    separators, an scp-style ``host:owner`` segment keeps only the owner, and
    archive/VCS extensions are stripped from the name. Both parts are
    lowercased so the same locator always yields the same filename.

    Args:
        locator: Repository URL or path.

    Returns:
        The repository's ArtifactIdentity.

    Raises:
        MalformedLocatorError: If fewer than two usable segments exist.
    """
    normalized = locator.strip().replace("\\", "/").rstrip("/")
    segments = [s for s in normalized.split("/") if s]
    if len(segments) < 2:
        raise MalformedLocatorError(
            "Unable to derive repository owner and name, is the locator valid?",
            locator=locator,
        )

    owner = segments[-2].rsplit(":", 1)[-1].lower()
    repo_name = _strip_extensions(segments[-1])

    if not owner or not repo_name or repo_name in (".", ".."):
        raise MalformedLocatorError(
            "Locator has an empty owner or name segment",
            locator=locator,
        )

    return ArtifactIdentity(owner=owner, name=repo_name)
