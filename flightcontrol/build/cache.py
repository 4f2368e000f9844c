"""Artifact skip policy.

The presence of a regular file at the output path is the only cache
signal: no checksum, timestamp or metadata is consulted, so a corrupt
artifact counts as built until a rebuild is forced.
"""

from pathlib import Path


def should_skip(output_path: Path, force_rebuild: bool) -> bool:
    """Return True when a job may be skipped entirely.

    Args:
        output_path: Destination of the job's artifact.
        force_rebuild: Rebuild regardless of an existing artifact.
    """
    if force_rebuild:
        return False
    return Path(output_path).is_file()
