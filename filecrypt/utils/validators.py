"""
Validation Utilities
====================

Input validation for paths and transport-encoded data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


def validate_path_safe(
    path: str | Path,
    base_directory: Optional[Path] = None,
    must_exist: bool = False,
    allow_symlinks: bool = True,
) -> Path:
    """
    Validate a path and optionally require it to sit within a base directory.

    Args:
        path: The path to validate
        base_directory: If provided, path must be within this directory
        must_exist: If True, path must exist and be a regular file
        allow_symlinks: If False, symlinks are rejected

    Returns:
        Validated, resolved Path object

    Raises:
        ValidationError: If validation fails
    """
    if not str(path):
        raise ValidationError("Path cannot be empty")
    if "\x00" in str(path):
        raise ValidationError("Path contains invalid characters")

    raw = Path(path)
    if not allow_symlinks and raw.is_symlink():
        raise ValidationError("Symlinks are not allowed")

    try:
        validated_path = raw.resolve()
    except (OSError, RuntimeError) as e:
        raise ValidationError(f"Invalid path: {e}") from e

    if base_directory is not None:
        resolved_base = base_directory.resolve()
        if not validated_path.is_relative_to(resolved_base):
            raise ValidationError(f"Path must be within {resolved_base}")

    if must_exist:
        if not validated_path.exists():
            raise ValidationError(f"Path does not exist: {validated_path}")
        if not validated_path.is_file():
            raise ValidationError(f"Not a file: {validated_path}")

    return validated_path
