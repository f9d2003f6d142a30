"""
Glob expansion and matching for document set patterns.

Patterns use globstar semantics (`**` spans directories), braces and
extended globs; dot-files are not matched unless the pattern names them.
"""

from __future__ import annotations

import os
import re

from wcmatch import glob

from ..core.errors import PatternError

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB


def _check_pattern(pattern: object) -> str:
    if not isinstance(pattern, str) or not pattern:
        raise PatternError(pattern)
    return pattern


def expand(pattern: str, root_dir: str) -> set[str]:
    """
    Expand `pattern` against `root_dir` into absolute file paths.

    Raises:
        PatternError: If the pattern is empty or rejected by the matcher
    """
    pattern = _check_pattern(pattern)
    try:
        matches = glob.glob(pattern, flags=GLOB_FLAGS | glob.NODIR, root_dir=root_dir)
    except (ValueError, re.error) as e:
        raise PatternError(pattern, str(e)) from e

    return {os.path.abspath(os.path.join(root_dir, match)) for match in matches}


def matches(relative_path: str, pattern: str) -> bool:
    """
    Check a project-relative path (forward slashes) against a pattern.

    Raises:
        PatternError: If the pattern is empty or rejected by the matcher
    """
    pattern = _check_pattern(pattern)
    try:
        return glob.globmatch(relative_path, pattern, flags=GLOB_FLAGS)
    except (ValueError, re.error) as e:
        raise PatternError(pattern, str(e)) from e


def validate_pattern(pattern: object) -> str:
    """Return `pattern` if it is usable, else raise PatternError."""
    pattern = _check_pattern(pattern)
    try:
        glob.translate(pattern, flags=GLOB_FLAGS)
    except (ValueError, re.error) as e:
        raise PatternError(pattern, str(e)) from e
    return pattern
