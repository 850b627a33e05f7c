"""Scaling-related environment variables, reported as-is"""

from __future__ import annotations

import os
from typing import Mapping, Optional, Sequence


def environment_collect(
    names: Sequence[str], environ: Optional[Mapping[str, str]] = None
) -> dict[str, str]:
    """
    Pick the configured variables that are set.

    Args:
        names: Variable names, in reporting order
        environ: Environment to read, defaults to os.environ

    Returns:
        Ordered mapping of the variables that are present
    """
    source = os.environ if environ is None else environ
    return {name: source[name] for name in names if name in source}
