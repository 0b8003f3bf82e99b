"""Placeholder expansion for user-supplied text fields (core domain)."""

from __future__ import annotations

import re
from typing import Mapping, Optional

# ${NAME} or $NAME, the same forms CI job environments use.
_PLACEHOLDER = re.compile(r"\$\{([A-Za-z0-9_]+)\}|\$([A-Za-z0-9_]+)")


def expand(template: Optional[str], bindings: Mapping[str, str]) -> str:
    """Replace ``$NAME`` / ``${NAME}`` with values from ``bindings``.

    Unknown names are left exactly as written.
    """

    if not template:
        return ""

    def _replace(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = bindings.get(name)
        if value is None:
            return match.group(0)
        return value

    return _PLACEHOLDER.sub(_replace, template)
