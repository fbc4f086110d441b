"""Initialization options and workspace settings passed to the server.

Both payloads are opaque to the launcher. They are copied unchanged, except
that ``typescript.tsdk`` is filled in when the caller left it out.
"""

import copy
from typing import Any, Callable, Dict, Mapping, Optional


TYPESCRIPT_SECTION = "typescript"
TSDK_KEY = "tsdk"


def inject_tsdk(
    payload: Optional[Mapping[str, Any]],
    tsdk: Callable[[], str],
) -> Dict[str, Any]:
    """
    Return a deep copy of payload with ``typescript.tsdk`` set.

    Args:
        payload: Initialization options or workspace settings (may be None)
        tsdk: Called only when the payload has no tsdk of its own

    Returns:
        New payload dict; the input is never modified
    """
    result = copy.deepcopy(dict(payload or {}))
    section = result.get(TYPESCRIPT_SECTION)
    if section is None:
        section = {}
        result[TYPESCRIPT_SECTION] = section
    elif not isinstance(section, dict):
        # Unknown shape, leave the caller's value alone
        return result

    if not section.get(TSDK_KEY):
        section[TSDK_KEY] = tsdk()
    return result
