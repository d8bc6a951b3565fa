"""Endpoint template handling.

Templates are API paths with ``:name`` placeholders, e.g.
``tv/:id/season/:season_number``. This module turns a template plus a
parameter mapping into a concrete path and the leftover (residual)
parameters that travel as query string or body.

Path substitution and residual computation both go through
PLACEHOLDER_PATTERN, so they always agree on which keys a template consumes.
"""

import re
from collections.abc import Mapping
from typing import Any

from moviedb.models import Params

PLACEHOLDER_PATTERN = re.compile(r":([a-z_]+)", re.IGNORECASE)


def placeholders(template: str) -> list[str]:
    """Return the distinct placeholder names in *template*, in path order.

    Args:
        template: Endpoint template such as ``"movie/:id/images"``.

    Returns:
        Placeholder names without the leading colon.
    """
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(template)))


def normalize_params(template: str, params: Params) -> Mapping[str, Any]:
    """Resolve a scalar-or-mapping params argument into a mapping.

    A mapping is returned unchanged and ``None`` becomes an empty dict. A
    scalar binds to the template's placeholder when there is exactly one;
    with zero or several placeholders the binding is ambiguous and an empty
    dict is returned.

    Args:
        template: Endpoint template the params are meant for.
        params: A bare value (``550``) or a full mapping.

    Returns:
        A parameter mapping.
    """
    if isinstance(params, Mapping):
        return params
    if params is None:
        return {}
    names = placeholders(template)
    if len(names) == 1:
        return {names[0]: params}
    return {}


def compile_endpoint(
    template: str, params: Mapping[str, Any]
) -> tuple[str, dict[str, Any]]:
    """Substitute placeholders and split off the residual parameters.

    Placeholders without a matching key are left in the path verbatim.

    Args:
        template: Endpoint template.
        params: Full parameter mapping.

    Returns:
        ``(path, residual)`` where residual is *params* minus every key named
        by a placeholder in *template*.
    """
    names = set(placeholders(template))

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in params:
            return str(params[name])
        return match.group(0)

    path = PLACEHOLDER_PATTERN.sub(substitute, template)
    residual = {key: value for key, value in params.items() if key not in names}
    return path, residual
