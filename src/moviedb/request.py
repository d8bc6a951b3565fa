"""Request construction.

build_request() turns a logical call (verb, endpoint template, params) into a
RequestDescriptor: the concrete URL, optional JSON body and headers, plus any
per-call transport options. It does no I/O; MovieDb hands the descriptor to
the throttle, which performs the call.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from moviedb.endpoint import compile_endpoint, normalize_params, placeholders
from moviedb.models import HttpMethod, Params
from moviedb.utils.json import dumps_body

# Sentinel path segment the API resolves to the account behind the session.
CURRENT_ACCOUNT = "{account_id}"

JSON_HEADERS = {"Content-Type": "application/json;charset=utf-8"}


@dataclass
class RequestDescriptor:
    """A fully formed request, ready to be sent with httpx."""

    method: HttpMethod
    url: str
    path: str
    content: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    def to_httpx(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.AsyncClient.request``.

        Transport options are merged last and replace only the keys they name.
        Headers are merged by name, so an extra header in the options keeps the
        JSON Content-Type of a body request.
        """
        kwargs: dict[str, Any] = {"method": self.method.value, "url": self.url}
        if self.content is not None:
            kwargs["content"] = self.content
        options = dict(self.options)
        headers = {**self.headers, **dict(options.pop("headers", None) or {})}
        if headers:
            kwargs["headers"] = headers
        kwargs.update(options)
        return kwargs


def deep_merge(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *defaults*.

    Values from *overrides* win; nested mappings on both sides are merged.
    """
    merged: dict[str, Any] = dict(defaults)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_auth_params(
    template: str,
    params: Mapping[str, Any],
    api_key: str,
    session_id: str | None = None,
) -> dict[str, Any]:
    """Merge credentials into *params* and apply the current-account default.

    When a session is live and the template takes an ``:id`` that the caller
    left out, ``id`` is set to the ``{account_id}`` sentinel. An explicit
    ``id=None`` counts as left out and gets the sentinel too.
    """
    defaults: dict[str, Any] = {"api_key": api_key}
    if session_id:
        defaults["session_id"] = session_id
    merged = deep_merge(defaults, params)
    if session_id and "id" in placeholders(template) and merged.get("id") is None:
        merged["id"] = CURRENT_ACCOUNT
    return merged


def build_request(
    method: HttpMethod,
    template: str,
    params: Params,
    *,
    api_key: str,
    base_url: str,
    session_id: str | None = None,
    options: Mapping[str, Any] | None = None,
) -> RequestDescriptor:
    """Build the request for one API call.

    GET requests carry the residual parameters in the query string; every
    other verb sends them as a JSON body.

    Args:
        method: HTTP verb.
        template: Endpoint template, relative to *base_url*.
        params: Scalar or mapping params as given by the caller.
        api_key: API key sent with every call.
        base_url: API root, including the trailing slash.
        session_id: Session id to send, if one is live.
        options: Extra ``httpx`` request keywords, applied last.

    Returns:
        The assembled RequestDescriptor.
    """
    normalized = normalize_params(template, params)
    merged = merge_auth_params(template, normalized, api_key, session_id)
    path, residual = compile_endpoint(template, merged)

    url = base_url + path
    content = None
    headers: dict[str, str] = {}
    if method == HttpMethod.GET:
        url += "?" + str(httpx.QueryParams(residual))
    else:
        content = dumps_body(residual)
        headers.update(JSON_HEADERS)

    return RequestDescriptor(
        method=method,
        url=url,
        path=path,
        content=content,
        headers=headers,
        options=dict(options or {}),
    )
