"""Access to the four request data sources handlers can require."""

from typing import Any, Mapping

REQUEST_DATA_SOURCES = ('params', 'query', 'body', 'headers')


def read_source(rec, source: str) -> Mapping[str, Any]:
    """
    Return the mapping behind a request data source.

    params are the URL rule variables, query the query string, headers the
    (case-insensitive) request headers and body the JSON object or, failing
    that, the submitted form.
    """
    if source == 'params':
        return rec.view_args or {}
    if source == 'query':
        return rec.args
    if source == 'headers':
        return rec.headers
    if source == 'body':
        payload = rec.get_json(silent=True)
        if isinstance(payload, dict):
            return payload
        return rec.form
    raise ValueError(f"Unknown request data source: {source}")
