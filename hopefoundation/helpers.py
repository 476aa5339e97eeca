# hopefoundation/helpers.py
"""
hopefoundation.helpers: small request/response utilities shared by blueprints.

- request_payload: JSON body, falling back to form fields
- json_response / json_ok / json_error: no-store JSON responses
- storage_error: StorageError -> {ok: false, error} with its status
"""
from __future__ import annotations

from typing import Any, Dict, Optional, cast

from flask import jsonify, request

from hopefoundation.services.storage import StorageError


def request_payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return cast(Dict[str, Any], data)
    if request.form:
        return cast(Dict[str, Any], request.form.to_dict(flat=True))
    return {}


def json_response(payload: Dict[str, Any], status: int = 200):
    resp = jsonify(payload)
    resp.status_code = int(status)
    resp.headers.setdefault("Cache-Control", "no-store, no-cache, must-revalidate, max-age=0")
    return resp


def json_ok(payload: Optional[Dict[str, Any]] = None, status: int = 200):
    payload = dict(payload or {})
    payload.setdefault("ok", True)
    return json_response(payload, status)


def json_error(message: str, status: int = 400, extra: Optional[Dict[str, Any]] = None):
    body: Dict[str, Any] = {"ok": False, "error": message}
    if extra:
        body.update(extra)
    return json_response(body, status)


def storage_error(err: StorageError):
    return json_error(err.message, err.status)
