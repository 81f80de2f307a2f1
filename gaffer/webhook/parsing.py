"""Decode GitLab merge request hook bodies."""

from __future__ import annotations

import msgspec

from .errors import PayloadError
from .models import MergeRequestEvent, MergeRequestHookPayload

_MERGE_REQUEST_KIND = "merge_request"

_decoder = msgspec.json.Decoder(MergeRequestHookPayload)


def parse_merge_request_event(body: bytes) -> MergeRequestEvent:
    """Decode a raw webhook body into a :class:`MergeRequestEvent`.

    Raises
    ------
    PayloadError
        If the body is empty, is not valid JSON, lacks required fields, or
        describes an object other than a merge request.

    """
    if not body.strip():
        raise PayloadError.empty_body()
    try:
        payload = _decoder.decode(body)
    except msgspec.DecodeError as exc:
        raise PayloadError(str(exc)) from exc
    if payload.object_kind != _MERGE_REQUEST_KIND:
        raise PayloadError.wrong_kind(payload.object_kind)
    return MergeRequestEvent.from_payload(payload)
