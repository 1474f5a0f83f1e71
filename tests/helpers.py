"""Token builders shared by the tests."""

from __future__ import annotations

import json

from jwt_editor import base64url

HEADER = {"alg": "HS256", "typ": "JWT"}
PAYLOAD = {"sub": "1234567890", "name": "John Doe"}


def encode_json(obj) -> str:
    return base64url.encode_text(json.dumps(obj))


def make_token(header=None, payload=None, signature: str = "sig") -> str:
    header = HEADER if header is None else header
    payload = PAYLOAD if payload is None else payload
    return f"{encode_json(header)}.{encode_json(payload)}.{signature}"
