"""JSON request parameters and the default JSON codec."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from rest_harness.exceptions import DecodeError

if TYPE_CHECKING:
    from rest_harness.interfaces import JsonCodec


class StdlibJsonCodec:
    """JSON codec backed by the standard library `json` module."""

    __slots__ = ()

    def dumps(self, value: Any) -> str:
        return json.dumps(value, separators=(",", ":"))

    def loads(self, text: str) -> Any:
        return json.loads(text)


DEFAULT_CODEC = StdlibJsonCodec()


class JsonParams(Mapping[str, Any]):
    """Parameters sent as a JSON object in the request body.

    Equality compares content only.

    Example:
        >>> params = JsonParams(grant_type="password", username="alice")
        >>> params.serialize()
        '{"grant_type":"password","username":"alice"}'

    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        merged = dict(values or {})
        merged.update(kwargs)
        for key in merged:
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be strings, got {key!r}")
        self._values = merged

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"JsonParams({self._values!r})"

    def serialize(self, codec: JsonCodec = DEFAULT_CODEC) -> str:
        """Render the parameters as a JSON object string."""
        return codec.dumps(self._values)


def decode_json_body(content: bytes, codec: JsonCodec = DEFAULT_CODEC) -> Any:
    """Decode a response body to a JSON value.

    An empty body decodes to an empty list.

    Raises:
        DecodeError: If the body is not UTF-8 or not valid JSON. The raw
            bytes are attached.

    """
    if not content.strip():
        return []
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError("API seems to have returned non-UTF-8 garbage", body=content) from e
    try:
        return codec.loads(text)
    except ValueError as e:
        raise DecodeError(f"Failed to parse JSON: {text}", body=content) from e
