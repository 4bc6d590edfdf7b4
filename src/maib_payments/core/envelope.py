"""
The ``{"result": ..., "errors": [...]}`` envelope wrapping every API response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Mapping, TypeVar, Union

from .errors import ApiError, ApiResponseError, DecodeError, MalformedResponseError

__all__ = [
    "ApiFailure",
    "ApiResponse",
    "ApiSuccess",
    "decode_envelope",
]

R = TypeVar("R")


@dataclass(frozen=True)
class ApiSuccess(Generic[R]):
    result: R

    def unwrap(self) -> R:
        return self.result


@dataclass(frozen=True)
class ApiFailure:
    errors: List[ApiError]

    def unwrap(self):
        raise ApiResponseError(self.errors)


ApiResponse = Union[ApiSuccess[R], ApiFailure]


def _decode_errors(raw: Any) -> List[ApiError]:
    if not isinstance(raw, list):
        raise DecodeError(f"'errors' must be a list, got {type(raw).__name__}")
    errors: List[ApiError] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise DecodeError(f"Error entry must be an object, got {entry!r}")
        try:
            errors.append(ApiError.from_wire(entry))
        except KeyError as exc:
            raise DecodeError(f"Error entry is missing {exc.args[0]!r}") from exc
    return errors


def decode_envelope(
    payload: Any,
    parse_result: Callable[[Mapping[str, Any]], R],
) -> ApiResponse[R]:
    """
    Turn a decoded JSON body into :class:`ApiSuccess` or :class:`ApiFailure`.

    Exactly one of ``result`` and a non-empty ``errors`` must be present;
    anything else raises :class:`MalformedResponseError`.
    """
    if not isinstance(payload, Mapping):
        raise DecodeError(f"Response body must be a JSON object, got {type(payload).__name__}")

    raw_result = payload.get("result")
    raw_errors = payload.get("errors")
    has_errors = raw_errors is not None and raw_errors != []

    if raw_result is not None and has_errors:
        raise MalformedResponseError("Response carries both a result and errors")
    if raw_result is None and not has_errors:
        raise MalformedResponseError("Response carries neither a result nor errors")

    if has_errors:
        return ApiFailure(_decode_errors(raw_errors))

    if not isinstance(raw_result, Mapping):
        raise DecodeError(f"'result' must be an object, got {type(raw_result).__name__}")
    try:
        return ApiSuccess(parse_result(raw_result))
    except KeyError as exc:
        raise DecodeError(f"Result is missing field {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Result could not be decoded: {exc}") from exc
