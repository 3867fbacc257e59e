import pytest

from handlerchain.core.errors import (
    CodedError,
    ErrorCode,
    HandlerResolutionError,
    MiddlewareNextError,
    UnknownError,
    as_coded_error,
)
from handlerchain.utils.helpers import parse_pairs, resolve_handler


def test_middleware_next_error_is_distinguishable() -> None:
    err = MiddlewareNextError("next() called multiple times")
    assert isinstance(err, CodedError)
    assert err.code == "slack_bolt_middleware_next_error"
    assert str(err) == "next() called multiple times"


def test_as_coded_error_keeps_coded_and_wraps_plain() -> None:
    coded = MiddlewareNextError("x")
    assert as_coded_error(coded) is coded

    original = KeyError("missing")
    wrapped = as_coded_error(original)
    assert isinstance(wrapped, UnknownError)
    assert wrapped.code == ErrorCode.UNKNOWN_ERROR
    assert wrapped.original is original


def test_as_coded_error_uses_type_name_for_empty_message() -> None:
    assert str(as_coded_error(RuntimeError())) == "RuntimeError"


def test_resolve_handler_follows_dotted_attributes() -> None:
    assert resolve_handler("os.path:join") is __import__("os").path.join
    assert resolve_handler("handlerchain.core.chain:Chain.use").__name__ == "use"


@pytest.mark.parametrize(
    "path",
    ["no_colon", "os.path:", ":join", "definitely_missing_module_xyz:fn", "os.path:nope", "os:sep"],
)
def test_resolve_handler_rejects_bad_paths(path: str) -> None:
    with pytest.raises(HandlerResolutionError) as exc_info:
        resolve_handler(path)
    assert exc_info.value.code == ErrorCode.HANDLER_RESOLUTION_ERROR


def test_parse_pairs() -> None:
    assert parse_pairs(["a=1", "b=x=y", "c="]) == {"a": "1", "b": "x=y", "c": ""}
    assert parse_pairs(None) == {}
    with pytest.raises(ValueError):
        parse_pairs(["novalue"])
