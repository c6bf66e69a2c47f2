import pytest

from ubw.errors import (
    FailedToReadBodyFromFile,
    FailedToResolveDns,
    InvalidHeaderList,
    InvalidHeaderName,
    InvalidHeaderValue,
    NoWayToResolveHost,
    RequirePostBody,
    UbwError,
    UnsupportedMethod,
    WeirdUrl,
)


def test_no_way_to_resolve_host_message():
    assert str(NoWayToResolveHost()) == (
        "According to the args, there is no way to resolve the host. "
        "Please check your arguments."
    )


def test_require_post_body_message():
    assert str(RequirePostBody()) == "You need to specify a body for a POST request"


def test_weird_url_message():
    assert str(WeirdUrl()) == "The URL is not HTTP or HTTPS"


def test_unsupported_method_keeps_method():
    error = UnsupportedMethod("PUT")
    assert error.method == "PUT"
    assert str(error).startswith("Unsupported method ")
    assert str(error).endswith("PUT")


def test_dns_failure_keeps_cause():
    cause = OSError("lookup failed")
    error = FailedToResolveDns(cause)
    assert error.cause is cause
    assert str(error).startswith("Failed to resolve DNS ")
    assert "lookup failed" in str(error)


def test_body_file_failure_keeps_cause():
    cause = FileNotFoundError("missing.bin")
    error = FailedToReadBodyFromFile(cause)
    assert error.cause is cause
    assert str(error).startswith("Failed to read body from file ")


@pytest.mark.parametrize(
    "error",
    [InvalidHeaderName("bad name"), InvalidHeaderValue("bad\nvalue")],
)
def test_header_errors_are_header_list_errors(error):
    assert isinstance(error, InvalidHeaderList)
    assert isinstance(error, UbwError)
    assert str(error).startswith("Failed to parse header list ")


def test_header_name_error_keeps_name():
    error = InvalidHeaderName("x y")
    assert error.name == "x y"
    assert "x y" in str(error)