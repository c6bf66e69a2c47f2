"""Errors raised while preparing a load-generation run."""

from __future__ import annotations


class UbwError(Exception):
    """Base class for every error this package raises on purpose."""


class FailedToResolveDns(UbwError):
    """Looking up the target host failed."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"Failed to resolve DNS {cause}")


class FailedToReadBodyFromFile(UbwError):
    """The request body file could not be read."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"Failed to read body from file {cause}")


class NoWayToResolveHost(UbwError):
    """The arguments leave no address to connect to."""

    def __init__(self) -> None:
        super().__init__(
            "According to the args, there is no way to resolve the host. "
            "Please check your arguments."
        )


class RequirePostBody(UbwError):
    """A POST request needs exactly one body source."""

    def __init__(self) -> None:
        super().__init__("You need to specify a body for a POST request")


class UnsupportedMethod(UbwError):
    """Only GET and POST requests can be generated."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported method {method}")


class WeirdUrl(UbwError):
    """The URL has no usable port, i.e. it is neither HTTP nor HTTPS."""

    def __init__(self) -> None:
        super().__init__("The URL is not HTTP or HTTPS")


class InvalidHeaderList(UbwError):
    """A header given on the command line is not a valid HTTP header."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to parse header list {detail}")


class InvalidHeaderName(InvalidHeaderList):
    """A header name contains characters HTTP does not allow."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid header name {name!r}")


class InvalidHeaderValue(InvalidHeaderList):
    """A header value contains characters HTTP does not allow."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid header value {value!r}")