import re

ADDRESS_PATTERN = re.compile(r'^0x[0-9a-fA-F]{40}$')


class RoastError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(RoastError):
    status_code = 400


class UpstreamUnavailable(RoastError):
    status_code = 502


class EmptyGeneration(RoastError):
    status_code = 502


class InternalError(RoastError):
    status_code = 500


def validate_address(raw: object) -> str:
    """Trim and check an inbound address; anything but 0x + 40 hex chars is rejected."""
    address = raw.strip() if isinstance(raw, str) else ''
    if not ADDRESS_PATTERN.match(address):
        raise InvalidInput('Invalid address format')
    return address


def describe_error(exc: BaseException) -> str:
    # httpx timeouts and some transport errors stringify to ''
    return str(exc) or type(exc).__name__
