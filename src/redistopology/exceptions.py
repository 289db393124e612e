"""Exceptions for redis cluster topology."""


class RedisTopologyError(Exception):
    """Base exception for redis topology errors."""

    pass


class NodeNotFoundError(RedisTopologyError):
    """No node matched a lookup."""

    pass


class ParseError(RedisTopologyError):
    """A single field or token from the introspection output could not be parsed."""

    pass


class SlotParseError(ParseError):
    """Malformed slot range token."""

    token: str

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        super().__init__(f"invalid slot token {token!r}: {reason}")


class AddressParseError(ParseError):
    """Address is not in host:port form."""

    address: str

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        super().__init__(f"cannot split host:port {address!r}: {reason}")


class TransportError(RedisTopologyError):
    """Error talking to a cluster member."""

    pass


class ConfigValueError(RedisTopologyError):
    """A size-valued config setting has an unparseable value."""

    key: str
    value: str

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"invalid size value for {key}: {value!r}")
