"""Redis cluster topology model, CLUSTER NODES decoder and admin helpers."""

from redistopology.admin import ClusterAdmin
from redistopology.decode import (
    DecodeResult,
    Diagnostic,
    decode_cluster_infos,
    decode_node_infos,
)
from redistopology.exceptions import (
    AddressParseError,
    ConfigValueError,
    NodeNotFoundError,
    ParseError,
    RedisTopologyError,
    SlotParseError,
    TransportError,
)
from redistopology.node import (
    Node,
    Nodes,
    is_master_with_no_slot,
    is_master_with_slot,
    is_slave,
    less_by_id,
    more_by_id,
)
from redistopology.slot import decode_slot_range, format_slots, slot_range_tokens

__all__ = [
    "connect",
    "ClusterAdmin",
    "Node",
    "Nodes",
    "DecodeResult",
    "Diagnostic",
    "decode_node_infos",
    "decode_cluster_infos",
    "decode_slot_range",
    "format_slots",
    "slot_range_tokens",
    "is_master_with_slot",
    "is_master_with_no_slot",
    "is_slave",
    "less_by_id",
    "more_by_id",
    "RedisTopologyError",
    "NodeNotFoundError",
    "ParseError",
    "SlotParseError",
    "AddressParseError",
    "TransportError",
    "ConfigValueError",
]

__version__ = "0.1.0"


async def connect(
    addresses: list[str],
    *,
    password: str | None = None,
    timeout: float = 10.0,
) -> ClusterAdmin:
    """Connect an admin to a redis cluster.

    Args:
        addresses: Member addresses in "host:port" format
        password: Cluster password
        timeout: Socket timeout in seconds

    Returns:
        A ClusterAdmin that has discovered the cluster members
    """
    admin = ClusterAdmin.from_addresses(addresses, password=password, timeout=timeout)
    try:
        await admin.connect()
    except Exception:
        await admin.close()
        raise
    return admin
