"""Decoders for CLUSTER NODES and CLUSTER INFO output.

Both decoders are best effort: malformed fields are logged and reported as
diagnostics next to whatever could be decoded, they never abort the batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from redistopology.exceptions import AddressParseError, ParseError
from redistopology.node import Node, Nodes
from redistopology.slot import decode_slot_range

logger = logging.getLogger(__name__)

# id, address, flags, master, ping-sent, pong-recv, config-epoch, link-state
MIN_NODE_FIELDS = 8

T = TypeVar("T")


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while decoding."""

    line: int
    message: str
    node_id: str = ""


@dataclass
class DecodeResult(Generic[T]):
    """Decoded value plus the problems skipped to produce it."""

    value: T
    diagnostics: list[Diagnostic] = field(default_factory=list)


def split_host_port(address: str) -> tuple[str, str]:
    """Split "host:port" or "[v6host]:port" into host and port."""
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise AddressParseError(address, "missing ']'")
        if address[end + 1 : end + 2] != ":":
            raise AddressParseError(address, "missing port")
        return address[1:end], address[end + 2 :]

    if ":" not in address:
        raise AddressParseError(address, "missing port")
    host, port = address.rsplit(":", 1)
    if ":" in host:
        raise AddressParseError(address, "too many colons")
    return host, port


def _parse_int(value: str) -> int | None:
    digits = value[1:] if value.startswith("-") else value
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(value)


def decode_node_line(line: str, line_no: int = 0) -> DecodeResult[Node | None]:
    """Decode one CLUSTER NODES line; value is None for short lines."""
    values = line.split()
    if len(values) < MIN_NODE_FIELDS:
        logger.debug("Not enough values in line split, ignoring line: %r", line)
        return DecodeResult(None)

    diagnostics: list[Diagnostic] = []
    node = Node(id=values[0])

    # Drop the cluster bus port (and hostname) after '@'.
    address = values[1].split("@", 1)[0]
    try:
        node.ip, node.port = split_host_port(address)
    except AddressParseError as e:
        logger.error(
            "Error while decoding node info for node %r, cannot split ip:port (%r): %s",
            node.id,
            values[1],
            e,
        )
        diagnostics.append(Diagnostic(line_no, str(e), node.id))

    node.set_role(values[2])
    node.set_failure_status(values[2])
    node.set_referent_master(values[3])

    counters = (("ping_sent", values[4]), ("pong_recv", values[5]), ("config_epoch", values[6]))
    for attr, raw in counters:
        parsed = _parse_int(raw)
        if parsed is None:
            logger.debug("Node %r has a non numeric %s: %r", node.id, attr, raw)
            diagnostics.append(Diagnostic(line_no, f"invalid {attr} {raw!r}", node.id))
        else:
            setattr(node, attr, parsed)

    node.set_link_status(values[7])

    for token in values[MIN_NODE_FIELDS:]:
        try:
            slots, importing, migrating = decode_slot_range(token)
        except ParseError as e:
            logger.debug("Skipping slot token of node %r: %s", node.id, e)
            diagnostics.append(Diagnostic(line_no, str(e), node.id))
            continue
        node.slots.extend(slots)
        if importing is not None:
            node.importing_slots[importing.slot] = importing.from_node_id
        if migrating is not None:
            node.migrating_slots[migrating.slot] = migrating.to_node_id

    return DecodeResult(node, diagnostics)


def decode_node_infos(raw: str) -> DecodeResult[Nodes]:
    """Decode the full CLUSTER NODES output, one node per line, in line order.

    Node ids are unique: a later line repeating an id is skipped.
    """
    nodes: dict[str, Node] = {}
    diagnostics: list[Diagnostic] = []

    for line_no, line in enumerate(raw.split("\n"), start=1):
        result = decode_node_line(line.rstrip("\r"), line_no)
        node = result.value
        if node is not None and node.id in nodes:
            logger.warning("Duplicate node %r on line %d, keeping the first one", node.id, line_no)
            diagnostics.append(Diagnostic(line_no, f"duplicate node id {node.id!r}", node.id))
            continue
        diagnostics.extend(result.diagnostics)
        if node is not None:
            nodes[node.id] = node

    return DecodeResult(Nodes(nodes.values()), diagnostics)


def decode_cluster_infos(raw: str) -> DecodeResult[dict[str, str]]:
    """Decode "key:value" lines (CLUSTER INFO, INFO) into a flat mapping.

    Only the first colon separates key from value.
    """
    infos: dict[str, str] = {}
    diagnostics: list[Diagnostic] = []

    for line_no, line in enumerate(raw.split("\n"), start=1):
        line = line.rstrip("\r")
        key, sep, value = line.partition(":")
        if not sep:
            logger.debug("Not enough values in line split, ignoring line: %r", line)
            if line.strip() and not line.startswith("#"):
                diagnostics.append(Diagnostic(line_no, f"no ':' in line {line!r}"))
            continue
        infos[key] = value

    return DecodeResult(infos, diagnostics)
