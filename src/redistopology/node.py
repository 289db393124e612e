"""Cluster node model and node collection queries."""

import functools
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import overload

from redistopology.constants import (
    DEFAULT_REDIS_PORT,
    FAIL_STATUSES,
    LINK_STATE_CONNECTED,
    LINK_STATE_DISCONNECTED,
    MASTER_ROLE,
    NONE_ROLE,
    SLAVE_ROLE,
)
from redistopology.exceptions import NodeNotFoundError
from redistopology.slot import Slot, format_slots


def join_host_port(host: str, port: str) -> str:
    """Join host and port, bracketing IPv6 hosts."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


@dataclass
class Node:
    """One member of the cluster as reported by CLUSTER NODES."""

    id: str = ""
    ip: str = ""
    port: str = DEFAULT_REDIS_PORT
    role: str = ""
    link_state: str = ""
    master_referent: str = ""
    fail_status: list[str] = field(default_factory=list)
    ping_sent: int = 0
    pong_recv: int = 0
    config_epoch: int = 0
    slots: list[Slot] = field(default_factory=list)
    migrating_slots: dict[Slot, str] = field(default_factory=dict)
    importing_slots: dict[Slot, str] = field(default_factory=dict)
    server_start_time: datetime | None = None
    # Lookup key of the external object (e.g. "namespace/pod") backing this node.
    bound_resource: str | None = None

    def set_role(self, flags: str) -> None:
        """Set the explicit role from a comma separated flags field."""
        self.role = ""
        for flag in flags.split(","):
            if flag in (MASTER_ROLE, SLAVE_ROLE):
                self.role = flag

    def get_role(self) -> str:
        """Return the explicit role, or infer it from replication and slots."""
        if self.role in (MASTER_ROLE, SLAVE_ROLE):
            return self.role
        if self.master_referent:
            return SLAVE_ROLE
        if self.slots:
            return MASTER_ROLE
        return NONE_ROLE

    def set_link_status(self, status: str) -> None:
        """Set the link state; an unknown value clears it."""
        self.link_state = ""
        if status in (LINK_STATE_CONNECTED, LINK_STATE_DISCONNECTED):
            self.link_state = status

    def set_failure_status(self, flags: str) -> None:
        """Keep the recognised failure flags from a comma separated flags field."""
        self.fail_status = []
        for flag in flags.split(","):
            if flag in FAIL_STATUSES and flag not in self.fail_status:
                self.fail_status.append(flag)

    def set_referent_master(self, ref: str) -> None:
        """Set the master this node replicates from; "-" means none."""
        self.master_referent = "" if ref == "-" else ref

    def total_slots(self) -> int:
        """Return the number of owned slots."""
        return len(self.slots)

    def has_fail_status(self, flag: str) -> bool:
        """Return True if the node carries the failure flag."""
        return flag in self.fail_status

    def ip_port(self) -> str:
        """Return the node address as "host:port"."""
        return join_host_port(self.ip, self.port)

    def __str__(self) -> str:
        parts = [
            f"Redis ID: {self.id}",
            f"role: {self.get_role()}",
            f"master: {self.master_referent}",
            f"link: {self.link_state}",
            f"status: [{' '.join(self.fail_status)}]",
            f"addr: {self.ip_port()}",
            f"slots: {format_slots(self.slots)}",
            f"len(migratingSlots): {len(self.migrating_slots)}",
            f"len(importingSlots): {len(self.importing_slots)}",
        ]
        if self.server_start_time is not None:
            parts.append(f"ServerStartTime: {self.server_start_time:%Y-%m-%d %H:%M:%S}")
        return "{" + ", ".join(parts) + "}"


def new_default_node() -> Node:
    """Return an empty node on the default port."""
    return Node()


def new_node(id: str, ip: str, bound_resource: str | None = None) -> Node:
    """Return a node with identity, address and backing resource key set."""
    return Node(id=id, ip=ip, bound_resource=bound_resource)


NodePredicate = Callable[[Node], bool]
NodeLess = Callable[[Node, Node], bool]


def is_master_with_slot(node: Node) -> bool:
    """Match masters owning at least one slot."""
    return node.get_role() == MASTER_ROLE and node.total_slots() > 0


def is_master_with_no_slot(node: Node) -> bool:
    """Match masters owning no slot."""
    return node.get_role() == MASTER_ROLE and node.total_slots() == 0


def is_slave(node: Node) -> bool:
    """Match replicas."""
    return node.get_role() == SLAVE_ROLE


def less_by_id(n1: Node, n2: Node) -> bool:
    """Order nodes by ascending id."""
    return n1.id < n2.id


def more_by_id(n1: Node, n2: Node) -> bool:
    """Order nodes by descending id."""
    return n1.id > n2.id


class Nodes(Sequence[Node]):
    """Ordered, read-only snapshot of cluster nodes.

    Every query returns a new collection; the nodes themselves are shared.
    """

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self._nodes: tuple[Node, ...] = tuple(nodes)

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> "Nodes": ...

    def __getitem__(self, index: int | slice) -> "Node | Nodes":
        if isinstance(index, slice):
            return Nodes(self._nodes[index])
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Nodes):
            return NotImplemented
        return self._nodes == other._nodes

    def __repr__(self) -> str:
        return f"Nodes({list(self._nodes)!r})"

    def __str__(self) -> str:
        return ",".join(str(node) for node in self._nodes)

    def find_all(self, predicate: NodePredicate) -> "Nodes":
        """Return the nodes matching predicate.

        Raises:
            NodeNotFoundError: nothing matched
        """
        found = self.filter(predicate)
        if not found:
            raise NodeNotFoundError("No node matches the predicate")
        return found

    def filter(self, predicate: NodePredicate) -> "Nodes":
        """Return the nodes matching predicate, possibly none."""
        return Nodes(node for node in self._nodes if predicate(node))

    def count(self, predicate: NodePredicate) -> int:  # type: ignore[override]
        """Return how many nodes match predicate."""
        return sum(1 for node in self._nodes if predicate(node))

    def by_id(self, id: str) -> Node:
        """Return the node with id."""
        for node in self._nodes:
            if node.id == id:
                return node
        raise NodeNotFoundError(f"Node {id} not found")

    def by_master_id(self, id: str) -> Node:
        """Return the first node replicating from master id."""
        for node in self._nodes:
            if node.master_referent == id:
                return node
        raise NodeNotFoundError(f"No node replicates from {id}")

    def by_address(self, addr: str) -> Node:
        """Return the node listening on addr ("host:port")."""
        for node in self._nodes:
            if node.ip_port() == addr:
                return node
        raise NodeNotFoundError(f"No node at {addr}")

    def sort_by_id(self, *, reverse: bool = False) -> "Nodes":
        """Return a copy sorted by id, descending when reverse is set."""
        return Nodes(sorted(self._nodes, key=lambda node: node.id, reverse=reverse))

    def sort_by(self, less: NodeLess) -> "Nodes":
        """Return a stably sorted copy ordered by the less function."""

        def compare(n1: Node, n2: Node) -> int:
            if less(n1, n2):
                return -1
            if less(n2, n1):
                return 1
            return 0

        return Nodes(sorted(self._nodes, key=functools.cmp_to_key(compare)))
