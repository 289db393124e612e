"""Cluster introspection and configuration through redis-py."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from redis.asyncio import Redis
from redis.asyncio.cluster import ClusterNode, RedisCluster
from redis.exceptions import RedisError

from redistopology.constants import (
    HASH_MAX_SLOTS,
    MASTER_ROLE,
    MEMORY_SIZE_CONFIG_KEYS,
    SLAVE_ROLE,
)
from redistopology.decode import (
    DecodeResult,
    decode_cluster_infos,
    decode_node_infos,
    split_host_port,
)
from redistopology.exceptions import (
    AddressParseError,
    ConfigValueError,
    RedisTopologyError,
    TransportError,
)
from redistopology.memconf import parse_memory_size
from redistopology.node import Nodes
from redistopology.slot import Slot

logger = logging.getLogger(__name__)


class ClusterAdmin:
    """Reads the cluster topology and pushes configuration to its members.

    Owns two transports: a single-node client used for introspection and a
    cluster client used to reach every member. Both are closed independently.
    """

    def __init__(
        self,
        client: Redis,
        cluster: RedisCluster,
        *,
        max_concurrency: int = 8,
        hash_max_slots: Slot = HASH_MAX_SLOTS,
    ) -> None:
        """Initialize admin.

        Args:
            client: Client connected to one cluster member
            cluster: Cluster-aware client reaching all members
            max_concurrency: Members configured in parallel during fan-out
            hash_max_slots: Highest slot number of the cluster
        """
        self._client = client
        self._cluster = cluster
        self._max_concurrency = max_concurrency
        self._hash_max_slots = hash_max_slots
        self._client_closed = False
        self._cluster_closed = False

    @classmethod
    def from_addresses(
        cls,
        addresses: list[str],
        *,
        password: str | None = None,
        timeout: float = 10.0,
        max_concurrency: int = 8,
    ) -> "ClusterAdmin":
        """Create admin from "host:port" addresses; the first one is used for introspection."""
        if not addresses:
            raise RedisTopologyError("No addresses configured")

        startup_nodes = []
        for address in addresses:
            host, port = split_host_port(address)
            if not (port.isascii() and port.isdigit()):
                raise AddressParseError(address, f"invalid port {port!r}")
            startup_nodes.append(ClusterNode(host, int(port)))

        client = Redis(
            host=startup_nodes[0].host,
            port=startup_nodes[0].port,
            password=password,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
            decode_responses=True,
        )
        cluster = RedisCluster(
            startup_nodes=startup_nodes,
            password=password,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
            decode_responses=True,
        )
        return cls(client, cluster, max_concurrency=max_concurrency)

    @property
    def hash_max_slot(self) -> Slot:
        return self._hash_max_slots

    def _ensure_cluster_open(self) -> None:
        if self._cluster_closed:
            raise RedisTopologyError("admin is closed")

    def _ensure_client_open(self) -> None:
        if self._client_closed:
            raise RedisTopologyError("admin is closed")

    async def connect(self) -> None:
        """Discover the cluster members."""
        self._ensure_cluster_open()
        try:
            await self._cluster.initialize()
        except (RedisError, OSError) as e:
            raise TransportError(f"Failed to reach the cluster: {e}") from e

    async def _introspect(self, *args: str) -> str:
        self._ensure_client_open()
        try:
            raw = await self._client.execute_command(*args)
        except (RedisError, OSError) as e:
            raise TransportError(f"{' '.join(args)} failed: {e}") from e

        if isinstance(raw, bytes):
            raw = raw.decode()
        if not isinstance(raw, str):
            raise TransportError(f"Wrong format from {' '.join(args)}: {type(raw).__name__}")
        return raw

    async def get_cluster_nodes(self) -> DecodeResult[Nodes]:
        """Run CLUSTER NODES and decode it."""
        raw = await self._introspect("CLUSTER", "NODES")
        return decode_node_infos(raw)

    async def get_cluster_infos(self) -> Nodes:
        """Return the current topology, logging what could not be decoded."""
        try:
            result = await self.get_cluster_nodes()
        except TransportError as e:
            logger.info("get redis nodes failed: %s", e)
            raise

        if result.diagnostics:
            logger.warning(
                "CLUSTER NODES decoded with %d skipped fields", len(result.diagnostics)
            )
        return result.value

    async def get_status_map(self) -> dict[str, str]:
        """Run CLUSTER INFO and decode it into a flat mapping."""
        raw = await self._introspect("CLUSTER", "INFO")
        return decode_cluster_infos(raw).value

    def _normalize_config(self, settings: Mapping[str, str]) -> dict[str, str]:
        normalized: dict[str, str] = {}
        for key, value in settings.items():
            if key in MEMORY_SIZE_CONFIG_KEYS:
                try:
                    value = parse_memory_size(key, value)
                except ConfigValueError as e:
                    logger.error(
                        "redis config format err, key: %s, value: %s, err: %s", key, value, e
                    )
                    continue
            normalized[key] = value
        return normalized

    async def _members(self, role: str) -> list[ClusterNode]:
        await self.connect()
        if role == MASTER_ROLE:
            return self._cluster.get_primaries()
        if role == SLAVE_ROLE:
            return self._cluster.get_replicas()
        raise ValueError(f"Unsupported target role: {role!r}")

    async def apply_config(self, target_role: str, settings: Mapping[str, str]) -> None:
        """CONFIG SET every setting on every member with target_role.

        Size-valued settings are sent as byte counts; one that cannot be parsed
        is logged and left out. The first transport failure stops the fan-out:
        requests already sent complete, members not yet contacted are skipped,
        and that failure is raised.
        """
        normalized = self._normalize_config(settings)
        members = await self._members(target_role)
        semaphore = asyncio.Semaphore(self._max_concurrency)
        aborted = asyncio.Event()
        failures: list[tuple[ClusterNode, Exception]] = []

        async def configure(member: ClusterNode) -> None:
            async with semaphore:
                for key, value in normalized.items():
                    if aborted.is_set():
                        return
                    try:
                        await self._cluster.execute_command(
                            "CONFIG", "SET", key, value, target_nodes=member
                        )
                    except (RedisError, OSError) as e:
                        aborted.set()
                        failures.append((member, e))
                        return

        results = await asyncio.gather(
            *(configure(member) for member in members), return_exceptions=True
        )
        if failures:
            member, cause = failures[0]
            raise TransportError(f"CONFIG SET on {member.name} failed: {cause}") from cause
        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def set_config_if_need(self, settings: Mapping[str, str]) -> None:
        """Apply settings to every master."""
        await self.apply_config(MASTER_ROLE, settings)

    async def close_client(self) -> None:
        """Close the single-node connection."""
        if not self._client_closed:
            await self._client.aclose()
            self._client_closed = True

    async def close_cluster(self) -> None:
        """Close the cluster connections."""
        if not self._cluster_closed:
            await self._cluster.aclose()
            self._cluster_closed = True

    async def close(self) -> None:
        try:
            await self.close_client()
        finally:
            await self.close_cluster()

    async def __aenter__(self) -> "ClusterAdmin":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
