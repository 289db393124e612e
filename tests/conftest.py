"""Pytest configuration for redis topology tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

# Three masters, one replica, one failed node without address, slot 5461 moving
# from the second to the third master.
CLUSTER_NODES = (
    "07c37dfeb235213a872192d90877d0cd55635b91 127.0.0.1:30004@31004 slave "
    "e7d1eecce10fd6bb5eb35b9f99a514335d9ba9ca 0 1426238317239 4 connected\n"
    "67ed2db8d677e59ec4a4cefb06858cf2a1a89fa1 127.0.0.1:30002@31002 master "
    "- 0 1426238316232 2 connected 5461-10922 [5461->-292f8b365bb7edb5e285caf0b7e6ddc7265d2f4f]\n"
    "292f8b365bb7edb5e285caf0b7e6ddc7265d2f4f 127.0.0.1:30003@31003 master "
    "- 0 1426238318243 3 connected 10923-16383 [5461-<-67ed2db8d677e59ec4a4cefb06858cf2a1a89fa1]\n"
    "e7d1eecce10fd6bb5eb35b9f99a514335d9ba9ca 127.0.0.1:30001@31001 myself,master "
    "- 0 0 1 connected 0-5460\n"
    "6ec23923021cf3ffec47632106199cb7f496ce01 :0@0 master,fail,noaddr "
    "- 1426238316232 1426238315000 5 disconnected\n"
)

CLUSTER_INFO = (
    "cluster_state:ok\r\n"
    "cluster_slots_assigned:16384\r\n"
    "cluster_slots_ok:16384\r\n"
    "cluster_known_nodes:5\r\n"
    "cluster_size:3\r\n"
)


@pytest.fixture
def cluster_nodes_output() -> str:
    return CLUSTER_NODES


@pytest.fixture
def cluster_info_output() -> str:
    return CLUSTER_INFO


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock single-node redis client."""
    client = MagicMock()
    client.execute_command = AsyncMock()
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def mock_cluster() -> MagicMock:
    """Create a mock cluster client with two masters and one replica."""
    cluster = MagicMock()
    cluster.initialize = AsyncMock(return_value=cluster)
    cluster.execute_command = AsyncMock(return_value=True)
    cluster.aclose = AsyncMock()

    masters = [MagicMock(), MagicMock()]
    masters[0].name = "127.0.0.1:30001"
    masters[1].name = "127.0.0.1:30002"
    replica = MagicMock()
    replica.name = "127.0.0.1:30004"

    cluster.get_primaries = MagicMock(return_value=masters)
    cluster.get_replicas = MagicMock(return_value=[replica])
    return cluster
