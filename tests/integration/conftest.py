"""Integration test fixtures for redis topology.

These tests require a running redis cluster, e.g.:
    docker run -d -e IP=0.0.0.0 -p 7000-7005:7000-7005 grokzen/redis-cluster
    REDIS_TEST_CLUSTER=localhost:7000 pytest tests/integration
"""

import os

import pytest

REDIS_TEST_CLUSTER = os.environ.get("REDIS_TEST_CLUSTER")


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: marks tests as requiring a redis cluster")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if REDIS_TEST_CLUSTER:
        return
    skip = pytest.mark.skip(reason="REDIS_TEST_CLUSTER is not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def cluster_address() -> str:
    """Get the test cluster address."""
    assert REDIS_TEST_CLUSTER is not None
    return REDIS_TEST_CLUSTER
