"""Wire constants reported by CLUSTER NODES and accepted by CONFIG SET."""

# Highest slot number; the slot space holds HASH_MAX_SLOTS + 1 slots.
HASH_MAX_SLOTS = 16383

DEFAULT_REDIS_PORT = "6379"

MASTER_ROLE = "master"
SLAVE_ROLE = "slave"
NONE_ROLE = "none"

LINK_STATE_CONNECTED = "connected"
LINK_STATE_DISCONNECTED = "disconnected"

# Not reachable from the node we asked, but still logically reachable.
NODE_STATUS_PFAIL = "fail?"
# PFAIL promoted to FAIL by a majority of masters.
NODE_STATUS_FAIL = "fail"
NODE_STATUS_HANDSHAKE = "handshake"
NODE_STATUS_NOADDR = "noaddr"
NODE_STATUS_NOFLAGS = "noflags"

FAIL_STATUSES: tuple[str, ...] = (
    NODE_STATUS_FAIL,
    NODE_STATUS_PFAIL,
    NODE_STATUS_HANDSHAKE,
    NODE_STATUS_NOADDR,
    NODE_STATUS_NOFLAGS,
)

# Config keys whose values are byte sizes ("1gb", "512mb") and must be sent as
# plain byte counts.
MEMORY_SIZE_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "maxmemory",
        "proto-max-bulk-len",
        "client-query-buffer-limit",
        "repl-backlog-size",
        "auto-aof-rewrite-min-size",
        "active-defrag-ignore-bytes",
        "hash-max-ziplist-entries",
        "hash-max-ziplist-value",
        "stream-node-max-bytes",
        "set-max-intset-entries",
        "zset-max-ziplist-entries",
        "zset-max-ziplist-value",
        "hll-sparse-max-bytes",
        # TODO: parse client-output-buffer-limit (class/hard/soft/seconds groups)
    }
)
