"""Slot ranges and migration markers as printed by CLUSTER NODES."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

from redistopology.constants import HASH_MAX_SLOTS
from redistopology.exceptions import SlotParseError

Slot = int

_MIGRATING_SEP = "->-"
_IMPORTING_SEP = "-<-"


@dataclass(frozen=True)
class MigratingSlot:
    """A slot this node is handing off to another master."""

    slot: Slot
    to_node_id: str


@dataclass(frozen=True)
class ImportingSlot:
    """A slot this node is receiving from another master."""

    slot: Slot
    from_node_id: str


class DecodedSlotRange(NamedTuple):
    slots: list[Slot]
    importing: ImportingSlot | None
    migrating: MigratingSlot | None


def decode_slot(token: str, raw: str | None = None) -> Slot:
    """Decode a single slot number, checking it is in range."""
    raw = token if raw is None else raw
    if not (token.isascii() and token.isdigit()):
        raise SlotParseError(raw, f"{token!r} is not a slot number")
    slot = int(token)
    if slot > HASH_MAX_SLOTS:
        raise SlotParseError(raw, f"slot {slot} is above {HASH_MAX_SLOTS}")
    return slot


def decode_slot_range(token: str) -> DecodedSlotRange:
    """Decode one slot token.

    Accepted forms:
        ``N``               owned slot N
        ``N-M``             owned slots N..M inclusive
        ``[N->-<node id>]`` slot N migrating to node id
        ``[N-<-<node id>]`` slot N importing from node id

    Raises:
        SlotParseError: the token matches none of the forms above
    """
    if token.startswith("["):
        if not token.endswith("]"):
            raise SlotParseError(token, "unterminated migration marker")
        body = token[1:-1]
        if _MIGRATING_SEP in body:
            slot_str, node_id = body.split(_MIGRATING_SEP, 1)
            if not node_id:
                raise SlotParseError(token, "missing destination node id")
            migrating = MigratingSlot(decode_slot(slot_str, token), node_id)
            return DecodedSlotRange([], None, migrating)
        if _IMPORTING_SEP in body:
            slot_str, node_id = body.split(_IMPORTING_SEP, 1)
            if not node_id:
                raise SlotParseError(token, "missing source node id")
            importing = ImportingSlot(decode_slot(slot_str, token), node_id)
            return DecodedSlotRange([], importing, None)
        raise SlotParseError(token, "unknown migration marker")

    if "-" in token:
        start_str, end_str = token.split("-", 1)
        start = decode_slot(start_str, token)
        end = decode_slot(end_str, token)
        if start > end:
            raise SlotParseError(token, "range start is after range end")
        return DecodedSlotRange(list(range(start, end + 1)), None, None)

    return DecodedSlotRange([decode_slot(token)], None, None)


def slot_ranges(slots: Iterable[Slot]) -> list[tuple[Slot, Slot]]:
    """Compact slots into sorted inclusive (start, end) ranges."""
    ranges: list[tuple[Slot, Slot]] = []
    for slot in sorted(set(slots)):
        if ranges and ranges[-1][1] == slot - 1:
            ranges[-1] = (ranges[-1][0], slot)
        else:
            ranges.append((slot, slot))
    return ranges


def slot_range_tokens(slots: Iterable[Slot]) -> list[str]:
    """Render slots as the tokens CLUSTER NODES would print for them."""
    return [
        str(start) if start == end else f"{start}-{end}" for start, end in slot_ranges(slots)
    ]


def format_slots(slots: Iterable[Slot]) -> str:
    """Compact, comma-joined form used in log lines, e.g. ``0-100,200``."""
    return ",".join(slot_range_tokens(slots))


def decode_slots(tokens: Iterable[str]) -> list[Slot]:
    """Expand owned-slot tokens back into a sorted slot list.

    Migration markers carry no owned slots and are ignored.
    """
    slots: set[Slot] = set()
    for token in tokens:
        slots.update(decode_slot_range(token).slots)
    return sorted(slots)


def contains_slot(slots: Iterable[Slot], slot: Slot) -> bool:
    """Return True if slot is among slots."""
    return slot in set(slots)


def add_slots(slots: Iterable[Slot], added: Iterable[Slot]) -> list[Slot]:
    """Return the sorted union of both slot collections."""
    return sorted(set(slots) | set(added))


def remove_slots(slots: Iterable[Slot], removed: Iterable[Slot]) -> list[Slot]:
    """Return slots minus removed, sorted."""
    return sorted(set(slots) - set(removed))
