"""
Room assignment table.

A RoomAssignment tracks which encounter ids are available in one room.
The AllocationSession owns all assignments for one game and is rebuilt
from scratch whenever distribution runs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from enum import Enum

from ..errors import RoomLockedError


class RoomStatus(Enum):
    UNASSIGNED = "unassigned"
    OPEN = "open"
    TRAP_EXCLUSIVE = "trap_exclusive"


@dataclass
class RoomAssignment:
    """
    Encounter ids assigned to a single room.

    Ids move from available_ids to consumed_ids when a one-time
    encounter is used. An exclusive room holds exactly one trap and
    accepts no further writes.
    """
    room_id: str
    available_ids: list[str] = field(default_factory=list)
    consumed_ids: list[str] = field(default_factory=list)
    exclusive: bool = False
    visit_count: int = 0

    @property
    def status(self) -> RoomStatus:
        if self.exclusive:
            return RoomStatus.TRAP_EXCLUSIVE
        if self.available_ids or self.consumed_ids:
            return RoomStatus.OPEN
        return RoomStatus.UNASSIGNED

    @property
    def event_count(self) -> int:
        return len(self.available_ids)

    @property
    def has_available(self) -> bool:
        return bool(self.available_ids)

    def with_event(self, event_id: str) -> RoomAssignment:
        """Return a copy with event_id available. Duplicates are ignored."""
        if self.exclusive:
            raise RoomLockedError(self.room_id)
        if event_id in self.available_ids:
            return self
        return self._copy_with(available_ids=self.available_ids + [event_id])

    def with_trap(self, event_id: str) -> RoomAssignment:
        """Return a copy holding only this trap, locked."""
        if self.exclusive or self.available_ids:
            raise RoomLockedError(self.room_id)
        return self._copy_with(available_ids=[event_id], exclusive=True)

    def consume(self, event_id: str) -> RoomAssignment:
        """Move an available id to consumed. Unknown ids leave the room unchanged."""
        if event_id not in self.available_ids:
            return self
        return self._copy_with(
            available_ids=[e for e in self.available_ids if e != event_id],
            consumed_ids=self.consumed_ids + [event_id],
        )

    def restore_event(self, event_id: str) -> RoomAssignment:
        """Move a consumed id back to available."""
        if event_id not in self.consumed_ids:
            return self
        return self._copy_with(
            available_ids=self.available_ids + [event_id],
            consumed_ids=[e for e in self.consumed_ids if e != event_id],
        )

    def record_visit(self) -> RoomAssignment:
        return self._copy_with(visit_count=self.visit_count + 1)

    def _copy_with(self, **kwargs) -> RoomAssignment:
        return RoomAssignment(
            room_id=self.room_id,
            available_ids=list(kwargs.get("available_ids", self.available_ids)),
            consumed_ids=list(kwargs.get("consumed_ids", self.consumed_ids)),
            exclusive=kwargs.get("exclusive", self.exclusive),
            visit_count=kwargs.get("visit_count", self.visit_count),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "roomId": self.room_id,
            "availableEventIds": list(self.available_ids),
            "consumedEventIds": list(self.consumed_ids),
            "hasTrapEvent": self.exclusive,
            "eventCount": self.event_count,
            "visitCount": self.visit_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoomAssignment:
        return cls(
            room_id=data["roomId"],
            available_ids=list(data.get("availableEventIds", [])),
            consumed_ids=list(data.get("consumedEventIds", [])),
            exclusive=bool(data.get("hasTrapEvent", False)),
            visit_count=int(data.get("visitCount", 0)),
        )


@dataclass
class AllocationSession:
    """
    Room -> assignment table for one game.

    Never merged: every distribution run produces a new session, and
    the reducer replaces the session rather than mutating it.
    """
    rooms: dict[str, RoomAssignment] = field(default_factory=dict)

    def get(self, room_id: str) -> RoomAssignment:
        return self.rooms.get(room_id) or RoomAssignment(room_id=room_id)

    def with_room(self, assignment: RoomAssignment) -> AllocationSession:
        rooms = dict(self.rooms)
        rooms[assignment.room_id] = assignment
        return AllocationSession(rooms=rooms)

    @property
    def exclusive_rooms(self) -> list[str]:
        return [rid for rid, a in self.rooms.items() if a.exclusive]

    @property
    def open_rooms(self) -> list[str]:
        return [rid for rid, a in self.rooms.items() if a.status == RoomStatus.OPEN]

    def total_assigned(self) -> int:
        return sum(len(a.available_ids) + len(a.consumed_ids) for a in self.rooms.values())

    def to_dict(self) -> dict[str, Any]:
        return {"rooms": [a.to_dict() for a in self.rooms.values()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AllocationSession:
        rooms = {}
        for room_data in data.get("rooms", []):
            assignment = RoomAssignment.from_dict(room_data)
            rooms[assignment.room_id] = assignment
        return cls(rooms=rooms)
