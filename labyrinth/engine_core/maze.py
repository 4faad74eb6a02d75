"""
Maze topology.

The engine only needs to know which rooms exist and which are the start
and exit rooms; passability is carried so a topology can round-trip.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator

from ..errors import ConfigurationError


def room_id(x: int, y: int) -> str:
    """Room identifier in "x,y" form."""
    return f"{x},{y}"


@dataclass(frozen=True)
class MazeRoom:
    """A single grid cell and its open walls."""
    x: int
    y: int
    north: bool = True
    east: bool = True
    south: bool = True
    west: bool = True
    is_start: bool = False
    is_exit: bool = False

    @property
    def room_id(self) -> str:
        return room_id(self.x, self.y)

    @property
    def is_special(self) -> bool:
        """Start and exit rooms never receive encounters."""
        return self.is_start or self.is_exit

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "north": self.north,
            "east": self.east,
            "south": self.south,
            "west": self.west,
            "isStart": self.is_start,
            "isExit": self.is_exit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MazeRoom:
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            north=bool(data.get("north", True)),
            east=bool(data.get("east", True)),
            south=bool(data.get("south", True)),
            west=bool(data.get("west", True)),
            is_start=bool(data.get("isStart", False)),
            is_exit=bool(data.get("isExit", False)),
        )


@dataclass
class MazeGrid:
    """
    Fixed-size room grid.

    Rooms are stored and iterated row by row (y outer, x inner) so that
    every consumer sees the same room order for a given grid.
    """
    width: int
    height: int
    rooms: dict[str, MazeRoom] = field(default_factory=dict)

    def __post_init__(self):
        starts = [r for r in self.rooms.values() if r.is_start]
        exits = [r for r in self.rooms.values() if r.is_exit]
        if self.rooms and (len(starts) != 1 or len(exits) != 1):
            raise ConfigurationError(
                f"Grid must have exactly one start and one exit room "
                f"(found {len(starts)} start, {len(exits)} exit)"
            )

    @classmethod
    def open_grid(
        cls,
        width: int = 8,
        height: int = 8,
        start: tuple[int, int] = (0, 0),
        exit: tuple[int, int] = (7, 7),
    ) -> MazeGrid:
        """Build a grid with every interior wall open."""
        if start == exit:
            raise ConfigurationError("Start and exit must be different rooms")
        for x, y in (start, exit):
            if not (0 <= x < width and 0 <= y < height):
                raise ConfigurationError(f"Room {room_id(x, y)} lies outside the grid")
        rooms = {}
        for y in range(height):
            for x in range(width):
                room = MazeRoom(
                    x=x,
                    y=y,
                    north=y > 0,
                    east=x < width - 1,
                    south=y < height - 1,
                    west=x > 0,
                    is_start=(x, y) == start,
                    is_exit=(x, y) == exit,
                )
                rooms[room.room_id] = room
        return cls(width=width, height=height, rooms=rooms)

    def __iter__(self) -> Iterator[MazeRoom]:
        return iter(self.ordered_rooms())

    def __len__(self) -> int:
        return len(self.rooms)

    def ordered_rooms(self) -> list[MazeRoom]:
        return sorted(self.rooms.values(), key=lambda r: (r.y, r.x))

    def get_room(self, rid: str) -> MazeRoom | None:
        return self.rooms.get(rid)

    @property
    def start_room(self) -> MazeRoom:
        return next(r for r in self.rooms.values() if r.is_start)

    @property
    def exit_room(self) -> MazeRoom:
        return next(r for r in self.rooms.values() if r.is_exit)

    def neighbors(self, rid: str) -> list[MazeRoom]:
        """Rooms reachable in one step through an open wall (N, E, S, W)."""
        room = self.rooms.get(rid)
        if room is None:
            return []
        steps = [
            (room.north, 0, -1),
            (room.east, 1, 0),
            (room.south, 0, 1),
            (room.west, -1, 0),
        ]
        result = []
        for is_open, dx, dy in steps:
            target = self.rooms.get(room_id(room.x + dx, room.y + dy))
            if is_open and target is not None:
                result.append(target)
        return result

    def eligible_room_ids(self) -> list[str]:
        """All rooms that may hold encounters, in grid order."""
        return [r.room_id for r in self.ordered_rooms() if not r.is_special]

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "rooms": [r.to_dict() for r in self.ordered_rooms()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MazeGrid:
        rooms = {}
        for room_data in data.get("rooms", []):
            room = MazeRoom.from_dict(room_data)
            rooms[room.room_id] = room
        return cls(width=int(data["width"]), height=int(data["height"]), rooms=rooms)
