"""
API Module - Game client interface.

Exposes the engine via REST API.
A client:
1. Creates a game session (maze contents distributed once)
2. Enters rooms and reads the presented encounter
3. Selects choices and uses items
4. Reads the audit of every effect applied

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    SelectChoiceRequest,
    UseItemRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    EnterRoomResponse,
    ChoiceResponse,
    UseItemResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SelectChoiceRequest",
    "UseItemRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "EnterRoomResponse",
    "ChoiceResponse",
    "UseItemResponse",
    "ErrorResponse",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
