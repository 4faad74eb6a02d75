"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/sessions                              Create game session
    GET    /api/v1/sessions                              List active sessions
    GET    /api/v1/sessions/{id}                         Get session status
    DELETE /api/v1/sessions/{id}                         End session
    GET    /api/v1/sessions/{id}/state                   Get game state
    POST   /api/v1/sessions/{id}/rooms/{room_id}/enter   Enter a room
    POST   /api/v1/sessions/{id}/choices                 Select a choice
    POST   /api/v1/sessions/{id}/items/{item_id}/use     Use an item
    GET    /api/v1/catalog                               Loaded content summary

Turn Flow:
    1. POST /rooms/{room_id}/enter ticks statuses and presents the encounter
       (empty rooms present the rest encounter)
    2. POST /choices resolves one of the presented choices
       - 409 REQUIREMENT_NOT_MET leaves the encounter presented;
         details carry the failure reasons
    3. POST /items/{item_id}/use may be called at any time while alive

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging
import os

# Environment configuration
LABYRINTH_ENV = os.getenv("LABYRINTH_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
LABYRINTH_LOG_LEVEL = os.getenv("LABYRINTH_LOG_LEVEL", "INFO")
LABYRINTH_SESSION_TTL = int(os.getenv("LABYRINTH_SESSION_TTL", "3600"))

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Query
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        SelectChoiceRequest,
        UseItemRequest,
        # Response models
        SessionResponse,
        GameStateResponse,
        EnterRoomResponse,
        ChoiceResponse,
        UseItemResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        CatalogSummaryResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    logging.basicConfig(level=LABYRINTH_LOG_LEVEL.upper())

    app = FastAPI(
        title="Labyrinth Engine API",
        description="""
Turn-based maze exploration - rooms, encounters, stats, items and status effects.

## Turn Flow

1. `POST /rooms/{room_id}/enter` - statuses tick, then the room's encounter
   is presented with every choice annotated by its requirement check
2. `POST /choices` - resolve a choice; the response carries the full effect audit
3. `POST /items/{item_id}/use` - use an item at any time while alive

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `SESSION_NOT_FOUND` | 404 | Session does not exist |
| `REQUIREMENT_NOT_MET` | 409 | Choice requirements not met (details hold the check) |
| `ITEM_USE_REJECTED` | 409 | Item not held, not enough of it, or unknown |
| `INVALID_ACTION` | 400 | Bad choice index, no encounter presented, or game over |
| `CONFIGURATION_ERROR` | 500 | Loaded content cannot support the request |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        from ..content.labyrinth_base import create_base_catalog
        from ..session import SessionManager
        service = APIService(
            session_manager=SessionManager(
                catalog=create_base_catalog(),
                session_ttl=LABYRINTH_SESSION_TTL,
            ),
        )
    api_service = service
    logger.info("Labyrinth API created (env=%s)", LABYRINTH_ENV)

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_by_code = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.REQUIREMENT_NOT_MET: 409,
        ErrorCode.ITEM_USE_REJECTED: 409,
        ErrorCode.INVALID_ACTION: 400,
        ErrorCode.VALIDATION_ERROR: 422,
        ErrorCode.CONFIGURATION_ERROR: 500,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_by_code.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={500: {"model": ErrorResponse, "description": "Content cannot fill the maze"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        body: Optional[CreateSessionRequest] = None,
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Encounters are distributed over a fresh 8x8 maze. Pass a `seed`
        to reproduce the same maze contents and dice.
        """
        return respond(api_service.create_session(body or CreateSessionRequest()))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get the full game state",
    )
    async def get_game_state(
        session_id: str,
        include_snapshot: Annotated[bool, Query(description="Include the lossless state snapshot")] = False,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Get player, map and presented encounter."""
        return respond(api_service.get_game_state(session_id, include_snapshot))

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/rooms/{room_id}/enter",
        response_model=EnterRoomResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown room or game over"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game Loop"],
        summary="Enter a room",
    )
    async def enter_room(session_id: str, room_id: str) -> Union[EnterRoomResponse, JSONResponse]:
        """
        Enter a room. Costs a turn.

        Status effects tick first. If the tick kills the player the
        response has no encounter and `status=game_over`.
        """
        return respond(api_service.enter_room(session_id, room_id))

    @app.post(
        "/api/v1/sessions/{session_id}/choices",
        response_model=ChoiceResponse,
        responses={
            400: {"model": ErrorResponse, "description": "No encounter or bad index"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Requirements not met"},
        },
        tags=["Game Loop"],
        summary="Select a choice of the presented encounter",
    )
    async def select_choice(
        session_id: str,
        body: SelectChoiceRequest,
    ) -> Union[ChoiceResponse, JSONResponse]:
        """
        Resolve a choice.

        **Request Body:**
        ```json
        {"choice_index": 0}
        ```
        """
        return respond(api_service.select_choice(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/items/{item_id}/use",
        response_model=UseItemResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Item use rejected"},
        },
        tags=["Game Loop"],
        summary="Use an inventory item",
    )
    async def use_item(
        session_id: str,
        item_id: str,
        body: Optional[UseItemRequest] = None,
    ) -> Union[UseItemResponse, JSONResponse]:
        """Use an item directly. Does not cost a turn."""
        return respond(api_service.use_item(session_id, item_id, body or UseItemRequest()))

    # =========================================================================
    # Content
    # =========================================================================

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogSummaryResponse,
        tags=["Content"],
        summary="Summary of the loaded content",
    )
    async def catalog_summary() -> CatalogSummaryResponse:
        return api_service.catalog_summary()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="labyrinth-engine",
            version="1.0.0",
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Labyrinth Engine API",
            "version": "1.0.0",
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn labyrinth.api.app:app
app = create_app()
