"""FastAPI routes for the face ID login demo.

Start with: faceid serve --port 8000

Endpoints:
    GET  /api/v1/health   - Health check
    GET  /api/v1/members  - List registered members
    POST /api/v1/members  - Register a member
    POST /api/v1/scan     - Run a scan, optionally on an uploaded image
    GET  /api/v1/status   - Current flow state and status message
    POST /api/v1/logout   - Reset the flow to idle
"""

import logging
from typing import List, Optional

import cv2
import numpy as np
from fastapi import APIRouter, FastAPI, File, HTTPException, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from . import __version__
from .auth import ScanState
from .session import FaceIdSession

logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Schemas
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    detection_backend: str
    registered_members: int


class MemberResponse(BaseModel):
    id: int
    name: str
    registeredAt: str


class MemberListResponse(BaseModel):
    members: List[MemberResponse]
    total: int


class RegisterRequest(BaseModel):
    name: str = Field(..., description="Display name of the new member")


class ScanResponse(BaseModel):
    state: str
    granted: bool
    member: Optional[MemberResponse] = None
    reason: Optional[str] = None
    elapsed: float
    face_signal: str
    redirect_url: Optional[str] = None


class StatusResponse(BaseModel):
    state: str
    enabled: bool
    message: Optional[str] = None
    level: Optional[str] = None


# =============================================================================
# Service Layer
# =============================================================================

_session: Optional[FaceIdSession] = None


def get_session() -> FaceIdSession:
    """Get the global session, building it from configuration if needed."""
    global _session
    if _session is None:
        _session = FaceIdSession.from_config(use_camera=False)
        _session.start()
    return _session


def set_session(session: Optional[FaceIdSession]):
    """Set the global session instance."""
    global _session
    _session = session


def decode_image(content: bytes) -> np.ndarray:
    """Decode uploaded image bytes into a BGR array."""
    nparr = np.frombuffer(content, np.uint8)
    image = cv2.imdecode(nparr, cv2.IMREAD_COLOR) if nparr.size else None
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid image")
    return image


# =============================================================================
# Router
# =============================================================================

router = APIRouter(prefix="/api/v1", tags=["faceid"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check():
    """Health check endpoint."""
    session = get_session()
    detector = session.scan_flow.detector
    return HealthResponse(
        status="healthy",
        version=__version__,
        detection_backend=getattr(detector, "name", type(detector).__name__),
        registered_members=len(session.store),
    )


@router.get("/members", response_model=MemberListResponse, summary="List members")
async def list_members():
    """Members in registration order."""
    members = get_session().store.list()
    return MemberListResponse(
        members=[MemberResponse(**m.to_dict()) for m in members],
        total=len(members),
    )


@router.post(
    "/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a member",
)
async def register_member(request: RegisterRequest):
    """Register a member after the simulated capture."""
    session = get_session()
    registration = session.registration

    if registration.is_saving:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration already in progress",
        )
    if not request.name.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Please enter a name.",
        )

    record = await session.register(request.name)
    if record is None:
        if registration.status is not None and registration.status.level == "error":
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=registration.status.message,
            )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration already in progress",
        )
    return MemberResponse(**record.to_dict())


@router.post("/scan", response_model=ScanResponse, summary="Run a scan")
async def scan(file: Optional[UploadFile] = File(None)):
    """Run a scan. An uploaded image is probed instead of camera frames."""
    session = get_session()
    flow = session.scan_flow

    frame = None
    if file is not None:
        frame = decode_image(await file.read())

    if not flow.enabled:
        message = flow.status.message if flow.status else "Scanning disabled"
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)

    result = await flow.scan(frame=frame)
    if result is None:
        if flow.state is ScanState.GRANTED:
            detail = "Already signed in; log out first"
        else:
            detail = "Scan already in progress"
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

    return ScanResponse(**result.to_dict())


@router.get("/status", response_model=StatusResponse, summary="Flow status")
async def get_status():
    """Current state and last status message."""
    return _status_response(get_session().scan_flow)


@router.post("/logout", response_model=StatusResponse, summary="Log out")
async def logout():
    """Reset a finished scan to idle."""
    flow = get_session().scan_flow
    if not flow.logout():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Scan in progress",
        )
    return _status_response(flow)


def _status_response(flow) -> StatusResponse:
    event = flow.status
    return StatusResponse(
        state=flow.state.value,
        enabled=flow.enabled,
        message=event.message if event else None,
        level=event.level if event else None,
    )


# =============================================================================
# Application Factory
# =============================================================================

def create_app(session: Optional[FaceIdSession] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        session: Session to serve. Built from configuration on first use if None.
    """
    if session is not None:
        set_session(session)

    app = FastAPI(
        title="FaceID Demo API",
        description="Simulated face ID login: member registration and scans",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "name": "FaceID Demo API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
