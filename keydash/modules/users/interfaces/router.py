"""Auth/session API routes."""

from fastapi import APIRouter, BackgroundTasks, Depends

from keydash.core.application.security import SessionIdentity, get_current_session
from keydash.core.infrastructure.database.session import Database, get_database
from keydash.modules.users.application.dependencies import get_user_query_service
from keydash.modules.users.application.services import UserQueryService
from keydash.modules.users.interfaces.schemas import SessionResponse, UserResponse
from keydash.modules.users.tasks import track_login_task

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/session",
    response_model=SessionResponse,
    summary="Register a sign-in",
    description="Records the sign-in of the bearer's identity. Tracking runs in "
    "the background and never fails the request.",
)
async def register_session(
    background_tasks: BackgroundTasks,
    session: SessionIdentity = Depends(get_current_session),
    database: Database = Depends(get_database),
) -> SessionResponse:
    background_tasks.add_task(track_login_task, database, session.email, session.name)
    return SessionResponse(email=session.email, name=session.name)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def get_me(
    session: SessionIdentity = Depends(get_current_session),
    users: UserQueryService = Depends(get_user_query_service),
) -> UserResponse:
    user = await users.get_by_email(session.email)
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        first_login=user.first_login,
        last_login=user.last_login,
    )
