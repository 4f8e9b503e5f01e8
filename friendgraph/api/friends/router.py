from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from friendgraph.api.auth.dependencies import get_current_active_user
from friendgraph.api.friends.schemas import (
    FriendshipErrorCode,
    FriendshipRequestInput,
    FriendshipStatusResponse,
    TransitionResponse,
    TransitionResult,
)
from friendgraph.api.friends.service import FriendshipService
from friendgraph.api.users.models import User
from friendgraph.database.database import get_db

router = APIRouter(prefix="/api/v1/friendship-requests", tags=["friendship-requests"])

ERROR_DETAILS = {
    FriendshipErrorCode.INVALID_TARGET: "User not found",
    FriendshipErrorCode.NO_PENDING_REQUEST: "Friendship request is no longer pending",
}


def get_friendship_service(db: Session = Depends(get_db)) -> FriendshipService:
    return FriendshipService(db)


def to_response(result: TransitionResult) -> TransitionResponse:
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ERROR_DETAILS[result.error])
    return TransitionResponse()


@router.post("/send", response_model=TransitionResponse)
def send_request(
        data: FriendshipRequestInput,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return to_response(friendship_service.send(current_user.id, data.friend_user_id))


@router.post("/accept", response_model=TransitionResponse)
def accept_request(
        data: FriendshipRequestInput,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return to_response(friendship_service.accept(current_user.id, data.friend_user_id))


@router.post("/decline", response_model=TransitionResponse)
def decline_request(
        data: FriendshipRequestInput,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return to_response(friendship_service.decline(current_user.id, data.friend_user_id))


@router.get("/status/{user_id}", response_model=FriendshipStatusResponse)
def friendship_status(
        user_id: int,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.get_status(current_user.id, user_id)
