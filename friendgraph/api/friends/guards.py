"""
Preconditions checked before each friendship transition.

Each guard runs inside the caller's session, so any row it locks stays
locked until the transition commits or rolls back.
"""
from sqlalchemy.orm import Session

from friendgraph.api.friends.models import Friendship
from friendgraph.api.friends.schemas import FriendshipErrorCode, FriendshipStatus, TransitionResult
from friendgraph.api.users.service import UserService


def can_send_request(db: Session, actor_id: int, target_id: int) -> TransitionResult:
    if not UserService(db).user_exists(target_id):
        return TransitionResult.failure(FriendshipErrorCode.INVALID_TARGET)
    return TransitionResult.success()


def can_answer_request(db: Session, actor_id: int, requester_id: int) -> TransitionResult:
    pending = db.query(Friendship.id).filter(
        Friendship.user_id == requester_id,
        Friendship.friend_user_id == actor_id,
        Friendship.status == FriendshipStatus.REQUESTED.value
    ).with_for_update().first()
    if pending is None:
        return TransitionResult.failure(FriendshipErrorCode.NO_PENDING_REQUEST)
    return TransitionResult.success()
