from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class FriendshipStatus(str, Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class FriendshipErrorCode(str, Enum):
    INVALID_TARGET = "invalid_target"
    NO_PENDING_REQUEST = "no_pending_request"


class TransitionResult(BaseModel):
    """Outcome of a precondition check or of a whole transition."""
    model_config = ConfigDict(frozen=True)

    error: Optional[FriendshipErrorCode] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> "TransitionResult":
        return cls()

    @classmethod
    def failure(cls, error: FriendshipErrorCode) -> "TransitionResult":
        return cls(error=error)


class FriendshipRequestInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )

    friend_user_id: int = Field(..., gt=0, description="ID of the other user")


class TransitionResponse(BaseModel):
    ok: bool = True


class FriendshipStatusResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )

    user_id: int = Field(gt=0)
    outgoing: Optional[FriendshipStatus] = None
    incoming: Optional[FriendshipStatus] = None
    is_mutual: bool = False
