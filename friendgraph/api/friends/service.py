import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from friendgraph.api.friends.guards import can_send_request, can_answer_request
from friendgraph.api.friends.models import Friendship
from friendgraph.api.friends.schemas import (
    FriendshipErrorCode,
    FriendshipStatus,
    FriendshipStatusResponse,
    TransitionResult,
)

logger = logging.getLogger(__name__)


class FriendshipService:
    """
    Owns the friendship edge table and the transitions between edge states.

    Precondition failures come back as a failed ``TransitionResult``.
    Storage errors are rolled back and re-raised unchanged; every operation
    re-checks its precondition, so the caller may simply retry.
    """

    def __init__(self, db: Session):
        self.db = db

    def send(self, actor_id: int, target_id: int) -> TransitionResult:
        result = can_send_request(self.db, actor_id, target_id)
        if not result.ok:
            return result

        try:
            with self._transaction():
                self._request_edge(actor_id, target_id)
        except IntegrityError:
            # A concurrent send from the same actor inserted the row first.
            logger.warning(f"Friendship {actor_id} -> {target_id} was inserted concurrently, re-reading it")
            with self._transaction():
                self._request_edge(actor_id, target_id)

        logger.info(f"User {actor_id} sent a friendship request to user {target_id}")
        return TransitionResult.success()

    def accept(self, actor_id: int, requester_id: int) -> TransitionResult:
        result = can_answer_request(self.db, actor_id, requester_id)
        if not result.ok:
            return result

        try:
            with self._transaction():
                result = self._accept_edges(actor_id, requester_id)
        except IntegrityError:
            # The other side's send inserted the reverse row first.
            logger.warning(f"Friendship {actor_id} -> {requester_id} was inserted concurrently, retrying accept")
            with self._transaction():
                result = self._accept_edges(actor_id, requester_id)

        if result.ok:
            logger.info(f"User {actor_id} accepted the friendship request from user {requester_id}")
        return result

    def decline(self, actor_id: int, requester_id: int) -> TransitionResult:
        result = can_answer_request(self.db, actor_id, requester_id)
        if not result.ok:
            return result

        with self._transaction():
            updated = self._update_status(
                requester_id, actor_id, FriendshipStatus.REQUESTED, FriendshipStatus.DECLINED
            )

        if not updated:
            logger.warning(f"Friendship {requester_id} -> {actor_id} was answered concurrently, nothing to decline")
            return TransitionResult.failure(FriendshipErrorCode.NO_PENDING_REQUEST)

        logger.info(f"User {actor_id} declined the friendship request from user {requester_id}")
        return TransitionResult.success()

    def get_status(self, actor_id: int, other_id: int) -> FriendshipStatusResponse:
        outgoing = self._get_edge(actor_id, other_id)
        incoming = self._get_edge(other_id, actor_id)
        return FriendshipStatusResponse(
            user_id=other_id,
            outgoing=outgoing.status if outgoing else None,
            incoming=incoming.status if incoming else None,
            is_mutual=bool(
                outgoing and incoming
                and outgoing.status == FriendshipStatus.ACCEPTED.value
                and incoming.status == FriendshipStatus.ACCEPTED.value
            )
        )

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _get_edge(self, user_id: int, friend_user_id: int, lock: bool = False) -> Optional[Friendship]:
        query = self.db.query(Friendship).filter(
            Friendship.user_id == user_id,
            Friendship.friend_user_id == friend_user_id
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    def _request_edge(self, actor_id: int, target_id: int) -> None:
        edge = self._get_edge(actor_id, target_id, lock=True)
        if edge is None:
            self.db.add(Friendship(
                user_id=actor_id,
                friend_user_id=target_id,
                status=FriendshipStatus.REQUESTED.value
            ))
            self.db.flush()
        elif edge.status == FriendshipStatus.DECLINED.value:
            edge.status = FriendshipStatus.REQUESTED.value
            self.db.flush()

    def _update_status(
            self,
            user_id: int,
            friend_user_id: int,
            from_status: FriendshipStatus,
            to_status: FriendshipStatus
    ) -> int:
        return self.db.query(Friendship).filter(
            Friendship.user_id == user_id,
            Friendship.friend_user_id == friend_user_id,
            Friendship.status == from_status.value
        ).update({"status": to_status.value}, synchronize_session="fetch")

    def _accept_edges(self, actor_id: int, requester_id: int) -> TransitionResult:
        updated = self._update_status(
            requester_id, actor_id, FriendshipStatus.REQUESTED, FriendshipStatus.ACCEPTED
        )
        if not updated:
            forward = self._get_edge(requester_id, actor_id, lock=True)
            if forward is None or forward.status != FriendshipStatus.ACCEPTED.value:
                logger.warning(f"Friendship {requester_id} -> {actor_id} was answered concurrently, nothing to accept")
                return TransitionResult.failure(FriendshipErrorCode.NO_PENDING_REQUEST)
            logger.warning(f"Friendship {requester_id} -> {actor_id} was already accepted, completing reverse edge")

        self._accept_reverse_edge(actor_id, requester_id)
        return TransitionResult.success()

    def _accept_reverse_edge(self, actor_id: int, requester_id: int) -> None:
        reverse = self._get_edge(actor_id, requester_id, lock=True)
        if reverse is None:
            self.db.add(Friendship(
                user_id=actor_id,
                friend_user_id=requester_id,
                status=FriendshipStatus.ACCEPTED.value
            ))
        else:
            reverse.status = FriendshipStatus.ACCEPTED.value
        self.db.flush()
