from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func

from friendgraph.database.database import Base


class Friendship(Base):
    """
    One directional edge. A mutual friendship is two rows, one per direction.
    """
    __tablename__ = "friendships"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    friend_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="requested", server_default="requested")  # requested, accepted, declined
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'friend_user_id', name='uq_friendships_user_friend'),
        CheckConstraint("status IN ('requested', 'accepted', 'declined')", name='ck_friendships_status'),
    )

    def __repr__(self):
        return f"<Friendship(user_id={self.user_id}, friend_user_id={self.friend_user_id}, status={self.status})>"
