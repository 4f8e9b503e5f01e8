from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func

from friendgraph.database.database import Base


class User(Base):
    """
    Users table
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    is_active = Column(Boolean, default=True)
