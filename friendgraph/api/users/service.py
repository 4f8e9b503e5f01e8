from typing import Optional

from sqlalchemy.orm import Session

from friendgraph.api.users.models import User


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def user_exists(self, user_id: int) -> bool:
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()
