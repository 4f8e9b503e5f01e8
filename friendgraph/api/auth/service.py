from typing import Optional

from sqlalchemy.orm import Session

from friendgraph.api.auth.schemas import UserRegister
from friendgraph.api.auth.utils import get_password_hash, create_access_token, verify_password
from friendgraph.api.users.models import User
from friendgraph.api.users.service import UserService


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserService(db)

    def register_user(self, user_data: UserRegister) -> str:
        if self.users.get_user_by_username(user_data.username) is not None:
            raise ValueError("A user with this username already exists")

        user = User(
            username=user_data.username.lower(),
            name=user_data.name,
            hashed_password=get_password_hash(user_data.password)
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return create_access_token({"sub": user.username})

    def authenticate_user(self, username: str, password: str) -> Optional[str]:
        user = self.users.get_user_by_username(username)
        if not user or not verify_password(password, user.hashed_password):
            return None

        if not user.is_active:
            raise ValueError("Account is deactivated")

        return create_access_token({"sub": user.username})
