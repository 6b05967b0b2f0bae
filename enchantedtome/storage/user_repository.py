"""
User Repository for Enchanted Tome

Users are keyed by the identity provider subject and refreshed on every
verified request. The admin flag is only ever written through
``update``; ``upsert`` leaves it alone.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import UserModel, build_engine, utcnow


PROFILE_FIELDS = frozenset({"email", "first_name", "last_name", "profile_image_url"})


@dataclass
class UserRecord:
    """Data class for user data transfer."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: UserModel) -> "UserRecord":
        """Create from SQLAlchemy model."""
        return cls(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            profile_image_url=model.profile_image_url,
            is_admin=bool(model.is_admin),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class UserRepository:
    """Repository for user records."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        engine: Optional[Engine] = None,
    ):
        if engine is None:
            engine = build_engine(database_url or "sqlite:///:memory:")

        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def get(self, user_id: str) -> Optional[UserRecord]:
        """Get user by subject ID."""
        with self.get_session() as session:
            user = session.get(UserModel, user_id)
            if user:
                return UserRecord.from_model(user)
            return None

    def upsert(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> UserRecord:
        """
        Insert or refresh a user from verified token claims.

        New users start with ``is_admin=False``; existing users keep
        whatever admin flag they already have.

        Args:
            user_id: Identity provider subject
            email: Email claim
            first_name: First part of the display name
            last_name: Remainder of the display name
            profile_image_url: Picture claim

        Returns:
            The stored UserRecord
        """
        now = utcnow()
        with self.get_session() as session:
            user = session.get(UserModel, user_id)

            if user is None:
                user = UserModel(
                    id=user_id,
                    is_admin=False,
                    created_at=now,
                    updated_at=now,
                )
                session.add(user)
                logger.info(f"Registered new user {user_id}")

            user.email = email
            user.first_name = first_name
            user.last_name = last_name
            user.profile_image_url = profile_image_url
            user.updated_at = max(now, user.created_at)

            session.commit()
            session.refresh(user)
            return UserRecord.from_model(user)

    def update(self, user_id: str, **updates) -> Optional[UserRecord]:
        """
        Update user fields, including the admin flag.

        Args:
            user_id: Identity provider subject
            **updates: Profile fields and/or ``is_admin``

        Returns:
            Updated UserRecord or None
        """
        with self.get_session() as session:
            user = session.get(UserModel, user_id)
            if not user:
                return None

            for key, value in updates.items():
                if key in PROFILE_FIELDS or key == "is_admin":
                    setattr(user, key, value)

            user.updated_at = max(utcnow(), user.created_at)
            session.commit()
            session.refresh(user)

            return UserRecord.from_model(user)
