"""
Read and write access to stored users.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import EmailAlreadyRegistered, StorageUnavailable
from .models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """
    User storage over a SQLAlchemy session.

    Driver and connection failures surface as StorageUnavailable so they are never
    mistaken for a failed login.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.error("User lookup by email failed: %s", e)
            raise StorageUnavailable("Unable to read users") from e

    def get_by_id(self, user_id: int) -> Optional[User]:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("User lookup by id failed: %s", e)
            raise StorageUnavailable("Unable to read users") from e

    def create(self, firstname: str, lastname: str, email: str, password_record: str) -> User:
        """
        Store a new user and return the row with its id and timestamps.

        Raises:
            EmailAlreadyRegistered: If the email is already stored
            StorageUnavailable: On any other database failure
        """
        user = User(firstname=firstname, lastname=lastname, email=email, password=password_record)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyRegistered("Email already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User creation failed: %s", e)
            raise StorageUnavailable("Unable to create the user") from e
        return user

    def update_password(self, user: User, password_record: str) -> User:
        user.password = password_record
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Password update failed for user_id=%s: %s", user.id, e)
            raise StorageUnavailable("Unable to update the user") from e
        return user
