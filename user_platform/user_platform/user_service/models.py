from sqlalchemy import Column, DateTime, Integer, String, func

from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    firstname = Column(String(64), nullable=False)
    lastname = Column(String(64), nullable=False)
    email = Column(String(64), unique=True, index=True, nullable=False)
    # Argon2 PHC string, never returned by the API nor put in a token
    password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
