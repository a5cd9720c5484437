"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, func

from app.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'User' or 'Admin'
    password_hash: bcrypt hash, or empty string when login is disabled.
    """

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("role IN ('User', 'Admin')", name="role"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False, default="")
    role = Column(String(32), nullable=False, default="User")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
