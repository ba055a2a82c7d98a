"""
User Model
Members, group admins, region managers and super admins
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from attendance_api.database import Base
from attendance_api.roles import Role


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN (" + ", ".join(f"'{role.value}'" for role in Role) + ")",
            name="role_check"
        ),
        CheckConstraint("gender IN ('male', 'female', 'other')", name="gender_check"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    auth_id = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)

    # Profile
    full_name = Column(String(200), nullable=True)
    phone_number = Column(String(50), nullable=True)
    gender = Column(String(10), nullable=True)
    profile_picture = Column(String, nullable=True)
    location = Column(String(200), nullable=True)
    next_of_kin_name = Column(String(200), nullable=True)
    next_of_kin_contact = Column(String(100), nullable=True)

    # Scope
    role = Column(String(20), nullable=False, default=Role.USER.value)
    region_id = Column(UUID(as_uuid=True), ForeignKey("regions.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationship
    region = relationship("Region", backref="users")
