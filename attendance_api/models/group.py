"""
Group Models
Groups and the users_groups membership association
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from attendance_api.database import Base
from attendance_api.roles import MembershipRole


class Group(Base):
    __tablename__ = "groups"
    __table_args__ = (
        UniqueConstraint("region_id", "name", name="groups_region_id_name_unique"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    region_id = Column(UUID(as_uuid=True), ForeignKey("regions.id", ondelete="SET NULL"), nullable=True, index=True)
    group_admin_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    region = relationship("Region", backref="groups")
    group_admin = relationship("User", foreign_keys=[group_admin_id])


class UserGroup(Base):
    __tablename__ = "users_groups"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="users_groups_user_id_group_id_unique"),
        CheckConstraint(
            "role IN (" + ", ".join(f"'{role.value}'" for role in MembershipRole) + ")",
            name="users_groups_role_check"
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    group_id = Column(UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default=MembershipRole.USER.value)

    # Join timestamp
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", backref="memberships")
    group = relationship("Group", backref="memberships")
