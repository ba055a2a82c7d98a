"""
Region Model
Fixed geographic partitions that own groups and users
"""

from sqlalchemy import Column, String, Text, DateTime, CheckConstraint, func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from attendance_api.database import Base


REGION_NAMES = (
    "KILIMANI",
    "LANGATA",
    "EASTERN",
    "KIAMBU",
    "WESTLANDS",
    "DIASPORA",
    "INTERCOUNTY",
)


class Region(Base):
    __tablename__ = "regions"
    __table_args__ = (
        CheckConstraint(
            "name IN (" + ", ".join(f"'{name}'" for name in REGION_NAMES) + ")",
            name="regions_name_check"
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
