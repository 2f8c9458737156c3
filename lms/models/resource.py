from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from lms.db.database import Base


class Resource(Base):
    """An uploaded teaching file (audio, video, PDF, image).

    ``label`` is an optional free-text tag teachers use to bundle uploads;
    unlabeled uploads are bundled by upload time when listed.
    """

    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, default="OTHER")  # AUDIO, VIDEO, PDF, IMAGE, OTHER
    file_path = Column(String(500), nullable=True)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    label = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=True)
    is_shared = Column(Boolean, default=False, nullable=False)  # template other teachers can allocate
    template_id = Column(Integer, ForeignKey("resources.id", ondelete="SET NULL"), nullable=True)

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True)
    created_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course = relationship("Course")
    unit = relationship("Unit")
    created_by = relationship("User")
    template = relationship("Resource", remote_side=[id])
    assignments = relationship("Assignment", secondary="assignment_resources", back_populates="resources")

    __table_args__ = (
        Index("ix_resources_creator_created", "created_by_user_id", "created_at"),
    )
