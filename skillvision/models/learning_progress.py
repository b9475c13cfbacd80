from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, UniqueConstraint
from datetime import datetime
from skillvision.database import Base


class LearningProgress(Base):
    """Progress on a recommended skill, one row per (student, skill)."""
    __tablename__ = "learning_progress"
    __table_args__ = (
        UniqueConstraint("student_id", "skill_id", name="uq_learning_progress_student_skill"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skill_recommendations.id", ondelete="CASCADE"), nullable=False)

    progress_percentage = Column(Integer, nullable=False, default=0)  # 0-100
    completed_projects = Column(Text, default="")
    notes = Column(Text, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "skill_id": self.skill_id,
            "progress_percentage": self.progress_percentage,
            "completed_projects": self.completed_projects or "",
            "notes": self.notes or "",
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
