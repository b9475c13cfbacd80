from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Float
from sqlalchemy.orm import relationship
from datetime import datetime
from skillvision.database import Base


class SkillRecommendation(Base):
    """
    One generated future-skill recommendation.
    Append-only: every successful quiz submission adds a row.
    """
    __tablename__ = "skill_recommendations"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    skill_name = Column(String(300), nullable=False)
    skill_category = Column(String(200), nullable=False, default="")
    pillar = Column(String(50), nullable=False)  # 'Thriving Economy', 'Ambitious Nation', 'Vibrant Society'
    confidence_score = Column(Float, nullable=False)  # 0-1
    description = Column(Text, nullable=False, default="")

    # Pre-rendered text blocks
    learning_path_text = Column(Text, nullable=False)
    mini_project_text = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    student = relationship("Student", back_populates="recommendations")

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "skill_name": self.skill_name,
            "skill_category": self.skill_category,
            "pillar": self.pillar,
            "confidence_score": self.confidence_score,
            "description": self.description,
            "learning_path_text": self.learning_path_text,
            "mini_project_text": self.mini_project_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
