from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from skillvision.database import Base


class Student(Base):
    """
    Student profile.
    One active profile per user: the most recently created row wins.
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)  # External identity (JWT sub or X-User-ID)

    name = Column(String(200), nullable=False)
    age = Column(Integer, nullable=False)
    education_level = Column(String(100), nullable=False)  # Open string, presentational only
    interests = Column(Text, nullable=False)
    # 'thriving_economy', 'ambitious_nation', 'vibrant_society', 'all'
    strategic_preference = Column(String(50), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    quiz_responses = relationship("QuizResponse", back_populates="student", cascade="all, delete-orphan")
    recommendations = relationship("SkillRecommendation", back_populates="student", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "age": self.age,
            "education_level": self.education_level,
            "interests": self.interests,
            "strategic_preference": self.strategic_preference,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
