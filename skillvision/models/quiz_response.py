from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from skillvision.database import Base


class QuizResponse(Base):
    __tablename__ = "quiz_responses"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(100), nullable=False)
    # No uniqueness on (student_id, question_id): resubmissions append
    response_text = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    student = relationship("Student", back_populates="quiz_responses")

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "question_id": self.question_id,
            "response": self.response_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
