from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel, new_id


class ServiceQuestion(BaseModel):
    """Question asked while building a quote.

    Attached to exactly one catalog level; the other two ids stay null.
    """

    __tablename__ = "service_questions"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    question = Column(Text, nullable=False)
    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=True, index=True)
    sub_service_id = Column(String(36), ForeignKey("sub_services.id", ondelete="CASCADE"), nullable=True, index=True)
    specialty_id = Column(String(36), ForeignKey("specialties.id", ondelete="CASCADE"), nullable=True, index=True)

    options = relationship(
        "QuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
    )


class QuestionOption(BaseModel):
    __tablename__ = "question_options"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    question_id = Column(
        String(36),
        ForeignKey("service_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    option_text = Column(String, nullable=False)

    question = relationship("ServiceQuestion", back_populates="options")
