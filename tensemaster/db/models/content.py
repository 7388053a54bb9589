"""
Content tables for the local store.

The hosted database keeps one table per question set (quiz_simple_present,
review_past, challenge_hard, ...). Locally those sets share one `questions`
table keyed by (table_name, id); gauntlet challenges share `challenges`, with
the challenge body kept as JSON.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import JSON, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class QuestionRow(Base):
    """Multiple-choice question belonging to one question set."""

    __tablename__ = "questions"

    table_name: Mapped[str] = mapped_column(Text, primary_key=True)
    id: Mapped[str] = mapped_column(Text, primary_key=True)

    # Only set for custom_quiz_questions
    tense_id: Mapped[Optional[str]] = mapped_column(Text, index=True)

    sentence: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list] = mapped_column(JSON, nullable=False)
    correct_answer: Mapped[str] = mapped_column(Text, nullable=False)


class ChallengeRow(Base):
    """Gauntlet challenge; payload holds story_template/blanks, paragraph/errors or sentence/correct_tense_name."""

    __tablename__ = "challenges"

    table_name: Mapped[str] = mapped_column(Text, primary_key=True)
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)


class CourseRow(Base):
    """Learner-authored course."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    icon_name: Mapped[str] = mapped_column(Text, default="BookCopy")
    user_id: Mapped[Optional[str]] = mapped_column(Text)

    tenses: Mapped[List["CourseTenseRow"]] = relationship(
        back_populates="course",
        order_by="CourseTenseRow.order",
        cascade="all, delete-orphan",
    )


class CourseTenseRow(Base):
    __tablename__ = "course_tenses"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    course_id: Mapped[str] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    course: Mapped["CourseRow"] = relationship(back_populates="tenses")
