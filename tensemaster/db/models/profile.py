from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ProfileRow(Base):
    """Learner profile. Collections are JSON columns, as in the hosted table."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    email: Mapped[str] = mapped_column(Text, default="")
    username: Mapped[str] = mapped_column(Text, default="", index=True)

    xp: Mapped[int] = mapped_column(Integer, default=0, index=True)
    ai_coins: Mapped[int] = mapped_column(Integer, default=0)
    streak_days: Mapped[int] = mapped_column(Integer, default=0)
    total_quizzes_completed: Mapped[int] = mapped_column(Integer, default=0)
    total_coins_spent: Mapped[int] = mapped_column(Integer, default=0)

    # Stored as naive UTC
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime)
    last_challenge_completed: Mapped[Optional[datetime]] = mapped_column(DateTime)

    active_theme: Mapped[str] = mapped_column(Text, default="deep-space")
    achievements: Mapped[list] = mapped_column(JSON, default=list)
    purchased_themes: Mapped[list] = mapped_column(JSON, default=lambda: ["deep-space"])
    purchased_power_ups: Mapped[dict] = mapped_column(JSON, default=dict)
    course_progress: Mapped[dict] = mapped_column(JSON, default=dict)

    role: Mapped[str] = mapped_column(Text, default="user")
