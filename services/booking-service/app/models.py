from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey, Index, text

from .db import Base

ACTIVE_STATUSES = ("pending", "approved")

_ACTIVE_WHERE = text("status IN ('pending', 'approved')")


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    # owned by the auth service; may be empty here, read only to enrich responses
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="student")


class FacultyMentor(Base):
    __tablename__ = "faculty_mentors"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    department = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    office = Column(String, nullable=False)
    specialization = Column(String, nullable=False)
    availability = Column(JSON, nullable=False, default=list)
    avatar = Column(String, nullable=True)


class MentorBooking(Base):
    __tablename__ = "mentor_bookings"
    __table_args__ = (
        # at most one pending/approved booking per mentor, date and time
        Index(
            "uq_mentor_bookings_active_slot",
            "mentor_id", "date", "time",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)  # auth service user id, no local FK
    mentor_id = Column(Integer, ForeignKey("faculty_mentors.id"), nullable=False, index=True)

    date = Column(String, nullable=False)  # YYYY-MM-DD
    time = Column(String, nullable=False)  # 09:00 AM

    purpose = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)  # pending/approved/rejected/completed
    rejection_reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class ClassroomBooking(Base):
    __tablename__ = "classroom_bookings"
    __table_args__ = (
        Index(
            "uq_classroom_bookings_active_slot",
            "classroom", "date", "time_slot",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)  # auth service user id, no local FK
    classroom = Column(String, nullable=False)

    date = Column(String, nullable=False)  # YYYY-MM-DD
    time_slot = Column(String, nullable=False)  # 08:30-09:30

    purpose = Column(String, nullable=False)
    alternative_name = Column(String, nullable=True)
    alternative_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending", index=True)  # pending/approved/rejected
    rejection_reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
