from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
from datetime import datetime


# ---- Classrooms ----

class ClassroomCatalogResponse(BaseModel):
    classrooms: List[str]
    time_slots: List[str]
    overrides: Dict[str, List[str]]


class CreateClassroomBooking(BaseModel):
    classroom: str
    date: str
    time_slot: str
    purpose: str
    alternative_name: Optional[str] = None
    alternative_id: Optional[str] = None


class ClassroomBookingResponse(BaseModel):
    id: int
    user_id: int
    classroom: str
    date: str
    time_slot: str
    purpose: str
    alternative_name: Optional[str] = None
    alternative_id: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    created_at: datetime


# ---- Mentors ----

class CreateMentor(BaseModel):
    name: str
    department: str
    email: str
    office: str
    specialization: str
    availability: List[Dict[str, Any]] = Field(default_factory=list)
    avatar: Optional[str] = None


class MentorResponse(BaseModel):
    id: int
    name: str
    department: str
    email: str
    office: str
    specialization: str
    availability: List[Dict[str, Any]]
    avatar: Optional[str] = None


class CreateMentorBooking(BaseModel):
    mentor_id: int
    date: str
    time: str
    purpose: str


class MentorBookingResponse(BaseModel):
    id: int
    user_id: int
    mentor_id: int
    date: str
    time: str
    purpose: str
    status: str
    rejection_reason: Optional[str] = None
    created_at: datetime


class BookedSlotResponse(BaseModel):
    time: str
    status: str


class StudentInfo(BaseModel):
    id: int
    full_name: Optional[str] = None
    email: Optional[str] = None


class PendingMentorBookingResponse(MentorBookingResponse):
    student: StudentInfo


# ---- Transitions ----

class TransitionBooking(BaseModel):
    status: str
    rejection_reason: Optional[str] = None
