from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .catalog import DEFAULT_CLASSROOM_CATALOG
from .db import get_db
from .models import ClassroomBooking, FacultyMentor, MentorBooking, User
from .rbac import require_role
from .resolver import ClassroomResolver, MentorResolver
from .schemas import (
    BookedSlotResponse,
    ClassroomBookingResponse,
    ClassroomCatalogResponse,
    CreateClassroomBooking,
    CreateMentor,
    CreateMentorBooking,
    MentorBookingResponse,
    MentorResponse,
    PendingMentorBookingResponse,
    StudentInfo,
    TransitionBooking,
)
from .security import Actor, get_actor

router = APIRouter()


def get_classroom_resolver(db: AsyncSession = Depends(get_db)) -> ClassroomResolver:
    return ClassroomResolver(db)


def get_mentor_resolver(db: AsyncSession = Depends(get_db)) -> MentorResolver:
    return MentorResolver(db)


def _classroom_booking_out(booking: ClassroomBooking) -> ClassroomBookingResponse:
    return ClassroomBookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        classroom=booking.classroom,
        date=booking.date,
        time_slot=booking.time_slot,
        purpose=booking.purpose,
        alternative_name=booking.alternative_name,
        alternative_id=booking.alternative_id,
        status=booking.status,
        rejection_reason=booking.rejection_reason,
        created_at=booking.created_at,
    )


def _mentor_booking_out(booking: MentorBooking) -> MentorBookingResponse:
    return MentorBookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        mentor_id=booking.mentor_id,
        date=booking.date,
        time=booking.time,
        purpose=booking.purpose,
        status=booking.status,
        rejection_reason=booking.rejection_reason,
        created_at=booking.created_at,
    )


def _mentor_out(mentor: FacultyMentor) -> MentorResponse:
    return MentorResponse(
        id=mentor.id,
        name=mentor.name,
        department=mentor.department,
        email=mentor.email,
        office=mentor.office,
        specialization=mentor.specialization,
        availability=mentor.availability or [],
        avatar=mentor.avatar,
    )


def _pending_out(booking: MentorBooking, student: Optional[User]) -> PendingMentorBookingResponse:
    if student is None:
        info = StudentInfo(id=booking.user_id)
    else:
        info = StudentInfo(id=student.id, full_name=student.full_name, email=student.email)
    return PendingMentorBookingResponse(**_mentor_booking_out(booking).model_dump(), student=info)


# ================= CLASSROOMS =================

@router.get("/classrooms", response_model=ClassroomCatalogResponse, tags=["Classrooms"])
async def classroom_catalog():
    catalog = DEFAULT_CLASSROOM_CATALOG
    return ClassroomCatalogResponse(
        classrooms=list(catalog.classrooms),
        time_slots=list(catalog.time_slots),
        overrides={slot: sorted(rooms) for slot, rooms in catalog.overrides.items()},
    )


@router.get("/classrooms/available", response_model=List[str], tags=["Classrooms"])
async def available_classrooms(
    date: str,
    time_slot: str,
    actor: Actor = Depends(get_actor),
    resolver: ClassroomResolver = Depends(get_classroom_resolver),
):
    available = await resolver.list_available(date, time_slot)
    order = {name: i for i, name in enumerate(resolver.catalog.classrooms)}
    return sorted(available, key=lambda name: order.get(name, len(order)))


@router.post(
    "/classrooms/bookings",
    response_model=ClassroomBookingResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Classrooms"],
)
async def create_classroom_booking(
    data: CreateClassroomBooking,
    actor: Actor = Depends(get_actor),
    resolver: ClassroomResolver = Depends(get_classroom_resolver),
):
    booking = await resolver.create_booking(
        actor.user_id,
        data.classroom,
        data.date,
        data.time_slot,
        data.purpose,
        alternative_name=data.alternative_name,
        alternative_id=data.alternative_id,
    )
    return _classroom_booking_out(booking)


@router.get("/classrooms/bookings", response_model=List[ClassroomBookingResponse], tags=["Classrooms"])
async def my_classroom_bookings(
    actor: Actor = Depends(get_actor),
    resolver: ClassroomResolver = Depends(get_classroom_resolver),
):
    return [_classroom_booking_out(b) for b in await resolver.bookings_for(actor.user_id)]


@router.get("/classrooms/bookings/all", response_model=List[ClassroomBookingResponse], tags=["Classrooms"])
async def all_classroom_bookings(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    actor: Actor = Depends(get_actor),
    resolver: ClassroomResolver = Depends(get_classroom_resolver),
):
    require_role(actor, ["admin"])
    return [_classroom_booking_out(b) for b in await resolver.all_bookings(status_filter)]


@router.get("/classrooms/bookings/{booking_id}", response_model=ClassroomBookingResponse, tags=["Classrooms"])
async def get_classroom_booking(
    booking_id: int,
    actor: Actor = Depends(get_actor),
    resolver: ClassroomResolver = Depends(get_classroom_resolver),
):
    return _classroom_booking_out(await resolver.get_booking(booking_id, actor))


@router.patch("/classrooms/bookings/{booking_id}", response_model=ClassroomBookingResponse, tags=["Classrooms"])
async def transition_classroom_booking(
    booking_id: int,
    data: TransitionBooking,
    actor: Actor = Depends(get_actor),
    resolver: ClassroomResolver = Depends(get_classroom_resolver),
):
    booking = await resolver.transition(booking_id, actor, data.status, data.rejection_reason)
    return _classroom_booking_out(booking)


# ================= MENTORS =================

@router.get("/mentors", response_model=List[MentorResponse], tags=["Mentors"])
async def list_mentors(resolver: MentorResolver = Depends(get_mentor_resolver)):
    return [_mentor_out(m) for m in await resolver.list_mentors()]


@router.post(
    "/mentors",
    response_model=MentorResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Mentors"],
)
async def create_mentor(
    data: CreateMentor,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    require_role(actor, ["admin"])
    mentor = await resolver.create_mentor(**data.model_dump())
    return _mentor_out(mentor)


@router.get("/mentors/available", response_model=List[int], tags=["Mentors"])
async def available_mentors(
    date: str,
    time: str,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    return sorted(await resolver.list_available(date, time))


@router.get("/mentors/{mentor_id}", response_model=MentorResponse, tags=["Mentors"])
async def get_mentor(mentor_id: int, resolver: MentorResolver = Depends(get_mentor_resolver)):
    return _mentor_out(await resolver.get_mentor(mentor_id))


@router.get("/mentors/{mentor_id}/booked-slots", response_model=List[BookedSlotResponse], tags=["Mentors"])
async def booked_slots(
    mentor_id: int,
    date: str,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    slots = await resolver.booked_slots(mentor_id, date)
    return [BookedSlotResponse(time=b.time, status=b.status) for b in slots]


@router.get("/mentors/{mentor_id}/available-times", response_model=List[str], tags=["Mentors"])
async def available_times(
    mentor_id: int,
    date: str,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    return await resolver.available_times(mentor_id, date)


# ================= MENTOR BOOKINGS =================

@router.post(
    "/mentor-bookings",
    response_model=MentorBookingResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Mentor bookings"],
)
async def create_mentor_booking(
    data: CreateMentorBooking,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    booking = await resolver.create_booking(
        actor.user_id, data.mentor_id, data.date, data.time, data.purpose
    )
    return _mentor_booking_out(booking)


@router.get("/mentor-bookings", response_model=List[MentorBookingResponse], tags=["Mentor bookings"])
async def my_mentor_bookings(
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    return [_mentor_booking_out(b) for b in await resolver.bookings_for(actor.user_id)]


@router.get("/mentor-bookings/{booking_id}", response_model=MentorBookingResponse, tags=["Mentor bookings"])
async def get_mentor_booking(
    booking_id: int,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    return _mentor_booking_out(await resolver.get_booking(booking_id, actor))


@router.patch("/mentor-bookings/{booking_id}", response_model=MentorBookingResponse, tags=["Mentor bookings"])
async def transition_mentor_booking(
    booking_id: int,
    data: TransitionBooking,
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    booking = await resolver.transition(booking_id, actor, data.status, data.rejection_reason)
    return _mentor_booking_out(booking)


@router.get(
    "/faculty/pending-bookings",
    response_model=List[PendingMentorBookingResponse],
    tags=["Mentor bookings"],
)
async def faculty_pending_bookings(
    actor: Actor = Depends(get_actor),
    resolver: MentorResolver = Depends(get_mentor_resolver),
):
    require_role(actor, ["faculty"])
    return [_pending_out(b, u) for b, u in await resolver.pending_for_mentor(actor)]
