import json
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .catalog import (
    DEFAULT_CLASSROOM_CATALOG,
    DEFAULT_MENTOR_CATALOG,
    CLASSROOM_PURPOSE_MIN_LENGTH,
    MENTOR_PURPOSE_MIN_LENGTH,
    ClassroomCatalog,
    MentorCatalog,
    canonical_clock_time,
    canonical_time_slot,
    normalize_clock_time,
    normalize_date,
    normalize_time_slot,
    validate_purpose,
)
from .errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .models import ClassroomBooking, FacultyMentor, MentorBooking, User
from .security import Actor
from .store import BookingStore, ClassroomBookingStore, MentorBookingStore


def _emit(event_type: str, booking, **extra):
    line = {
        "event": event_type,
        "at": datetime.now(timezone.utc).isoformat(),
        "booking_id": booking.id,
        "user_id": booking.user_id,
        "date": booking.date,
        "status": booking.status,
        **extra,
    }
    print(json.dumps(line, separators=(",", ":"), default=str))


class SlotResolver:
    """Availability and booking lifecycle shared by every bookable resource.

    A slot is a (date, time key) pair. A resource may hold at most one
    pending/approved booking per slot; the storage layer enforces that, so
    creation is a single insert that either succeeds or raises ConflictError.
    """

    kind = "booking"
    store_class: type[BookingStore] = BookingStore

    # current status -> statuses it may move to
    transitions: dict[str, set[str]] = {}

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = self.store_class(db)

    async def _owns_resource(self, booking, actor: Actor) -> bool:
        raise NotImplementedError

    async def _require(self, booking_id: int):
        booking = await self.store.get(booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    async def _create(self, booking, resource):
        booking = await self.store.insert(booking)
        _emit(f"{self.kind}.created", booking, resource=resource)
        return booking

    async def get_booking(self, booking_id: int, actor: Actor):
        booking = await self._require(booking_id)
        if booking.user_id == actor.user_id or actor.has_role("admin"):
            return booking
        if await self._owns_resource(booking, actor):
            return booking
        raise AuthorizationError("You can only view your own bookings")

    async def bookings_for(self, user_id: int) -> list:
        return await self.store.for_user(user_id)

    async def transition(
        self,
        booking_id: int,
        actor: Actor,
        new_status: str,
        rejection_reason: str | None = None,
    ):
        booking = await self._require(booking_id)

        if not await self._owns_resource(booking, actor):
            raise AuthorizationError("You can only update bookings assigned to you")

        new_status = (new_status or "").strip().lower()
        targets = set().union(*self.transitions.values())
        if new_status not in targets:
            raise ValidationError(
                f"Invalid status: {new_status or None}. Allowed: {sorted(targets)}"
            )

        reason = (rejection_reason or "").strip() or None
        if new_status == "rejected" and not reason:
            raise ValidationError("rejection_reason is required when rejecting a booking")

        if new_status not in self.transitions.get(booking.status, set()):
            raise ConflictError(f"Booking is {booking.status}, cannot move it to {new_status}")

        previous = booking.status
        booking = await self.store.update_status(
            booking, new_status, reason if new_status == "rejected" else None
        )
        _emit(f"{self.kind}.transitioned", booking, previous_status=previous, actor_id=actor.user_id)
        return booking


class ClassroomResolver(SlotResolver):
    kind = "classroom_booking"
    store_class = ClassroomBookingStore
    transitions = {"pending": {"approved", "rejected"}}

    def __init__(self, db: AsyncSession, catalog: ClassroomCatalog = DEFAULT_CLASSROOM_CATALOG):
        super().__init__(db)
        self.catalog = catalog

    async def _owns_resource(self, booking, actor: Actor) -> bool:
        # classrooms belong to the administration
        return actor.has_role("admin")

    async def list_available(self, date: str, time_slot: str) -> set[str]:
        slot = canonical_time_slot(time_slot)
        if slot is None:
            return set()

        # the override table wins over anything the bookings say
        if self.catalog.is_overridden(slot):
            return set(self.catalog.eligible(slot))

        eligible = self.catalog.eligible(slot)
        if not eligible:
            return set()

        booked = {b.classroom for b in await self.store.query_active(normalize_date(date), slot)}
        return set(eligible - booked)

    async def create_booking(
        self,
        requester_id: int,
        classroom: str,
        date: str,
        time_slot: str,
        purpose: str,
        alternative_name: str | None = None,
        alternative_id: str | None = None,
    ) -> ClassroomBooking:
        purpose = validate_purpose(purpose, CLASSROOM_PURPOSE_MIN_LENGTH)
        date = normalize_date(date)
        slot = normalize_time_slot(time_slot)
        if slot not in self.catalog.time_slots:
            raise ValidationError(f"Unknown time slot: {slot}")

        name = self.catalog.lookup(classroom)
        if name is None:
            raise NotFoundError(f"Classroom not found: {classroom}")
        if name not in self.catalog.eligible(slot):
            raise ValidationError(f"{name} is not offered in the {slot} slot")

        booking = ClassroomBooking(
            user_id=requester_id,
            classroom=name,
            date=date,
            time_slot=slot,
            purpose=purpose,
            alternative_name=alternative_name,
            alternative_id=alternative_id,
            status="pending",
        )
        return await self._create(booking, name)

    async def all_bookings(self, status: str | None = None) -> list:
        return await self.store.all(status)


class MentorResolver(SlotResolver):
    kind = "mentor_booking"
    store_class = MentorBookingStore
    transitions = {
        "pending": {"approved", "rejected"},
        "approved": {"completed"},
    }

    def __init__(self, db: AsyncSession, catalog: MentorCatalog = DEFAULT_MENTOR_CATALOG):
        super().__init__(db)
        self.catalog = catalog

    async def _owns_resource(self, booking, actor: Actor) -> bool:
        if not actor.has_role("faculty") or not actor.email:
            return False
        mentor = await self.db.get(FacultyMentor, booking.mentor_id)
        return bool(mentor) and mentor.email.lower() == actor.email.lower()

    # -------- mentor catalog --------

    async def list_mentors(self) -> list[FacultyMentor]:
        res = await self.db.execute(select(FacultyMentor).order_by(FacultyMentor.id))
        return list(res.scalars().all())

    async def get_mentor(self, mentor_id: int) -> FacultyMentor:
        mentor = await self.db.get(FacultyMentor, mentor_id)
        if not mentor:
            raise NotFoundError("Mentor not found")
        return mentor

    async def create_mentor(self, **fields) -> FacultyMentor:
        mentor = FacultyMentor(**fields)
        self.db.add(mentor)
        await self.db.commit()
        return mentor

    async def mentor_for(self, actor: Actor) -> FacultyMentor:
        res = await self.db.execute(
            select(FacultyMentor)
            .where(func.lower(FacultyMentor.email) == (actor.email or "").lower())
            .order_by(FacultyMentor.id)
            .limit(1)
        )
        mentor = res.scalar_one_or_none()
        if not mentor:
            raise NotFoundError("Faculty mentor profile not found")
        return mentor

    # -------- availability --------

    async def list_available(self, date: str, time: str) -> set[int]:
        clock = canonical_clock_time(time)
        if clock not in self.catalog.times:
            return set()

        res = await self.db.execute(select(FacultyMentor.id))
        mentor_ids = set(res.scalars().all())
        booked = {b.mentor_id for b in await self.store.query_active(normalize_date(date), clock)}
        return mentor_ids - booked

    async def booked_slots(self, mentor_id: int, date: str) -> list[MentorBooking]:
        await self.get_mentor(mentor_id)
        bookings = await self.store.active_on(mentor_id, normalize_date(date))
        order = {t: i for i, t in enumerate(self.catalog.times)}
        return sorted(bookings, key=lambda b: order.get(b.time, len(order)))

    async def available_times(self, mentor_id: int, date: str) -> list[str]:
        booked = {b.time for b in await self.booked_slots(mentor_id, date)}
        return [t for t in self.catalog.times if t not in booked]

    # -------- bookings --------

    async def create_booking(
        self,
        requester_id: int,
        mentor_id: int,
        date: str,
        time: str,
        purpose: str,
    ) -> MentorBooking:
        purpose = validate_purpose(purpose, MENTOR_PURPOSE_MIN_LENGTH)
        date = normalize_date(date)
        clock = normalize_clock_time(time)
        if clock not in self.catalog.times:
            raise ValidationError(f"Unknown time: {clock}")

        await self.get_mentor(mentor_id)

        booking = MentorBooking(
            user_id=requester_id,
            mentor_id=mentor_id,
            date=date,
            time=clock,
            purpose=purpose,
            status="pending",
        )
        return await self._create(booking, mentor_id)

    async def pending_for_mentor(self, actor: Actor) -> list[tuple[MentorBooking, User | None]]:
        """Pending requests for the actor's mentor profile.

        Student details come from ``users`` when a row exists; otherwise the
        second element is None.
        """
        mentor = await self.mentor_for(actor)
        res = await self.db.execute(
            select(MentorBooking, User)
            .outerjoin(User, User.id == MentorBooking.user_id)
            .where(
                MentorBooking.mentor_id == mentor.id,
                MentorBooking.status == "pending",
            )
            .order_by(MentorBooking.date, MentorBooking.id)
        )
        return [(booking, user) for booking, user in res.all()]
