from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import ConflictError
from .models import ACTIVE_STATUSES, ClassroomBooking, MentorBooking


class BookingStore:
    """Persistence for one booking table.

    Subclasses name the model and the two columns that, together with
    ``date``, form the slot key guarded by the table's partial unique index.
    """

    model = None
    resource_column = None
    time_column = None

    def __init__(self, db: AsyncSession):
        self.db = db

    def _resource(self):
        return getattr(self.model, self.resource_column)

    def _time(self):
        return getattr(self.model, self.time_column)

    async def get(self, booking_id: int):
        res = await self.db.execute(select(self.model).where(self.model.id == booking_id))
        return res.scalar_one_or_none()

    async def insert(self, booking):
        """Insert-or-fail: a violated active-slot index becomes a ConflictError.

        Any other integrity failure (missing mentor row, NULL column) is
        re-raised untouched.
        """
        resource = getattr(booking, self.resource_column)
        date = booking.date
        time_key = getattr(booking, self.time_column)

        self.db.add(booking)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            # the clashing row is committed by the time the index fires
            if await self.query_active(date, time_key, resource):
                raise ConflictError("This slot is already booked. Please select a different one.")
            raise
        return booking

    async def query_active(self, date: str, time_key: str, resource=None) -> list:
        stmt = select(self.model).where(
            self.model.date == date,
            self._time() == time_key,
            self.model.status.in_(ACTIVE_STATUSES),
        )
        if resource is not None:
            stmt = stmt.where(self._resource() == resource)
        res = await self.db.execute(stmt)
        return list(res.scalars().all())

    async def active_on(self, resource, date: str) -> list:
        res = await self.db.execute(
            select(self.model)
            .where(
                self._resource() == resource,
                self.model.date == date,
                self.model.status.in_(ACTIVE_STATUSES),
            )
            .order_by(self._time())
        )
        return list(res.scalars().all())

    async def update_status(self, booking, status: str, reason: str | None = None):
        booking.status = status
        booking.rejection_reason = reason
        await self.db.commit()
        return booking

    async def for_user(self, user_id: int) -> list:
        res = await self.db.execute(
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return list(res.scalars().all())

    async def all(self, status: str | None = None) -> list:
        stmt = select(self.model).order_by(self.model.date, self._time(), self.model.id)
        if status:
            stmt = stmt.where(self.model.status == status)
        res = await self.db.execute(stmt)
        return list(res.scalars().all())


class ClassroomBookingStore(BookingStore):
    model = ClassroomBooking
    resource_column = "classroom"
    time_column = "time_slot"


class MentorBookingStore(BookingStore):
    model = MentorBooking
    resource_column = "mentor_id"
    time_column = "time"
