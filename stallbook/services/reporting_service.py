"""Dashboard and reporting service (read-only queries)."""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.core.exceptions import NotFoundError
from stallbook.core.permissions import UserRole
from stallbook.domain.application_state import ApplicationStatus
from stallbook.domain.booking_state import BookingStatus, StallStatus, today
from stallbook.domain.payment_state import PaymentStatus
from stallbook.domain.pricing import average_rating, calculate_amount, round_money
from stallbook.models.booking import Booking
from stallbook.models.feedback import Feedback
from stallbook.models.payment import Payment
from stallbook.models.stall import Event, Stall
from stallbook.models.user import StallOwnerApplication, User

RECENT_LIMIT = 6


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def preferred_payment(payments: list[Payment]) -> Payment | None:
    """The completed payment if there is one, otherwise the newest attempt."""
    if not payments:
        return None
    completed = [p for p in payments if p.status == PaymentStatus.COMPLETED.value]
    candidates = completed or payments
    return max(candidates, key=lambda p: _aware(p.processed_at))


def completed_revenue(payments: list[Payment]) -> Decimal:
    return round_money(
        sum(
            (Decimal(p.amount) for p in payments if p.status == PaymentStatus.COMPLETED.value),
            Decimal("0"),
        )
    )


class ReportingService:
    """Read-only dashboard and report queries."""

    async def _count(self, db: AsyncSession, model, *criteria) -> int:
        query = select(func.count()).select_from(model)
        if criteria:
            query = query.where(*criteria)
        return await db.scalar(query) or 0

    async def get_admin_dashboard(self, db: AsyncSession) -> dict:
        """Platform-wide counters and revenue."""
        revenue = await db.scalar(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(
                Payment.status == PaymentStatus.COMPLETED.value
            )
        )

        return {
            "total_users": await self._count(db, User),
            "active_customers": await self._count(
                db, User, User.role == UserRole.CUSTOMER.value, User.is_active.is_(True)
            ),
            "active_owners": await self._count(
                db, User, User.role == UserRole.STALL_OWNER.value, User.is_active.is_(True)
            ),
            "total_stalls": await self._count(db, Stall),
            "available_stalls": await self._count(
                db, Stall, Stall.status == StallStatus.AVAILABLE.value
            ),
            "pending_owner_applications": await self._count(
                db,
                StallOwnerApplication,
                StallOwnerApplication.status == ApplicationStatus.PENDING.value,
            ),
            "pending_bookings": await self._count(
                db, Booking, Booking.status == BookingStatus.PENDING.value
            ),
            "total_revenue": round_money(revenue),
            "failed_payments": await self._count(
                db, Payment, Payment.status == PaymentStatus.FAILED.value
            ),
            "total_payments": await self._count(db, Payment),
        }

    async def _payments_by_booking(
        self, db: AsyncSession, booking_ids: list[UUID]
    ) -> dict[UUID, list[Payment]]:
        grouped: dict[UUID, list[Payment]] = defaultdict(list)
        if booking_ids:
            result = await db.execute(select(Payment).where(Payment.booking_id.in_(booking_ids)))
            for payment in result.scalars().all():
                grouped[payment.booking_id].append(payment)
        return grouped

    async def _feedback_for(self, db: AsyncSession, booking_ids: list[UUID]) -> list[Feedback]:
        if not booking_ids:
            return []
        result = await db.execute(
            select(Feedback)
            .where(Feedback.booking_id.in_(booking_ids))
            .order_by(Feedback.submitted_at.desc())
        )
        return list(result.scalars().all())

    def _booking_detail(
        self,
        booking: Booking,
        stall: Stall,
        customer: User | None,
        payments: list[Payment],
    ) -> dict:
        payment = preferred_payment(payments)
        return {
            "booking_id": booking.id,
            "stall_id": stall.id,
            "stall_name": stall.name,
            "customer_name": customer.full_name if customer else "-",
            "customer_email": customer.email if customer else None,
            "start_date": booking.start_date,
            "end_date": booking.end_date,
            "status": booking.status,
            "payment_status": booking.payment_status,
            "amount": round_money(
                calculate_amount(booking.start_date, booking.end_date, stall.rent_per_day)
            ),
            "payment_reference": payment.transaction_reference if payment else None,
            "payment_date": payment.processed_at if payment else None,
            "payment_amount": payment.amount if payment else None,
            "payment_provider": payment.provider if payment else None,
        }

    async def get_owner_dashboard(self, db: AsyncSession, owner_id: UUID) -> dict:
        """Stalls, bookings, revenue and feedback for one owner."""
        current_date = today()

        stall_rows = await db.execute(
            select(Stall, Event.name)
            .outerjoin(Event, Event.id == Stall.event_id)
            .where(Stall.owner_id == owner_id)
            .order_by(Stall.name)
        )
        stalls = stall_rows.all()
        stall_by_id = {stall.id: stall for stall, _ in stalls}

        bookings: list[tuple[Booking, User]] = []
        if stall_by_id:
            booking_rows = await db.execute(
                select(Booking, User)
                .join(User, User.id == Booking.customer_id)
                .where(Booking.stall_id.in_(list(stall_by_id)))
            )
            bookings = list(booking_rows.all())

        booking_ids = [booking.id for booking, _ in bookings]
        payments = await self._payments_by_booking(db, booking_ids)
        feedback = await self._feedback_for(db, booking_ids)
        booking_by_id = {booking.id: (booking, customer) for booking, customer in bookings}

        def is_upcoming(booking: Booking) -> bool:
            return booking.status == BookingStatus.APPROVED.value and booking.end_date >= current_date

        summaries = []
        for stall, event_name in stalls:
            stall_bookings = [(b, c) for b, c in bookings if b.stall_id == stall.id]
            stall_payments = [p for b, _ in stall_bookings for p in payments.get(b.id, [])]
            stall_feedback = [
                f for f in feedback if booking_by_id[f.booking_id][0].stall_id == stall.id
            ]
            upcoming = sorted(
                ((b, c) for b, c in stall_bookings if is_upcoming(b)),
                key=lambda row: row[0].start_date,
            )
            next_booking = None
            if upcoming:
                booking, customer = upcoming[0]
                next_booking = self._booking_detail(
                    booking, stall, customer, payments.get(booking.id, [])
                )

            summaries.append(
                {
                    "stall_id": stall.id,
                    "event_id": stall.event_id,
                    "event_name": event_name,
                    "slot_number": stall.slot_number,
                    "name": stall.name,
                    "location": stall.location,
                    "size": stall.size,
                    "rent_per_day": stall.rent_per_day,
                    "status": stall.status,
                    "total_bookings": len(stall_bookings),
                    "pending_requests": sum(
                        1 for b, _ in stall_bookings if b.status == BookingStatus.PENDING.value
                    ),
                    "total_revenue": completed_revenue(stall_payments),
                    "average_rating": average_rating(f.rating for f in stall_feedback),
                    "review_count": len(stall_feedback),
                    "next_booking": next_booking,
                }
            )

        upcoming_all = sorted(
            ((b, c) for b, c in bookings if is_upcoming(b)),
            key=lambda row: row[0].start_date,
        )[:RECENT_LIMIT]

        recent_feedback = []
        for entry in feedback[:RECENT_LIMIT]:
            booking, customer = booking_by_id[entry.booking_id]
            recent_feedback.append(
                {
                    "stall_name": stall_by_id[booking.stall_id].name,
                    "customer_name": customer.full_name if customer else "-",
                    "rating": entry.rating,
                    "comments": entry.comments,
                    "submitted_at": entry.submitted_at,
                }
            )

        all_payments = [p for group in payments.values() for p in group]
        return {
            "stall_count": len(stalls),
            "pending_bookings": sum(
                1 for b, _ in bookings if b.status == BookingStatus.PENDING.value
            ),
            "upcoming_bookings": len(upcoming_all),
            "total_revenue": completed_revenue(all_payments),
            "stall_summaries": summaries,
            "upcoming_booking_details": [
                self._booking_detail(b, stall_by_id[b.stall_id], c, payments.get(b.id, []))
                for b, c in upcoming_all
            ],
            "recent_feedback": recent_feedback,
        }

    async def get_stall_detail(self, db: AsyncSession, stall_id: UUID) -> dict:
        """Booking history, revenue and ratings for one stall."""
        stall = await db.get(Stall, stall_id)
        if not stall:
            raise NotFoundError("Stall", str(stall_id))
        owner = await db.get(User, stall.owner_id)

        booking_rows = await db.execute(
            select(Booking, User)
            .outerjoin(User, User.id == Booking.customer_id)
            .where(Booking.stall_id == stall.id)
            .order_by(Booking.start_date.desc())
        )
        bookings = list(booking_rows.all())
        booking_ids = [booking.id for booking, _ in bookings]
        customers = {booking.id: customer for booking, customer in bookings}

        payments = await self._payments_by_booking(db, booking_ids)
        feedback = await self._feedback_for(db, booking_ids)
        all_payments = [p for group in payments.values() for p in group]

        return {
            "stall_id": stall.id,
            "name": stall.name,
            "location": stall.location,
            "size": stall.size,
            "description": stall.description,
            "rent_per_day": stall.rent_per_day,
            "status": stall.status,
            "created_at": stall.created_at,
            "updated_at": stall.updated_at,
            "owner_name": owner.full_name if owner else None,
            "owner_email": owner.email if owner else None,
            "owner_phone": owner.phone if owner else None,
            "owner_company": owner.company_name if owner else None,
            "total_bookings": len(bookings),
            "pending_requests": sum(
                1 for b, _ in bookings if b.status == BookingStatus.PENDING.value
            ),
            "total_revenue": completed_revenue(all_payments),
            "average_rating": average_rating(f.rating for f in feedback),
            "review_count": len(feedback),
            "booking_history": [
                self._booking_detail(b, stall, c, payments.get(b.id, [])) for b, c in bookings
            ],
            "feedback": [
                {
                    "stall_name": stall.name,
                    "customer_name": (
                        customers[f.booking_id].full_name if customers.get(f.booking_id) else "-"
                    ),
                    "rating": f.rating,
                    "comments": f.comments,
                    "submitted_at": f.submitted_at,
                }
                for f in feedback
            ],
        }

    async def get_payment_report(self, db: AsyncSession) -> list[dict]:
        """Every payment attempt with stall and customer names, newest first."""
        result = await db.execute(
            select(Payment, Stall.name, User.full_name)
            .join(Booking, Booking.id == Payment.booking_id)
            .join(Stall, Stall.id == Booking.stall_id)
            .join(User, User.id == Booking.customer_id)
            .order_by(Payment.processed_at.desc())
        )
        return [
            {
                "id": payment.id,
                "booking_id": payment.booking_id,
                "stall_name": stall_name,
                "customer_name": customer_name,
                "amount": payment.amount,
                "currency": payment.currency,
                "provider": payment.provider,
                "transaction_reference": payment.transaction_reference,
                "status": payment.status,
                "processed_at": payment.processed_at,
            }
            for payment, stall_name, customer_name in result.all()
        ]


# Singleton instance
reporting_service = ReportingService()
