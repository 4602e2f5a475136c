# urban_harvest/services/booking_service.py
from sqlalchemy.orm import Session

from urban_harvest.data.models.booking import BookingModel
from urban_harvest.domain.schemas import BookingIn, CurrentUser
from urban_harvest.repos.booking_repo import BookingRepo
from urban_harvest.repos.event_repo import EventRepo
from urban_harvest.repos.workshop_repo import WorkshopRepo
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


class BookingService:
    """
    Use cases around event and workshop bookings.

    The booking row and the spot decrement share one transaction; the
    decrement is conditional, so two requests racing for the last spots
    cannot push spots_left below zero.
    """

    def __init__(self, db: Session):
        self.repo = BookingRepo(db)
        self.events = EventRepo(db)
        self.workshops = WorkshopRepo(db)

    def create_booking(self, payload: BookingIn, user: CurrentUser) -> dict:
        if user.is_admin:
            raise PermissionError("Administrators cannot create bookings")

        if payload.booking_type not in ("event", "workshop"):
            raise ValueError("Invalid booking type")

        if bool(payload.event_id) == bool(payload.workshop_id):
            raise ValueError("Provide either event_id or workshop_id, not both")

        if payload.booking_type == "event" and not payload.event_id:
            raise ValueError("event_id is required for event bookings")
        if payload.booking_type == "workshop" and not payload.workshop_id:
            raise ValueError("workshop_id is required for workshop bookings")

        try:
            if payload.booking_type == "event":
                reserved = self.events.reserve_spots(payload.event_id, payload.quantity)
            else:
                reserved = self.workshops.reserve_spots(payload.workshop_id, payload.quantity)

            # missing target and too few spots both update nothing
            if not reserved:
                raise ValueError("Not enough spots available")

            booking = self.repo.add_booking(BookingModel(
                user_id=user.id,
                event_id=payload.event_id if payload.booking_type == "event" else None,
                workshop_id=payload.workshop_id if payload.booking_type == "workshop" else None,
                booking_type=payload.booking_type,
                customer_name=payload.customer_name,
                customer_email=payload.customer_email,
                customer_phone=payload.customer_phone,
                special_requests=payload.special_requests,
                quantity=payload.quantity,
                total_amount=payload.total_amount,
                payment_method=payload.payment_method or "card",
            ))
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(
            f"Booking {booking.booking_id} for {payload.booking_type} "
            f"{payload.event_id or payload.workshop_id} x{payload.quantity} by user {user.id}"
        )
        return {"message": "Booking created successfully", "booking_id": booking.booking_id}

    def list_user_bookings(self, user_id: int) -> dict:
        bookings = []
        for row in self.repo.list_user_bookings(user_id):
            values = row._asdict()
            data = values.pop("BookingModel").to_dict()
            data.update(values)
            data["has_reviewed"] = bool(data["has_reviewed"])
            bookings.append(data)
        return {"bookings": bookings}
