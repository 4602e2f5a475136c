# urban_harvest/services/event_service.py
from datetime import date

from sqlalchemy.orm import Session

from urban_harvest.data.models.event import (
    EventModel,
    EventAgendaModel,
    EventHighlightModel,
    EventExpectationModel,
)
from urban_harvest.domain.schemas import EventIn, CurrentUser
from urban_harvest.repos.event_repo import EventRepo
from urban_harvest.services.notification_service import NotificationService
from urban_harvest.services.upload_service import remove_uploaded_image
from urban_harvest.services.review_service import average, round_rating
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

_FIELDS = (
    "category_id", "organizer_id", "title", "description", "detailed_description",
    "event_date", "event_time", "location", "image", "price", "total_spots",
)


def _event_dict(row) -> dict:
    values = row._asdict()
    event = values.pop("EventModel")
    data = event.to_dict()
    data.update(values)
    data["agenda"] = [{"time": a.time, "activity": a.activity} for a in event.agenda]
    data["highlights"] = [h.highlight_text for h in event.highlights]
    data["what_to_expect"] = [x.expectation_text for x in event.expectations]
    return data


def _set_children(event: EventModel, payload: EventIn):
    event.agenda = [
        EventAgendaModel(time=a.time, activity=a.activity, order_index=i)
        for i, a in enumerate(payload.agenda, start=1)
    ]
    event.highlights = [
        EventHighlightModel(highlight_text=text, order_index=i)
        for i, text in enumerate(payload.highlights, start=1)
    ]
    event.expectations = [
        EventExpectationModel(expectation_text=text, order_index=i)
        for i, text in enumerate(payload.what_to_expect, start=1)
    ]


class EventService:
    def __init__(self, db: Session):
        self.repo = EventRepo(db)
        self.notification_service = NotificationService()

    def list_events(self) -> dict:
        stats = self.repo.review_stats()
        events = []
        for row in self.repo.list_events():
            data = _event_dict(row)
            count, avg = stats.get(data["event_id"], (0, 0.0))
            data["total_reviews"] = count
            data["average_rating"] = round_rating(avg)
            events.append(data)
        return {"events": events}

    def get_event(self, event_id: int) -> dict:
        row = self.repo.get_event_row(event_id)
        if not row:
            raise LookupError("Event not found")

        data = _event_dict(row)
        reviews = []
        for review, user_name, profile_image in self.repo.list_reviews(event_id):
            item = review.to_dict()
            item["user_name"] = user_name
            item["profile_image"] = profile_image
            reviews.append(item)
        data["reviews"] = reviews
        data["total_reviews"] = len(reviews)
        data["average_rating"] = average([r["rating"] for r in reviews])
        return {"event": data}

    def create_event(self, payload: EventIn, user: CurrentUser) -> dict:
        if payload.event_date <= date.today():
            raise ValueError("Event date must be in the future. Today and past dates are not allowed.")

        event = EventModel(
            **{f: getattr(payload, f) for f in _FIELDS},
            created_by_user=user.id,
            spots_left=payload.total_spots,
        )
        _set_children(event, payload)
        event = self.repo.add_event(event)
        logger.info(f"Event {event.event_id} created by user {user.id}")

        self.notification_service.broadcast(
            "New Event Added!",
            f"{event.title} on {event.event_date:%b %d} - Register now!",
            f"/events/{event.event_id}",
        )
        return {"message": "Event created successfully", "event_id": event.event_id}

    def update_event(self, event_id: int, payload: EventIn) -> dict:
        event = self.repo.get_event(event_id)
        if not event:
            raise LookupError("Event not found")

        # keep already booked spots booked when capacity changes
        booked = event.total_spots - event.spots_left
        for f in _FIELDS:
            setattr(event, f, getattr(payload, f))
        event.spots_left = max(payload.total_spots - booked, 0)
        _set_children(event, payload)
        self.repo.commit()

        logger.info(f"Event {event_id} updated")
        return {"message": "Event updated successfully"}

    def delete_event(self, event_id: int) -> dict:
        event = self.repo.get_event(event_id)
        if not event:
            raise LookupError("Event not found")

        image = event.image
        self.repo.delete_event(event)
        remove_uploaded_image(image)

        logger.info(f"Event {event_id} deleted")
        return {"message": "Event deleted successfully"}

    def list_bookings(self, event_id: int) -> dict:
        if not self.repo.get_event(event_id):
            raise LookupError("Event not found")

        bookings = [row._asdict() for row in self.repo.list_bookings(event_id)]
        return {
            "bookings": bookings,
            "total_bookings": len(bookings),
            "total_attendees": sum(b["quantity"] for b in bookings),
        }
