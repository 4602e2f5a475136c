# urban_harvest/services/workshop_service.py
from datetime import date

from sqlalchemy.orm import Session

from urban_harvest.data.models.workshop import (
    WorkshopModel,
    WorkshopOutcomeModel,
    WorkshopRequirementModel,
)
from urban_harvest.domain.schemas import WorkshopIn, CurrentUser
from urban_harvest.repos.workshop_repo import WorkshopRepo
from urban_harvest.services.notification_service import NotificationService
from urban_harvest.services.upload_service import remove_uploaded_image
from urban_harvest.services.review_service import average, round_rating
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

_FIELDS = (
    "category_id", "instructor_id", "title", "description", "detailed_description",
    "workshop_date", "workshop_time", "duration", "location", "image", "price",
    "total_spots", "level",
)


def _workshop_dict(row) -> dict:
    values = row._asdict()
    workshop = values.pop("WorkshopModel")
    data = workshop.to_dict()
    data.update(values)
    data["learning_outcomes"] = [o.outcome_text for o in workshop.outcomes]
    data["requirements"] = [r.requirement_text for r in workshop.requirements]
    return data


def _set_children(workshop: WorkshopModel, payload: WorkshopIn):
    workshop.outcomes = [
        WorkshopOutcomeModel(outcome_text=text, order_index=i)
        for i, text in enumerate(payload.learning_outcomes, start=1)
    ]
    workshop.requirements = [
        WorkshopRequirementModel(requirement_text=text, order_index=i)
        for i, text in enumerate(payload.requirements, start=1)
    ]


class WorkshopService:
    def __init__(self, db: Session):
        self.repo = WorkshopRepo(db)
        self.notification_service = NotificationService()

    def list_workshops(self) -> dict:
        stats = self.repo.review_stats()
        workshops = []
        for row in self.repo.list_workshops():
            data = _workshop_dict(row)
            count, avg = stats.get(data["workshop_id"], (0, 0.0))
            data["total_reviews"] = count
            data["average_rating"] = round_rating(avg)
            workshops.append(data)
        return {"workshops": workshops}

    def get_workshop(self, workshop_id: int) -> dict:
        row = self.repo.get_workshop_row(workshop_id)
        if not row:
            raise LookupError("Workshop not found")

        data = _workshop_dict(row)
        reviews = []
        for review, user_name, profile_image in self.repo.list_reviews(workshop_id):
            item = review.to_dict()
            item["user_name"] = user_name
            item["profile_image"] = profile_image
            reviews.append(item)
        data["reviews"] = reviews
        data["total_reviews"] = len(reviews)
        data["average_rating"] = average([r["rating"] for r in reviews])
        return {"workshop": data}

    def create_workshop(self, payload: WorkshopIn, user: CurrentUser) -> dict:
        if payload.workshop_date <= date.today():
            raise ValueError("Workshop date must be in the future. Today and past dates are not allowed.")

        workshop = WorkshopModel(
            **{f: getattr(payload, f) for f in _FIELDS},
            created_by_user=user.id,
            spots_left=payload.total_spots,
        )
        _set_children(workshop, payload)
        workshop = self.repo.add_workshop(workshop)
        logger.info(f"Workshop {workshop.workshop_id} created by user {user.id}")

        self.notification_service.broadcast(
            "New Workshop Available!",
            f"{workshop.title} on {workshop.workshop_date:%b %d} - Register now!",
            f"/workshops/{workshop.workshop_id}",
        )
        return {"message": "Workshop created successfully", "workshop_id": workshop.workshop_id}

    def update_workshop(self, workshop_id: int, payload: WorkshopIn) -> dict:
        workshop = self.repo.get_workshop(workshop_id)
        if not workshop:
            raise LookupError("Workshop not found")

        booked = workshop.total_spots - workshop.spots_left
        for f in _FIELDS:
            setattr(workshop, f, getattr(payload, f))
        workshop.spots_left = max(payload.total_spots - booked, 0)
        _set_children(workshop, payload)
        self.repo.commit()

        logger.info(f"Workshop {workshop_id} updated")
        return {"message": "Workshop updated successfully"}

    def delete_workshop(self, workshop_id: int) -> dict:
        workshop = self.repo.get_workshop(workshop_id)
        if not workshop:
            raise LookupError("Workshop not found")

        image = workshop.image
        self.repo.delete_workshop(workshop)
        remove_uploaded_image(image)

        logger.info(f"Workshop {workshop_id} deleted")
        return {"message": "Workshop deleted successfully"}

    def list_bookings(self, workshop_id: int) -> dict:
        if not self.repo.get_workshop(workshop_id):
            raise LookupError("Workshop not found")

        bookings = [row._asdict() for row in self.repo.list_bookings(workshop_id)]
        return {
            "bookings": bookings,
            "total_bookings": len(bookings),
            "total_attendees": sum(b["quantity"] for b in bookings),
        }
