# urban_harvest/api/routers/event_reviews.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import EventReviewIn, CurrentUser
from urban_harvest.services.review_service import AttendanceReviewService

router = APIRouter(prefix="/event-reviews", tags=["reviews"])


def get_service(db: Session):
    return AttendanceReviewService(db, "event")


@router.get("/can-review/{event_id}")
def can_review(event_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Only attendees (booking status attended) who have not reviewed yet."""
    return get_service(db).can_review(event_id, user.id)


@router.get("/{event_id}")
def list_reviews(event_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_for_target(event_id)


@router.post("/", status_code=201)
def create_review(
    payload: EventReviewIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create(payload, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{review_id}")
def delete_review(review_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.delete(review_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
