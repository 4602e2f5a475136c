# urban_harvest/api/routers/workshop_reviews.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import WorkshopReviewIn, CurrentUser
from urban_harvest.services.review_service import AttendanceReviewService

router = APIRouter(prefix="/workshop-reviews", tags=["reviews"])


def get_service(db: Session):
    return AttendanceReviewService(db, "workshop")


@router.get("/can-review/{workshop_id}")
def can_review(workshop_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Only attendees (booking status attended) who have not reviewed yet."""
    return get_service(db).can_review(workshop_id, user.id)


@router.get("/{workshop_id}")
def list_reviews(workshop_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_for_target(workshop_id)


@router.post("/", status_code=201)
def create_review(
    payload: WorkshopReviewIn,
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
