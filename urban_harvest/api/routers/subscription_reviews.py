# urban_harvest/api/routers/subscription_reviews.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import SubscriptionReviewIn, ReviewBodyIn, CurrentUser
from urban_harvest.services.review_service import SubscriptionReviewService

router = APIRouter(prefix="/subscription-reviews", tags=["reviews"])


def get_service(db: Session):
    return SubscriptionReviewService(db)


@router.get("/box/{box_id}")
def list_box_reviews(box_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_for_box(box_id)


@router.get("/my-reviews")
def my_reviews(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).list_for_user(user.id)


@router.post("/", status_code=201)
def create_review(
    payload: SubscriptionReviewIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create(payload, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{review_id}")
def update_review(
    review_id: int,
    payload: ReviewBodyIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update(review_id, payload, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{review_id}")
def delete_review(review_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.delete(review_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
