# urban_harvest/api/routers/subscriptions.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import SubscriptionIn, SubscriptionReviewIn, ReviewBodyIn, CurrentUser
from urban_harvest.services.subscription_service import SubscriptionService
from urban_harvest.services.review_service import SubscriptionReviewService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_service(db: Session):
    return SubscriptionService(db)


@router.post("/", status_code=201)
def create_subscription(
    payload: SubscriptionIn,
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


@router.get("/my")
def my_subscriptions(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Active and paused subscriptions of the caller."""
    return get_service(db).list_current(user.id)


@router.get("/history")
def subscription_history(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).list_history(user.id)


def _transition(action, subscription_id: int, user_id: int):
    try:
        return action(subscription_id, user_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{subscription_id}/cancel")
def cancel(subscription_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return _transition(get_service(db).cancel, subscription_id, user.id)


@router.put("/{subscription_id}/pause")
def pause(subscription_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return _transition(get_service(db).pause, subscription_id, user.id)


@router.put("/{subscription_id}/resume")
def resume(subscription_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return _transition(get_service(db).resume, subscription_id, user.id)


@router.put("/{subscription_id}/reactivate")
def reactivate(subscription_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return _transition(get_service(db).reactivate, subscription_id, user.id)


@router.post("/{subscription_id}/review", status_code=201)
def add_review(
    subscription_id: int,
    payload: ReviewBodyIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = SubscriptionReviewService(db)
    try:
        review = SubscriptionReviewIn(subscription_id=subscription_id, rating=payload.rating, comment=payload.comment)
        return svc.create(review, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{subscription_id}/review")
def get_review(subscription_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return SubscriptionReviewService(db).get_for_subscription(subscription_id, user.id)
