# urban_harvest/api/routers/subscription_boxes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import require_admin
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import SubscriptionBoxIn, CurrentUser
from urban_harvest.services.subscription_service import SubscriptionBoxService

router = APIRouter(prefix="/subscription-boxes", tags=["subscription-boxes"])


def get_service(db: Session):
    return SubscriptionBoxService(db)


@router.get("/")
def list_boxes(db: Session = Depends(get_db)):
    return get_service(db).list_boxes()


@router.get("/{box_id}")
def get_box(box_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_box(box_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", status_code=201)
def create_box(payload: SubscriptionBoxIn, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).create_box(payload)


@router.put("/{box_id}")
def update_box(
    box_id: int,
    payload: SubscriptionBoxIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_box(box_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{box_id}")
def delete_box(box_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Refused while the box still has active subscriptions."""
    svc = get_service(db)
    try:
        return svc.delete_box(box_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
