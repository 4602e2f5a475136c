# urban_harvest/api/routers/notifications.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user, require_admin
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import PushSubscriptionIn, SendNotificationIn, BroadcastIn, CurrentUser
from urban_harvest.services.push_service import PushService
from urban_harvest.utils.settings import VAPID_PUBLIC_KEY

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_service(db: Session):
    return PushService(db)


@router.get("/vapid-public-key")
def vapid_public_key():
    return {"publicKey": VAPID_PUBLIC_KEY}


@router.post("/subscribe", status_code=201)
def subscribe(
    payload: PushSubscriptionIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).subscribe(user.id, payload.endpoint, payload.keys.model_dump())
    return {"message": "Subscribed successfully"}


@router.post("/send")
def send(payload: SendNotificationIn, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Pushes a notification to every browser of one user."""
    svc = get_service(db)
    try:
        result = svc.send_to_user(payload.user_id, payload.title, payload.body, payload.url)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Notification sent successfully", **result}


@router.post("/send-all")
def send_all(payload: BroadcastIn, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        result = svc.send_to_all(payload.title, payload.body, payload.url)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": f"Notification sent to {result['success']} subscriptions", **result}
