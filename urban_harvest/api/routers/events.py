# urban_harvest/api/routers/events.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import require_admin
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import EventIn, CurrentUser
from urban_harvest.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


def get_service(db: Session):
    return EventService(db)


@router.get("/")
def list_events(db: Session = Depends(get_db)):
    return get_service(db).list_events()


@router.get("/{event_id}")
def get_event(event_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_event(event_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", status_code=201)
def create_event(
    payload: EventIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Creates an event and queues a push notification to every subscriber."""
    svc = get_service(db)
    try:
        return svc.create_event(payload, admin)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{event_id}")
def update_event(
    event_id: int,
    payload: EventIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_event(event_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{event_id}")
def delete_event(event_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.delete_event(event_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{event_id}/bookings")
def list_event_bookings(event_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_bookings(event_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
