# urban_harvest/api/routers/workshops.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import require_admin
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import WorkshopIn, CurrentUser
from urban_harvest.services.workshop_service import WorkshopService

router = APIRouter(prefix="/workshops", tags=["workshops"])


def get_service(db: Session):
    return WorkshopService(db)


@router.get("/")
def list_workshops(db: Session = Depends(get_db)):
    return get_service(db).list_workshops()


@router.get("/{workshop_id}")
def get_workshop(workshop_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_workshop(workshop_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", status_code=201)
def create_workshop(
    payload: WorkshopIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Creates a workshop and queues a push notification to every subscriber."""
    svc = get_service(db)
    try:
        return svc.create_workshop(payload, admin)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{workshop_id}")
def update_workshop(
    workshop_id: int,
    payload: WorkshopIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_workshop(workshop_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{workshop_id}")
def delete_workshop(workshop_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.delete_workshop(workshop_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{workshop_id}/bookings")
def list_workshop_bookings(workshop_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_bookings(workshop_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
