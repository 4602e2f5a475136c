# urban_harvest/api/routers/bookings.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import BookingIn, CurrentUser
from urban_harvest.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])


def get_service(db: Session):
    return BookingService(db)


@router.post("/", status_code=201)
def create_booking(
    payload: BookingIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Books spots on an event or a workshop.
    Fails when the target does not have enough spots left.
    """
    svc = get_service(db)
    try:
        return svc.create_booking(payload, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/")
def list_my_bookings(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).list_user_bookings(user.id)
