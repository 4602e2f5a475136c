# urban_harvest/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import BulkOrderIn, CurrentUser
from urban_harvest.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/bulk", status_code=201)
def create_bulk_order(
    payload: BulkOrderIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Checkout: creates the order, its items and the box subscriptions,
    and takes the ordered quantities out of stock.
    """
    svc = get_service(db)
    try:
        return svc.create_bulk_order(payload, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/")
def list_my_orders(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).list_user_orders(user.id)


@router.get("/{order_id}")
def get_order(order_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_user_order(order_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
