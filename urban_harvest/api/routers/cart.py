# urban_harvest/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import CartValidateIn
from urban_harvest.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("/validate")
def validate_cart(payload: CartValidateIn, db: Session = Depends(get_db)):
    return CartService(db).validate(payload.items)
