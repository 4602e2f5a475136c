# urban_harvest/api/routers/products.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import require_admin
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import ProductIn, CurrentUser
from urban_harvest.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("/")
def list_products(db: Session = Depends(get_db)):
    return get_service(db).list_products()


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{product_id}/sales")
def get_product_sales(product_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Order lines of the product with buyer contact and totals."""
    svc = get_service(db)
    try:
        return svc.get_sales(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", status_code=201)
def create_product(payload: ProductIn, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).create_product(payload, admin)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    payload: ProductIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_product(product_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}")
def delete_product(product_id: int, admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.delete_product(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
