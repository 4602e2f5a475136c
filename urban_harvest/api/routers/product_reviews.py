# urban_harvest/api/routers/product_reviews.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import ProductReviewIn, CurrentUser
from urban_harvest.services.review_service import ProductReviewService

router = APIRouter(prefix="/product-reviews", tags=["reviews"])


def get_service(db: Session):
    return ProductReviewService(db)


@router.get("/my-reviews")
def my_reviews(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).list_for_user(user.id)


@router.get("/can-review/{product_id}")
def can_review(product_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """A customer may review a product once, after ordering it."""
    return get_service(db).can_review(product_id, user.id)


@router.get("/{product_id}")
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).list_for_product(product_id)


@router.post("/", status_code=201)
def create_review(
    payload: ProductReviewIn,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create(payload, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{review_id}")
def delete_review(review_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.delete(review_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
