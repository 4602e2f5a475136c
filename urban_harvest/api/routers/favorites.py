# urban_harvest/api/routers/favorites.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import FavoriteIn, ItemType, CurrentUser
from urban_harvest.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])


def get_service(db: Session):
    return FavoriteService(db)


@router.get("/")
def list_favorites(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Favorites of the caller, flat and grouped by item type."""
    return get_service(db).list_favorites(user.id)


@router.post("/", status_code=201)
def add_favorite(payload: FavoriteIn, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.add_favorite(payload, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/check/{item_type}/{item_id}")
def check_favorite(
    item_type: ItemType,
    item_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).check(item_type, item_id, user.id)


@router.delete("/item/{item_type}/{item_id}")
def remove_item(
    item_type: ItemType,
    item_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(item_type, item_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{favorite_id}")
def remove_favorite(favorite_id: int, user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.remove_favorite(favorite_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
