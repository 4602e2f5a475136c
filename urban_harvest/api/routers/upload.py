# urban_harvest/api/routers/upload.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Query
from sqlalchemy.orm import Session

from urban_harvest.api.deps import get_current_user, require_admin
from urban_harvest.data.database import get_db
from urban_harvest.domain.schemas import CurrentUser
from urban_harvest.repos.user_repo import UserRepo
from urban_harvest.services import upload_service

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/")
def upload_image(
    image: Optional[UploadFile] = File(None),
    type: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
):
    """Stores an image under the uploads directory of the given type."""
    try:
        return upload_service.store_image(image, type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/")
def delete_image(
    public_id: Optional[str] = Query(None),
    admin: CurrentUser = Depends(require_admin),
):
    try:
        return upload_service.delete_image(public_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/profile-image")
def upload_profile_image(
    image: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        stored = upload_service.store_image(image, "profiles")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not UserRepo(db).update_profile_image(user.id, stored["imageUrl"]):
        upload_service.remove_uploaded_image(stored["imageUrl"])
        raise HTTPException(status_code=404, detail="User not found")

    return {
        "success": True,
        "imageUrl": stored["imageUrl"],
        "message": "Profile image updated successfully",
    }
