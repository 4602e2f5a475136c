from sqlalchemy import select
from sqlalchemy.orm import Session

from urban_harvest.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_profile_image(self, user_id: int, image_url: str) -> UserModel | None:
        user = self.get_user(user_id)
        if user:
            user.profile_image = image_url
            self.db.commit()
            self.db.refresh(user)
        return user
