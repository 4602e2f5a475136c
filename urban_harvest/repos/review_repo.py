# urban_harvest/repos/review_repo.py
from sqlalchemy import select, func, update
from sqlalchemy.orm import Session

from urban_harvest.data.models.user import UserModel


class ReviewRepo:
    """
    Review table access shared by the product, event, workshop and
    subscription box review flows.

    `target_field` names the review column that points at the reviewed row,
    `target_model`/`target_key` the reviewed table and its primary key.
    """

    def __init__(self, db: Session, review_model, target_field: str, target_model, target_key: str):
        self.db = db
        self.model = review_model
        self.target_col = getattr(review_model, target_field)
        self.target_model = target_model
        self.target_key = getattr(target_model, target_key)

    def get_user_review(self, review_id: int, user_id: int):
        return self.db.execute(
            select(self.model).where(self.model.review_id == review_id, self.model.user_id == user_id)
        ).scalar_one_or_none()

    def find(self, **criteria):
        stmt = select(self.model)
        for field, value in criteria.items():
            col = getattr(self.model, field)
            stmt = stmt.where(col.is_(None) if value is None else col == value)
        return self.db.execute(stmt.limit(1)).scalar_one_or_none()

    def list_for_target(self, target_id: int):
        return self.db.execute(
            select(self.model, UserModel.name.label("user_name"), UserModel.profile_image)
            .join(UserModel, self.model.user_id == UserModel.user_id)
            .where(self.target_col == target_id)
            .order_by(self.model.created_at.desc(), self.model.review_id.desc())
        ).all()

    def list_user_reviews(self, user_id: int, *target_columns):
        return self.db.execute(
            select(self.model, *target_columns)
            .join(self.target_model, self.target_col == self.target_key)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.review_id.desc())
        ).all()

    def add_review(self, review):
        self.db.add(review)
        self.db.flush()
        return review

    def delete_review(self, review):
        self.db.delete(review)
        self.db.flush()

    def recompute_rating(self, target_id: int, with_count: bool = False) -> tuple[int, float]:
        """Store the mean of all remaining ratings on the reviewed row (0 when none)."""
        count, avg = self.db.execute(
            select(func.count(self.model.review_id), func.avg(self.model.rating))
            .where(self.target_col == target_id)
        ).one()
        rating = float(avg) if count else 0.0
        values = {"rating": rating}
        if with_count:
            values["reviews_count"] = count
        self.db.execute(
            update(self.target_model).where(self.target_key == target_id).values(**values)
        )
        return count, rating

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
