# register every model on Base.metadata before create_all

from urban_harvest.data.models.user import UserModel
from urban_harvest.data.models.catalog import CategoryModel, OrganizerModel, InstructorModel
from urban_harvest.data.models.content import TestimonialModel, HeroSlideModel
from urban_harvest.data.models.event import (
    EventModel,
    EventAgendaModel,
    EventHighlightModel,
    EventExpectationModel,
)
from urban_harvest.data.models.workshop import WorkshopModel, WorkshopOutcomeModel, WorkshopRequirementModel
from urban_harvest.data.models.product import ProductModel, ProductDetailModel
from urban_harvest.data.models.booking import BookingModel
from urban_harvest.data.models.order import OrderModel, OrderItemModel
from urban_harvest.data.models.subscription import (
    SubscriptionBoxModel,
    SubscriptionBoxItemModel,
    SubscriptionModel,
)
from urban_harvest.data.models.review import (
    ProductReviewModel,
    EventReviewModel,
    WorkshopReviewModel,
    SubscriptionReviewModel,
)
from urban_harvest.data.models.favorite import FavoriteModel
from urban_harvest.data.models.push_subscription import PushSubscriptionModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "OrganizerModel",
    "InstructorModel",
    "TestimonialModel",
    "HeroSlideModel",
    "EventModel",
    "EventAgendaModel",
    "EventHighlightModel",
    "EventExpectationModel",
    "WorkshopModel",
    "WorkshopOutcomeModel",
    "WorkshopRequirementModel",
    "ProductModel",
    "ProductDetailModel",
    "BookingModel",
    "OrderModel",
    "OrderItemModel",
    "SubscriptionBoxModel",
    "SubscriptionBoxItemModel",
    "SubscriptionModel",
    "ProductReviewModel",
    "EventReviewModel",
    "WorkshopReviewModel",
    "SubscriptionReviewModel",
    "FavoriteModel",
    "PushSubscriptionModel",
]
