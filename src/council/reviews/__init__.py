"""Review templates, one per task type."""

from council.reviews.backend import BackendFocus, BackendReview
from council.reviews.base import BaseReview, ReviewRequest
from council.reviews.code import CodeReview
from council.reviews.frontend import FrontendFocus, FrontendReview
from council.reviews.plan import PlanFocus, PlanReview

REVIEWS: dict[str, type[BaseReview]] = {
    "code": CodeReview,
    "frontend": FrontendReview,
    "backend": BackendReview,
    "plan": PlanReview,
}

__all__ = [
    "BaseReview",
    "ReviewRequest",
    "CodeReview",
    "FrontendReview",
    "FrontendFocus",
    "BackendReview",
    "BackendFocus",
    "PlanReview",
    "PlanFocus",
    "REVIEWS",
]
