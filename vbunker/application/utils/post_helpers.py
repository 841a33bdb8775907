from __future__ import annotations

from datetime import datetime

from vbunker.domain.entities.post import Post, PostSource
from vbunker.domain.entities.review import UserReview

# genitive month names, as in "18 октября"
RU_MONTHS_GENITIVE = (
    "января",
    "февраля",
    "марта",
    "апреля",
    "мая",
    "июня",
    "июля",
    "августа",
    "сентября",
    "октября",
    "ноября",
    "декабря",
)

NEWS_CONTEXT_LABEL = "Новости студии"
PROMO_CONTEXT_LABEL = "Акция"
UNKNOWN_CAR_LABEL = "Авто клиента"


def format_long_date(value: datetime) -> str:
    """Long date for admin posts: "18 октября 2026 г."."""
    return f"{value.day} {RU_MONTHS_GENITIVE[value.month - 1]} {value.year} г."


def format_review_date(value: datetime) -> str:
    """Review card date: "08 октября 2026"."""
    return f"{value.day:02d} {RU_MONTHS_GENITIVE[value.month - 1]} {value.year}"


def admin_author_name(first_name: str, studio_name: str) -> str:
    company_name = (first_name or "").strip()
    return company_name or studio_name


def review_author_name(first_name: str, last_name: str, studio_name: str) -> str:
    parts = [p.strip() for p in (first_name or "", last_name or "")]
    full_name = " ".join(p for p in parts if p)
    return full_name or f"Клиент {studio_name}"


def review_car_label(review: UserReview) -> str:
    if review.car_brand and review.car_model:
        return f"{review.car_brand} {review.car_model}"
    return UNKNOWN_CAR_LABEL


def review_to_post(review: UserReview, author_name: str) -> Post:
    """Render an approved review as a user post for the reviews tab."""
    return Post(
        source=PostSource.user,
        author_name=author_name,
        author_avatar_name=None,
        car_name=review_car_label(review),
        date_string=format_review_date(review.created_at),
        text=review.text,
        user_image_data=review.image_data,
    )
