from __future__ import annotations

import uuid
from datetime import datetime

from vbunker.application.utils.post_helpers import (
    admin_author_name,
    format_long_date,
    format_review_date,
    review_author_name,
    review_car_label,
    review_to_post,
)
from vbunker.domain.entities.post import PostSource
from vbunker.domain.entities.review import UserReview


def make_review(**kwargs) -> UserReview:
    kwargs.setdefault("created_at", datetime(2026, 3, 8, 10, 0))
    return UserReview(booking_id=uuid.uuid4(), text="Спасибо!", **kwargs)


def test_long_date_uses_genitive_month():
    assert format_long_date(datetime(2026, 10, 18)) == "18 октября 2026 г."
    assert format_long_date(datetime(2025, 5, 1)) == "1 мая 2025 г."


def test_review_date_pads_day():
    assert format_review_date(datetime(2026, 10, 8)) == "08 октября 2026"


def test_author_names():
    assert admin_author_name("  ", "VBunker31") == "VBunker31"
    assert admin_author_name(" Дмитрий ", "VBunker31") == "Дмитрий"
    assert review_author_name("", "", "VBunker31") == "Клиент VBunker31"
    assert review_author_name("Анна", " ", "VBunker31") == "Анна"
    assert review_author_name("Анна", "Смирнова", "VBunker31") == "Анна Смирнова"


def test_car_label_needs_brand_and_model():
    assert review_car_label(make_review(car_brand="LADA", car_model="Vesta")) == "LADA Vesta"
    assert review_car_label(make_review(car_brand="LADA")) == "Авто клиента"


def test_review_to_post():
    review = make_review(car_brand="Kia", car_model="Rio", image_data=b"photo")

    post = review_to_post(review, "Анна")

    assert post.source == PostSource.user
    assert post.author_name == "Анна"
    assert post.author_avatar_name is None
    assert post.car_name == "Kia Rio"
    assert post.date_string == "08 марта 2026"
    assert post.text == "Спасибо!"
    assert post.user_image_data == b"photo"
    assert post.images == ()
