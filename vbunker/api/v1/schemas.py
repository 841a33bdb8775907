from __future__ import annotations

import base64
import binascii
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from vbunker.domain.entities.booking import Booking, BookingStatus
from vbunker.domain.entities.car import CarItem
from vbunker.domain.entities.post import Post, PostSource
from vbunker.domain.entities.profile import Profile, UserRole
from vbunker.domain.entities.review import UserReview
from vbunker.domain.entities.selection_state import SelectionState
from vbunker.domain.entities.service_catalog import AdminMaster, AdminService, Master, ServiceCategory, ServiceItem


def encode_image(data: bytes | None) -> str | None:
    return base64.b64encode(data).decode("ascii") if data is not None else None


def decode_image(value: str | None) -> bytes | None:
    """Decode a base64 image payload. Raises ValueError on malformed input."""
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Image payload is not valid base64") from e


# ---- profile ----


class ProfileSchema(BaseModel):
    is_logged_in: bool
    is_profile_completed: bool
    phone: str
    first_name: str
    last_name: str
    email: str
    avatar_base64: str | None = None
    role: UserRole

    @staticmethod
    def from_entity(profile: Profile) -> "ProfileSchema":
        return ProfileSchema(
            is_logged_in=profile.is_logged_in,
            is_profile_completed=profile.is_profile_completed,
            phone=profile.phone,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            avatar_base64=encode_image(profile.avatar_image_data),
            role=profile.role,
        )


class LoginRequestSchema(BaseModel):
    phone: str


class CompleteProfileRequestSchema(BaseModel):
    first_name: str
    last_name: str = ""


class UpdateProfileRequestSchema(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    avatar_base64: str | None = None


# ---- catalog ----


class ServiceItemSchema(BaseModel):
    id: UUID
    title: str
    area: str
    duration: str
    price: str
    image_name: str | None = None
    display_title: str

    @staticmethod
    def from_entity(service: ServiceItem) -> "ServiceItemSchema":
        return ServiceItemSchema(
            id=service.id,
            title=service.title,
            area=service.area,
            duration=service.duration,
            price=service.price,
            image_name=service.image_name,
            display_title=service.display_title,
        )


class ServiceCategorySchema(BaseModel):
    id: UUID
    title: str
    services: list[ServiceItemSchema]

    @staticmethod
    def from_entity(category: ServiceCategory) -> "ServiceCategorySchema":
        return ServiceCategorySchema(
            id=category.id,
            title=category.title,
            services=[ServiceItemSchema.from_entity(s) for s in category.services],
        )


class MasterSchema(BaseModel):
    id: UUID
    name: str
    role: str
    next_day_label: str
    time_slots: list[str]

    @staticmethod
    def from_entity(master: Master) -> "MasterSchema":
        return MasterSchema(
            id=master.id,
            name=master.name,
            role=master.role,
            next_day_label=master.next_day_label,
            time_slots=list(master.time_slots),
        )


# ---- garage ----


class CarSchema(BaseModel):
    id: UUID
    number: str
    brand: str | None = None
    model: str | None = None
    year: int | None = None
    body_type: str | None = None

    @staticmethod
    def from_entity(car: CarItem) -> "CarSchema":
        return CarSchema(
            id=car.id,
            number=car.number,
            brand=car.brand,
            model=car.model,
            year=car.year,
            body_type=car.body_type,
        )


class CarWriteSchema(BaseModel):
    number: str
    brand: str | None = None
    model: str | None = None
    year: int | None = None
    body_type: str | None = None


# ---- draft ----


class DraftSchema(BaseModel):
    service: ServiceItemSchema | None = None
    master: MasterSchema | None = None
    date: datetime | None = None
    time: str | None = None
    car: CarSchema | None = None
    is_complete: bool
    is_admin_booking_flow: bool = False

    @staticmethod
    def from_entity(state: SelectionState, is_admin_booking_flow: bool = False) -> "DraftSchema":
        return DraftSchema(
            service=ServiceItemSchema.from_entity(state.service) if state.service else None,
            master=MasterSchema.from_entity(state.master) if state.master else None,
            date=state.date,
            time=state.time,
            car=CarSchema.from_entity(state.car) if state.car else None,
            is_complete=state.is_complete_for_admin if is_admin_booking_flow else state.is_complete,
            is_admin_booking_flow=is_admin_booking_flow,
        )


class SelectServiceSchema(BaseModel):
    service_id: UUID


class SelectMasterSchema(BaseModel):
    master_id: UUID


class SelectDateTimeSchema(BaseModel):
    date: datetime
    time: str


class SelectCarSchema(BaseModel):
    car_id: UUID


# ---- bookings ----


class BookingSchema(BaseModel):
    id: UUID
    service_title: str
    master_name: str
    date: datetime
    time: str
    car_plate: str
    created_at: datetime
    status: BookingStatus
    price: int | None = None
    client_phone: str | None = None

    @staticmethod
    def from_entity(booking: Booking) -> "BookingSchema":
        return BookingSchema(
            id=booking.id,
            service_title=booking.service_title,
            master_name=booking.master_name,
            date=booking.date,
            time=booking.time,
            car_plate=booking.car_plate,
            created_at=booking.created_at,
            status=booking.status,
            price=booking.price,
            client_phone=booking.client_phone,
        )


class RecordsSchema(BaseModel):
    upcoming: list[BookingSchema]
    past: list[BookingSchema]


class AdminBookingCreateSchema(BaseModel):
    service_title: str
    master_name: str
    date: datetime
    time: str
    client_phone: str
    price: int | None = Field(default=None, ge=0)


class AdminDraftBookingSchema(BaseModel):
    client_phone: str
    price: int | None = Field(default=None, ge=0)


class PriceUpdateSchema(BaseModel):
    price: int | None = Field(default=None, ge=0)


# ---- reviews and posts ----


class ReviewCreateSchema(BaseModel):
    text: str
    image_base64: str | None = None


class ReviewSchema(BaseModel):
    id: UUID
    booking_id: UUID
    text: str
    created_at: datetime
    car_brand: str | None = None
    car_model: str | None = None
    image_base64: str | None = None

    @staticmethod
    def from_entity(review: UserReview) -> "ReviewSchema":
        return ReviewSchema(
            id=review.id,
            booking_id=review.booking_id,
            text=review.text,
            created_at=review.created_at,
            car_brand=review.car_brand,
            car_model=review.car_model,
            image_base64=encode_image(review.image_data),
        )


class PostCreateSchema(BaseModel):
    text: str
    images_base64: list[str] = Field(default_factory=list)


class PostSchema(BaseModel):
    id: UUID
    source: PostSource
    author_name: str
    author_avatar_name: str | None = None
    car_name: str
    date_string: str
    images: list[str] = Field(default_factory=list)
    text: str
    admin_images_base64: list[str] = Field(default_factory=list)
    user_image_base64: str | None = None

    @staticmethod
    def from_entity(post: Post) -> "PostSchema":
        return PostSchema(
            id=post.id,
            source=post.source,
            author_name=post.author_name,
            author_avatar_name=post.author_avatar_name,
            car_name=post.car_name,
            date_string=post.date_string,
            images=list(post.images),
            text=post.text,
            admin_images_base64=[encode_image(d) for d in post.admin_images_data],
            user_image_base64=encode_image(post.user_image_data),
        )


# ---- admin catalog ----


class AdminServiceSchema(BaseModel):
    id: UUID
    category: str
    title: str
    price_text: str
    duration_minutes: int | None = None
    image_base64: str | None = None

    @staticmethod
    def from_entity(service: AdminService) -> "AdminServiceSchema":
        return AdminServiceSchema(
            id=service.id,
            category=service.category,
            title=service.title,
            price_text=service.price_text,
            duration_minutes=service.duration_minutes,
            image_base64=encode_image(service.image_data),
        )


class AdminServiceWriteSchema(BaseModel):
    category: str
    title: str
    price_text: str = ""
    duration_minutes: int | None = Field(default=None, gt=0)
    image_base64: str | None = None


class AdminMasterSchema(BaseModel):
    id: UUID
    name: str
    categories: list[str]
    image_base64: str | None = None

    @staticmethod
    def from_entity(master: AdminMaster) -> "AdminMasterSchema":
        return AdminMasterSchema(
            id=master.id,
            name=master.name,
            categories=sorted(master.categories),
            image_base64=encode_image(master.image_data),
        )


class AdminMasterWriteSchema(BaseModel):
    name: str
    categories: list[str] = Field(default_factory=list)
    image_base64: str | None = None
