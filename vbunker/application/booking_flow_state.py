from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from vbunker.application.ports.profile_store import (
    KEY_AVATAR_IMAGE_DATA,
    KEY_EMAIL,
    KEY_FIRST_NAME,
    KEY_IS_LOGGED_IN,
    KEY_IS_PROFILE_COMPLETED,
    KEY_LAST_NAME,
    KEY_USER_PHONE,
    KEY_USER_ROLE,
    ProfileStorePort,
)
from vbunker.application.ports.service_catalog import ServiceCatalogPort
from vbunker.application.utils import state_helpers
from vbunker.application.utils.post_helpers import (
    NEWS_CONTEXT_LABEL,
    PROMO_CONTEXT_LABEL,
    admin_author_name,
    format_long_date,
    review_author_name,
    review_to_post,
)
from vbunker.domain.entities.booking import UNSPECIFIED_CAR_PLATE, Booking, BookingStatus
from vbunker.domain.entities.car import CarItem
from vbunker.domain.entities.post import ADMIN_AVATAR_NAME, Post, PostSource
from vbunker.domain.entities.profile import Profile, UserRole
from vbunker.domain.entities.review import UserReview
from vbunker.domain.entities.selection_state import SelectionState
from vbunker.domain.entities.service_catalog import AdminMaster, AdminService, Master, ServiceItem


Listener = Callable[[str], None]


def _clean(text: str | None) -> str:
    return (text or "").strip()


def _index_of(items: list, item_id: uuid.UUID) -> int | None:
    return next((i for i, item in enumerate(items) if item.id == item_id), None)


class BookingFlowState:
    """All mutable data of one app session: profile, garage, booking draft,
    bookings, posts and reviews.

    Every mutator is a silent no-op when its precondition fails (empty text,
    unknown identity, incomplete draft). Mutators return the created or updated
    entity, or None when nothing changed.
    """

    def __init__(
        self,
        profile_store: ProfileStorePort,
        catalog: ServiceCatalogPort,
        timezone: ZoneInfo | None = None,
        clock: Callable[[], datetime] | None = None,
        studio_name: str = "VBunker31",
        starter_cars: Iterable[CarItem] = (),
    ) -> None:
        self._profile_store = profile_store
        self._catalog = catalog
        self._timezone = timezone or ZoneInfo("UTC")
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._studio_name = studio_name
        self._logger = logging.getLogger(__name__)
        self._listeners: list[Listener] = []

        # profile scalars, read once
        self._is_logged_in = profile_store.get_bool(KEY_IS_LOGGED_IN)
        self._is_profile_completed = profile_store.get_bool(KEY_IS_PROFILE_COMPLETED)
        self._phone = profile_store.get_string(KEY_USER_PHONE)
        self._first_name = profile_store.get_string(KEY_FIRST_NAME)
        self._last_name = profile_store.get_string(KEY_LAST_NAME)
        self._email = profile_store.get_string(KEY_EMAIL)
        self._avatar_image_data = profile_store.get_data(KEY_AVATAR_IMAGE_DATA)
        self._role = UserRole.from_raw(profile_store.get(KEY_USER_ROLE))

        self._cars: list[CarItem] = list(starter_cars)
        self._client_garages: dict[str, list[CarItem]] = {}
        self._selection = SelectionState()
        self.is_admin_booking_flow = False

        self._bookings: list[Booking] = []
        self._news_posts: list[Post] = catalog.sample_news_posts()
        self._promo_posts: list[Post] = catalog.sample_promo_posts()
        self._pending_reviews: list[UserReview] = []
        self._approved_reviews: list[UserReview] = []

        self._admin_services: list[AdminService] = catalog.admin_services()
        self._admin_masters: list[AdminMaster] = catalog.admin_masters()

    # ---- observation ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, topic: str) -> None:
        for listener in list(self._listeners):
            listener(topic)

    def _ignored(self, action: str, reason: str, **extra: str) -> None:
        self._logger.debug("%s ignored", action, extra={"reason": reason, **extra})

    # ---- clock ----

    @property
    def catalog(self) -> ServiceCatalogPort:
        return self._catalog

    def now(self) -> datetime:
        return self._clock()

    def localize(self, value: datetime) -> datetime:
        """Attach the studio timezone to naive datetimes."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self._timezone)
        return value

    # ---- profile (written through to the profile store) ----

    @property
    def is_logged_in(self) -> bool:
        return self._is_logged_in

    @is_logged_in.setter
    def is_logged_in(self, value: bool) -> None:
        self._profile_store.set(KEY_IS_LOGGED_IN, bool(value))
        self._is_logged_in = bool(value)
        self._notify("profile")

    @property
    def is_profile_completed(self) -> bool:
        return self._is_profile_completed

    @is_profile_completed.setter
    def is_profile_completed(self, value: bool) -> None:
        self._profile_store.set(KEY_IS_PROFILE_COMPLETED, bool(value))
        self._is_profile_completed = bool(value)
        self._notify("profile")

    @property
    def phone(self) -> str:
        return self._phone

    @phone.setter
    def phone(self, value: str) -> None:
        self._profile_store.set(KEY_USER_PHONE, value or "")
        self._phone = value or ""
        self._notify("profile")

    @property
    def first_name(self) -> str:
        return self._first_name

    @first_name.setter
    def first_name(self, value: str) -> None:
        self._profile_store.set(KEY_FIRST_NAME, value or "")
        self._first_name = value or ""
        self._notify("profile")

    @property
    def last_name(self) -> str:
        return self._last_name

    @last_name.setter
    def last_name(self, value: str) -> None:
        self._profile_store.set(KEY_LAST_NAME, value or "")
        self._last_name = value or ""
        self._notify("profile")

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._profile_store.set(KEY_EMAIL, value or "")
        self._email = value or ""
        self._notify("profile")

    @property
    def avatar_image_data(self) -> bytes | None:
        return self._avatar_image_data

    @avatar_image_data.setter
    def avatar_image_data(self, value: bytes | None) -> None:
        self._profile_store.set(KEY_AVATAR_IMAGE_DATA, value)
        self._avatar_image_data = value
        self._notify("profile")

    @property
    def role(self) -> UserRole:
        return self._role

    @role.setter
    def role(self, value: UserRole) -> None:
        role = UserRole.from_raw(value.value if isinstance(value, UserRole) else value)
        self._profile_store.set(KEY_USER_ROLE, role.value)
        self._role = role
        self._notify("profile")

    @property
    def profile(self) -> Profile:
        return Profile(
            is_logged_in=self._is_logged_in,
            is_profile_completed=self._is_profile_completed,
            phone=self._phone,
            first_name=self._first_name,
            last_name=self._last_name,
            email=self._email,
            avatar_image_data=self._avatar_image_data,
            role=self._role,
        )

    def log_in(self, phone: str) -> bool:
        """Finish the phone-call login: remember the number and mark the session logged in."""
        trimmed = _clean(phone)
        if not trimmed:
            self._ignored("Login", "empty_phone")
            return False
        self.phone = trimmed
        self.is_logged_in = True
        self._logger.info("User logged in", extra={"phone": trimmed})
        return True

    def complete_profile(self, first_name: str, last_name: str = "") -> bool:
        trimmed_first = _clean(first_name)
        if not trimmed_first:
            self._ignored("Profile completion", "empty_first_name")
            return False
        self.first_name = trimmed_first
        self.last_name = _clean(last_name)
        self.is_profile_completed = True
        return True

    def update_profile(self, first_name: str, last_name: str, email: str, avatar_data: bytes | None) -> Profile:
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self.avatar_image_data = avatar_data
        return self.profile

    def toggle_role(self) -> UserRole:
        self.role = UserRole.user if self._role == UserRole.admin else UserRole.admin
        return self._role

    def log_out(self) -> None:
        self.is_logged_in = False
        self.is_profile_completed = False
        self.reset_all()

    def is_registered(self, phone: str) -> bool:
        return phone == self._phone

    def _is_own_phone(self, phone: str) -> bool:
        # a fresh install has no phone yet, so no client can match it
        return bool(self._phone) and self.is_registered(_clean(phone))

    # ---- garage ----

    @property
    def cars(self) -> list[CarItem]:
        return list(self._cars)

    def find_car(self, car_id: uuid.UUID) -> CarItem | None:
        index = _index_of(self._cars, car_id)
        return self._cars[index] if index is not None else None

    def add_car(
        self,
        number: str,
        brand: str | None = None,
        model: str | None = None,
        year: int | None = None,
        body_type: str | None = None,
    ) -> CarItem | None:
        trimmed = _clean(number)
        if not trimmed:
            self._ignored("Add car", "empty_plate")
            return None

        car = CarItem(number=trimmed, brand=brand, model=model, year=year, body_type=body_type)
        self._cars.append(car)
        self._logger.info("Car added", extra={"car_id": str(car.id)})
        self._notify("cars")
        return car

    def update_car(
        self,
        car: CarItem,
        new_number: str,
        new_brand: str | None = None,
        new_model: str | None = None,
        new_year: int | None = None,
        new_body_type: str | None = None,
    ) -> CarItem | None:
        index = _index_of(self._cars, car.id)
        trimmed = _clean(new_number)
        if index is None or not trimmed:
            self._ignored("Update car", "not_found" if index is None else "empty_plate", car_id=str(car.id))
            return None

        updated = replace(
            self._cars[index],
            number=trimmed,
            brand=new_brand,
            model=new_model,
            year=new_year,
            body_type=new_body_type,
        )
        self._cars[index] = updated
        self._notify("cars")

        if self._selection.car is not None and self._selection.car.id == car.id:
            self._set_selection(replace(self._selection, car=updated))
        return updated

    def delete_car(self, car: CarItem) -> bool:
        index = _index_of(self._cars, car.id)
        if index is None:
            self._ignored("Delete car", "not_found", car_id=str(car.id))
            return False

        del self._cars[index]
        self._notify("cars")

        if self._selection.car is not None and self._selection.car.id == car.id:
            self._set_selection(state_helpers.reset_car(self._selection))
        return True

    # ---- booking draft ----

    @property
    def selection(self) -> SelectionState:
        return self._selection

    def _set_selection(self, state: SelectionState) -> None:
        if state != self._selection:
            self._selection = state
            self._notify("draft")

    @property
    def selected_service_title(self) -> str | None:
        service = self._selection.service
        return service.display_title if service else None

    @property
    def selected_master_name(self) -> str | None:
        master = self._selection.master
        return master.name if master else None

    @property
    def selected_car_plate(self) -> str | None:
        car = self._selection.car
        return car.number if car else None

    def select_service(self, service: ServiceItem) -> None:
        # a new service invalidates the master and slot picked for the old one
        self._set_selection(state_helpers.reset_master(replace(self._selection, service=service)))

    def select_master(self, master: Master) -> None:
        self._set_selection(state_helpers.reset_date_time(replace(self._selection, master=master)))

    def select_date_time(self, date: datetime, time: str) -> bool:
        label = _clean(time)
        if not label:
            self._ignored("Select date/time", "empty_time")
            return False
        self._set_selection(replace(self._selection, date=self.localize(date), time=label))
        return True

    def select_car(self, car: CarItem) -> bool:
        own = self.find_car(car.id)
        if own is None:
            self._ignored("Select car", "not_found", car_id=str(car.id))
            return False
        self._set_selection(replace(self._selection, car=own))
        return True

    def reset_service(self) -> None:
        self._set_selection(state_helpers.reset_service(self._selection))

    def reset_master(self) -> None:
        self._set_selection(state_helpers.reset_master(self._selection))

    def reset_date_time(self) -> None:
        self._set_selection(state_helpers.reset_date_time(self._selection))

    def reset_car(self) -> None:
        self._set_selection(state_helpers.reset_car(self._selection))

    def reset_all(self) -> None:
        self._set_selection(state_helpers.reset_all(self._selection))

    # ---- bookings ----

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    def find_booking(self, booking_id: uuid.UUID) -> Booking | None:
        index = _index_of(self._bookings, booking_id)
        return self._bookings[index] if index is not None else None

    def _prepend_booking(self, booking: Booking) -> None:
        self._bookings.insert(0, booking)
        self._logger.info(
            "Booking created",
            extra={"booking_id": str(booking.id), "phone": booking.client_phone or ""},
        )
        self._notify("bookings")

    def confirm_current_booking(self) -> Booking | None:
        """Turn a complete draft into an active booking for the logged-in customer."""
        draft = self._selection
        if not draft.is_complete:
            # partial draft stays as is so the customer can finish it
            self._ignored("Booking confirmation", "incomplete_draft")
            return None

        booking = Booking(
            service_title=draft.service.display_title,
            master_name=draft.master.name,
            date=draft.date,
            time=draft.time,
            car_plate=draft.car.number,
            created_at=self.now(),
            status=BookingStatus.active,
            price=None,
            client_phone=self._phone,
        )
        self._prepend_booking(booking)
        self.reset_all()
        return booking

    def create_booking_as_admin(
        self,
        service_title: str,
        master_name: str,
        date: datetime,
        time: str,
        client_phone: str,
        price: int | None = None,
    ) -> Booking | None:
        """Admin books on behalf of a client. No car is picked on this path."""
        trimmed_phone = _clean(client_phone)
        if not trimmed_phone:
            self._ignored("Admin booking", "empty_phone")
            return None

        booking = Booking(
            service_title=service_title,
            master_name=master_name,
            date=self.localize(date),
            time=time,
            car_plate=UNSPECIFIED_CAR_PLATE,
            created_at=self.now(),
            status=BookingStatus.active,
            price=price,
            client_phone=trimmed_phone,
        )
        self._prepend_booking(booking)
        return booking

    def confirm_admin_booking(self, client_phone: str, price: int | None = None) -> Booking | None:
        draft = self._selection
        if not draft.is_complete_for_admin:
            self._ignored("Admin booking confirmation", "incomplete_draft")
            return None

        booking = self.create_booking_as_admin(
            service_title=draft.service.display_title,
            master_name=draft.master.name,
            date=draft.date,
            time=draft.time,
            client_phone=client_phone,
            price=price,
        )
        if booking is not None:
            self.reset_all()
            self.is_admin_booking_flow = False
        return booking

    def update_booking_price(self, price: int | None, booking: Booking) -> Booking | None:
        index = _index_of(self._bookings, booking.id)
        if index is None:
            self._ignored("Price update", "not_found", booking_id=str(booking.id))
            return None

        updated = replace(self._bookings[index], price=price)
        self._bookings[index] = updated
        self._logger.info("Booking price updated", extra={"booking_id": str(booking.id)})
        self._notify("bookings")
        return updated

    def cancel_booking(self, booking: Booking) -> Booking | None:
        index = _index_of(self._bookings, booking.id)
        if index is None:
            self._ignored("Cancel", "not_found", booking_id=str(booking.id))
            return None

        current = self._bookings[index]
        if current.status == BookingStatus.cancelled:
            return current

        updated = replace(current, status=BookingStatus.cancelled)
        self._bookings[index] = updated
        self._logger.info("Booking cancelled", extra={"booking_id": str(booking.id)})
        self._notify("bookings")
        return updated

    # ---- posts ----

    @property
    def news_posts(self) -> list[Post]:
        return list(self._news_posts)

    @property
    def promo_posts(self) -> list[Post]:
        return list(self._promo_posts)

    def _build_admin_post(self, text: str, images_data: Iterable[bytes], context_label: str) -> Post:
        return Post(
            source=PostSource.admin,
            author_name=admin_author_name(self._first_name, self._studio_name),
            author_avatar_name=ADMIN_AVATAR_NAME,
            car_name=context_label,
            date_string=format_long_date(self.now()),
            text=text,
            admin_images_data=tuple(images_data),
        )

    def add_news_post(self, text: str, images_data: Iterable[bytes] = ()) -> Post | None:
        trimmed = _clean(text)
        if not trimmed:
            self._ignored("News post", "empty_text")
            return None

        post = self._build_admin_post(trimmed, images_data, NEWS_CONTEXT_LABEL)
        self._news_posts.insert(0, post)
        self._logger.info("News post added", extra={"post_id": str(post.id)})
        self._notify("news_posts")
        return post

    def add_promo_post(self, text: str, images_data: Iterable[bytes] = ()) -> Post | None:
        trimmed = _clean(text)
        if not trimmed:
            self._ignored("Promo post", "empty_text")
            return None

        post = self._build_admin_post(trimmed, images_data, PROMO_CONTEXT_LABEL)
        self._promo_posts.insert(0, post)
        self._logger.info("Promo post added", extra={"post_id": str(post.id)})
        self._notify("promo_posts")
        return post

    def delete_news_post(self, post: Post) -> bool:
        index = _index_of(self._news_posts, post.id)
        if index is None:
            return False
        del self._news_posts[index]
        self._notify("news_posts")
        return True

    def delete_promo_post(self, post: Post) -> bool:
        index = _index_of(self._promo_posts, post.id)
        if index is None:
            return False
        del self._promo_posts[index]
        self._notify("promo_posts")
        return True

    def review_posts(self) -> list[Post]:
        """Approved reviews rendered as posts, newest first, then the sample reviews."""
        author = review_author_name(self._first_name, self._last_name, self._studio_name)
        synthesized = [review_to_post(review, author) for review in self._approved_reviews]
        return synthesized + self._catalog.sample_review_posts()

    # ---- reviews ----

    @property
    def pending_reviews(self) -> list[UserReview]:
        return list(self._pending_reviews)

    @property
    def approved_reviews(self) -> list[UserReview]:
        return list(self._approved_reviews)

    def find_pending_review(self, review_id: uuid.UUID) -> UserReview | None:
        index = _index_of(self._pending_reviews, review_id)
        return self._pending_reviews[index] if index is not None else None

    def add_review(self, booking: Booking, text: str, image_data: bytes | None = None) -> UserReview | None:
        trimmed = _clean(text)
        if not trimmed:
            self._ignored("Review", "empty_text", booking_id=str(booking.id))
            return None

        car = next((c for c in self._cars if c.number == booking.car_plate), None)
        review = UserReview(
            booking_id=booking.id,
            text=trimmed,
            created_at=self.now(),
            car_brand=car.brand if car else None,
            car_model=car.model if car else None,
            image_data=image_data,
        )
        # waits for moderation
        self._pending_reviews.insert(0, review)
        self._logger.info("Review submitted", extra={"review_id": str(review.id)})
        self._notify("reviews")
        return review

    def approve_review(self, review: UserReview) -> UserReview | None:
        index = _index_of(self._pending_reviews, review.id)
        if index is None:
            self._ignored("Approve review", "not_pending", review_id=str(review.id))
            return None

        approved = self._pending_reviews.pop(index)
        self._approved_reviews.insert(0, approved)
        self._logger.info("Review approved", extra={"review_id": str(review.id)})
        self._notify("reviews")
        return approved

    def delete_review(self, review: UserReview) -> bool:
        index = _index_of(self._pending_reviews, review.id)
        if index is None:
            return False
        del self._pending_reviews[index]
        self._logger.info("Review rejected", extra={"review_id": str(review.id)})
        self._notify("reviews")
        return True

    # ---- client garages (admin bookings for other phones) ----

    def cars_for_client(self, phone: str) -> list[CarItem]:
        return list(self._client_garages.get(phone, []))

    def add_car_for_client(
        self,
        phone: str,
        number: str,
        brand: str | None = None,
        model: str | None = None,
        year: int | None = None,
        body_type: str | None = None,
    ) -> CarItem | None:
        if self._is_own_phone(phone):
            return self.add_car(number, brand, model, year, body_type)

        trimmed = _clean(number)
        if not trimmed:
            self._ignored("Add client car", "empty_plate", phone=phone)
            return None

        car = CarItem(number=trimmed, brand=brand, model=model, year=year, body_type=body_type)
        self._client_garages.setdefault(phone, []).append(car)
        self._notify("client_garages")
        return car

    def update_car_for_client(self, phone: str, car: CarItem) -> CarItem | None:
        if self._is_own_phone(phone):
            return self.update_car(car, car.number, car.brand, car.model, car.year, car.body_type)

        garage = self._client_garages.get(phone)
        if garage is None:
            self._ignored("Update client car", "unknown_phone", phone=phone)
            return None

        index = _index_of(garage, car.id)
        trimmed = _clean(car.number)
        if index is None or not trimmed:
            self._ignored("Update client car", "not_found" if index is None else "empty_plate", phone=phone)
            return None

        updated = replace(car, number=trimmed)
        garage[index] = updated
        self._notify("client_garages")
        return updated

    def cars_for(self, phone: str) -> list[CarItem]:
        """Garage of whoever owns `phone`: the session's own cars or a client garage."""
        if self._is_own_phone(phone):
            return self.cars
        return self.cars_for_client(phone)

    # ---- admin catalog ----

    @property
    def admin_services(self) -> list[AdminService]:
        return list(self._admin_services)

    @property
    def admin_masters(self) -> list[AdminMaster]:
        return list(self._admin_masters)

    def add_admin_service(
        self,
        category: str,
        title: str,
        price_text: str,
        duration_minutes: int | None = None,
        image_data: bytes | None = None,
    ) -> AdminService | None:
        category, title = _clean(category), _clean(title)
        if not category or not title:
            self._ignored("Add service", "empty_title")
            return None

        service = AdminService(
            category=category,
            title=title,
            price_text=_clean(price_text),
            duration_minutes=duration_minutes,
            image_data=image_data,
        )
        self._admin_services.append(service)
        self._notify("admin_services")
        return service

    def update_admin_service(self, service: AdminService) -> AdminService | None:
        index = _index_of(self._admin_services, service.id)
        if index is None or not _clean(service.category) or not _clean(service.title):
            self._ignored("Update service", "not_found" if index is None else "empty_title")
            return None

        updated = replace(service, category=_clean(service.category), title=_clean(service.title))
        self._admin_services[index] = updated
        self._notify("admin_services")
        return updated

    def delete_admin_service(self, service: AdminService) -> bool:
        index = _index_of(self._admin_services, service.id)
        if index is None:
            return False
        del self._admin_services[index]
        self._notify("admin_services")
        return True

    def add_admin_master(
        self,
        name: str,
        categories: Iterable[str] = (),
        image_data: bytes | None = None,
    ) -> AdminMaster | None:
        trimmed = _clean(name)
        if not trimmed:
            self._ignored("Add master", "empty_name")
            return None

        master = AdminMaster(
            name=trimmed,
            categories=frozenset(c for c in (_clean(c) for c in categories) if c),
            image_data=image_data,
        )
        self._admin_masters.append(master)
        self._notify("admin_masters")
        return master

    def update_admin_master(self, master: AdminMaster) -> AdminMaster | None:
        index = _index_of(self._admin_masters, master.id)
        if index is None or not _clean(master.name):
            self._ignored("Update master", "not_found" if index is None else "empty_name")
            return None

        updated = replace(master, name=_clean(master.name))
        self._admin_masters[index] = updated
        self._notify("admin_masters")
        return updated

    def delete_admin_master(self, master: AdminMaster) -> bool:
        index = _index_of(self._admin_masters, master.id)
        if index is None:
            return False
        del self._admin_masters[index]
        self._notify("admin_masters")
        return True

    def admin_categories(self) -> list[str]:
        categories = {s.category for s in self._admin_services}
        for master in self._admin_masters:
            categories.update(master.categories)
        return sorted(categories)
