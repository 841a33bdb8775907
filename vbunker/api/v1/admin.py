from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from vbunker.api.v1.schemas import (
    AdminBookingCreateSchema,
    AdminDraftBookingSchema,
    AdminMasterSchema,
    AdminMasterWriteSchema,
    AdminServiceSchema,
    AdminServiceWriteSchema,
    BookingSchema,
    CarSchema,
    CarWriteSchema,
    DraftSchema,
    PostCreateSchema,
    PostSchema,
    PriceUpdateSchema,
    ReviewSchema,
    decode_image,
)
from vbunker.application.booking_flow_state import BookingFlowState
from vbunker.application.utils.booking_filters import AdminDateFilter, filter_admin_bookings, master_names
from vbunker.domain.entities.booking import Booking
from vbunker.domain.entities.profile import UserRole
from vbunker.wiring.dependencies import get_booking_flow_state


def require_admin(state: BookingFlowState = Depends(get_booking_flow_state)) -> BookingFlowState:
    if state.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return state


router = APIRouter(dependencies=[Depends(require_admin)])


def _decode(value: str | None) -> bytes | None:
    try:
        return decode_image(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _keep_image(current: bytes | None, value: str | None) -> bytes | None:
    """An edit without an image payload leaves the stored photo in place."""
    return current if value is None else _decode(value)


def _find(items: list, item_id: UUID, what: str):
    item = next((i for i in items if i.id == item_id), None)
    if item is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return item


def _get_booking(state: BookingFlowState, booking_id: UUID) -> Booking:
    booking = state.find_booking(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


# ---- bookings ----


@router.get("/bookings", response_model=list[BookingSchema])
def list_bookings(
    date_filter: AdminDateFilter = Query(AdminDateFilter.today),
    master: str | None = Query(None),
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    bookings = filter_admin_bookings(state.bookings, date_filter, now=state.now(), master=master)
    return [BookingSchema.from_entity(b) for b in bookings]


@router.get("/bookings/masters", response_model=list[str])
def list_booking_masters(state: BookingFlowState = Depends(get_booking_flow_state)):
    return master_names(state.bookings)


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(req: AdminBookingCreateSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    booking = state.create_booking_as_admin(
        service_title=req.service_title,
        master_name=req.master_name,
        date=req.date,
        time=req.time,
        client_phone=req.client_phone,
        price=req.price,
    )
    if booking is None:
        raise HTTPException(status_code=422, detail="Client phone is required")
    return BookingSchema.from_entity(booking)


@router.post("/bookings/draft/start", response_model=DraftSchema)
def start_draft_booking(state: BookingFlowState = Depends(get_booking_flow_state)):
    state.reset_all()
    state.is_admin_booking_flow = True
    return DraftSchema.from_entity(state.selection, state.is_admin_booking_flow)


@router.post("/bookings/from-draft", response_model=BookingSchema, status_code=201)
def create_booking_from_draft(
    req: AdminDraftBookingSchema,
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    if not state.selection.is_complete_for_admin:
        raise HTTPException(status_code=409, detail="Booking draft is incomplete")
    booking = state.confirm_admin_booking(req.client_phone, req.price)
    if booking is None:
        raise HTTPException(status_code=422, detail="Client phone is required")
    return BookingSchema.from_entity(booking)


@router.put("/bookings/{booking_id}/price", response_model=BookingSchema)
def update_price(
    booking_id: UUID,
    req: PriceUpdateSchema,
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    booking = state.update_booking_price(req.price, _get_booking(state, booking_id))
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(booking_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)):
    booking = state.cancel_booking(_get_booking(state, booking_id))
    return BookingSchema.from_entity(booking)


# ---- posts ----


@router.post("/posts/news", response_model=PostSchema, status_code=201)
def add_news_post(req: PostCreateSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    post = state.add_news_post(req.text, [_decode(i) for i in req.images_base64])
    if post is None:
        raise HTTPException(status_code=422, detail="Post text is required")
    return PostSchema.from_entity(post)


@router.delete("/posts/news/{post_id}", status_code=204)
def delete_news_post(post_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    state.delete_news_post(_find(state.news_posts, post_id, "Post"))
    return Response(status_code=204)


@router.post("/posts/promos", response_model=PostSchema, status_code=201)
def add_promo_post(req: PostCreateSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    post = state.add_promo_post(req.text, [_decode(i) for i in req.images_base64])
    if post is None:
        raise HTTPException(status_code=422, detail="Post text is required")
    return PostSchema.from_entity(post)


@router.delete("/posts/promos/{post_id}", status_code=204)
def delete_promo_post(post_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    state.delete_promo_post(_find(state.promo_posts, post_id, "Post"))
    return Response(status_code=204)


# ---- review moderation ----


@router.get("/reviews/pending", response_model=list[ReviewSchema])
def list_pending_reviews(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [ReviewSchema.from_entity(r) for r in state.pending_reviews]


@router.post("/reviews/{review_id}/approve", response_model=ReviewSchema)
def approve_review(review_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)):
    review = state.find_pending_review(review_id)
    if review is None:
        raise HTTPException(status_code=404, detail="Pending review not found")
    return ReviewSchema.from_entity(state.approve_review(review))


@router.delete("/reviews/{review_id}", status_code=204)
def delete_review(review_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    review = state.find_pending_review(review_id)
    if review is None:
        raise HTTPException(status_code=404, detail="Pending review not found")
    state.delete_review(review)
    return Response(status_code=204)


# ---- client garages ----


@router.get("/clients/{phone}/cars", response_model=list[CarSchema])
def list_client_cars(phone: str, state: BookingFlowState = Depends(get_booking_flow_state)):
    return [CarSchema.from_entity(c) for c in state.cars_for(phone)]


@router.post("/clients/{phone}/cars", response_model=CarSchema, status_code=201)
def add_client_car(phone: str, req: CarWriteSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    car = state.add_car_for_client(phone, req.number, req.brand, req.model, req.year, req.body_type)
    if car is None:
        raise HTTPException(status_code=422, detail="Plate number is required")
    return CarSchema.from_entity(car)


@router.put("/clients/{phone}/cars/{car_id}", response_model=CarSchema)
def update_client_car(
    phone: str,
    car_id: UUID,
    req: CarWriteSchema,
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    car = _find(state.cars_for(phone), car_id, "Car")
    updated = state.update_car_for_client(
        phone,
        replace(car, number=req.number, brand=req.brand, model=req.model, year=req.year, body_type=req.body_type),
    )
    if updated is None:
        raise HTTPException(status_code=422, detail="Plate number is required")
    return CarSchema.from_entity(updated)


# ---- services and masters ----


@router.get("/services", response_model=list[AdminServiceSchema])
def list_admin_services(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [AdminServiceSchema.from_entity(s) for s in state.admin_services]


@router.post("/services", response_model=AdminServiceSchema, status_code=201)
def add_admin_service(req: AdminServiceWriteSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    service = state.add_admin_service(
        category=req.category,
        title=req.title,
        price_text=req.price_text,
        duration_minutes=req.duration_minutes,
        image_data=_decode(req.image_base64),
    )
    if service is None:
        raise HTTPException(status_code=422, detail="Category and title are required")
    return AdminServiceSchema.from_entity(service)


@router.put("/services/{service_id}", response_model=AdminServiceSchema)
def update_admin_service(
    service_id: UUID,
    req: AdminServiceWriteSchema,
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    service = _find(state.admin_services, service_id, "Service")
    updated = state.update_admin_service(
        replace(
            service,
            category=req.category,
            title=req.title,
            price_text=req.price_text.strip(),
            duration_minutes=req.duration_minutes,
            image_data=_keep_image(service.image_data, req.image_base64),
        )
    )
    if updated is None:
        raise HTTPException(status_code=422, detail="Category and title are required")
    return AdminServiceSchema.from_entity(updated)


@router.delete("/services/{service_id}", status_code=204)
def delete_admin_service(service_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    state.delete_admin_service(_find(state.admin_services, service_id, "Service"))
    return Response(status_code=204)


@router.get("/masters", response_model=list[AdminMasterSchema])
def list_admin_masters(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [AdminMasterSchema.from_entity(m) for m in state.admin_masters]


@router.post("/masters", response_model=AdminMasterSchema, status_code=201)
def add_admin_master(req: AdminMasterWriteSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    master = state.add_admin_master(req.name, req.categories, _decode(req.image_base64))
    if master is None:
        raise HTTPException(status_code=422, detail="Master name is required")
    return AdminMasterSchema.from_entity(master)


@router.put("/masters/{master_id}", response_model=AdminMasterSchema)
def update_admin_master(
    master_id: UUID,
    req: AdminMasterWriteSchema,
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    master = _find(state.admin_masters, master_id, "Master")
    updated = state.update_admin_master(
        replace(
            master,
            name=req.name,
            categories=frozenset(c.strip() for c in req.categories if c.strip()),
            image_data=_keep_image(master.image_data, req.image_base64),
        )
    )
    if updated is None:
        raise HTTPException(status_code=422, detail="Master name is required")
    return AdminMasterSchema.from_entity(updated)


@router.delete("/masters/{master_id}", status_code=204)
def delete_admin_master(master_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    state.delete_admin_master(_find(state.admin_masters, master_id, "Master"))
    return Response(status_code=204)


@router.get("/categories", response_model=list[str])
def list_categories(state: BookingFlowState = Depends(get_booking_flow_state)):
    return state.admin_categories()
