from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response

from vbunker.api.v1.schemas import (
    BookingSchema,
    CarSchema,
    CarWriteSchema,
    CompleteProfileRequestSchema,
    DraftSchema,
    LoginRequestSchema,
    MasterSchema,
    PostSchema,
    ProfileSchema,
    RecordsSchema,
    ReviewCreateSchema,
    ReviewSchema,
    SelectCarSchema,
    SelectDateTimeSchema,
    SelectMasterSchema,
    SelectServiceSchema,
    ServiceCategorySchema,
    UpdateProfileRequestSchema,
    decode_image,
)
from vbunker.application.booking_flow_state import BookingFlowState
from vbunker.application.utils.booking_filters import past_bookings, upcoming_bookings
from vbunker.domain.entities.booking import Booking
from vbunker.domain.entities.car import CarItem
from vbunker.wiring.dependencies import get_booking_flow_state

router = APIRouter()


def _decode(value: str | None) -> bytes | None:
    try:
        return decode_image(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _get_car(state: BookingFlowState, car_id: UUID) -> CarItem:
    car = state.find_car(car_id)
    if car is None:
        raise HTTPException(status_code=404, detail="Car not found")
    return car


def _get_booking(state: BookingFlowState, booking_id: UUID) -> Booking:
    booking = state.find_booking(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


def _draft(state: BookingFlowState) -> DraftSchema:
    return DraftSchema.from_entity(state.selection, state.is_admin_booking_flow)


# ---- profile ----


@router.get("/profile", response_model=ProfileSchema)
def get_profile(state: BookingFlowState = Depends(get_booking_flow_state)):
    return ProfileSchema.from_entity(state.profile)


@router.post("/login", response_model=ProfileSchema)
def login(req: LoginRequestSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    if not state.log_in(req.phone):
        raise HTTPException(status_code=422, detail="Phone number is required")
    return ProfileSchema.from_entity(state.profile)


@router.post("/profile/complete", response_model=ProfileSchema)
def complete_profile(req: CompleteProfileRequestSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    if not state.complete_profile(req.first_name, req.last_name):
        raise HTTPException(status_code=422, detail="First name is required")
    return ProfileSchema.from_entity(state.profile)


@router.put("/profile", response_model=ProfileSchema)
def update_profile(req: UpdateProfileRequestSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    profile = state.update_profile(
        first_name=req.first_name.strip(),
        last_name=req.last_name.strip(),
        email=req.email.strip(),
        avatar_data=_decode(req.avatar_base64),
    )
    return ProfileSchema.from_entity(profile)


@router.post("/profile/role/toggle", response_model=ProfileSchema)
def toggle_role(state: BookingFlowState = Depends(get_booking_flow_state)):
    state.toggle_role()
    return ProfileSchema.from_entity(state.profile)


@router.post("/logout", status_code=204)
def logout(state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    state.log_out()
    return Response(status_code=204)


# ---- catalog ----


@router.get("/catalog/services", response_model=list[ServiceCategorySchema])
def list_services(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [ServiceCategorySchema.from_entity(c) for c in state.catalog.categories()]


@router.get("/catalog/masters", response_model=list[MasterSchema])
def list_masters(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [MasterSchema.from_entity(m) for m in state.catalog.masters()]


@router.get("/catalog/time-slots", response_model=dict[str, list[str]])
def list_time_slots(state: BookingFlowState = Depends(get_booking_flow_state)):
    return state.catalog.time_slots()


# ---- garage ----


@router.get("/cars", response_model=list[CarSchema])
def list_cars(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [CarSchema.from_entity(c) for c in state.cars]


@router.post("/cars", response_model=CarSchema, status_code=201)
def add_car(req: CarWriteSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    car = state.add_car(req.number, req.brand, req.model, req.year, req.body_type)
    if car is None:
        raise HTTPException(status_code=422, detail="Plate number is required")
    return CarSchema.from_entity(car)


@router.put("/cars/{car_id}", response_model=CarSchema)
def update_car(car_id: UUID, req: CarWriteSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    car = _get_car(state, car_id)
    updated = state.update_car(car, req.number, req.brand, req.model, req.year, req.body_type)
    if updated is None:
        raise HTTPException(status_code=422, detail="Plate number is required")
    return CarSchema.from_entity(updated)


@router.delete("/cars/{car_id}", status_code=204)
def delete_car(car_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)) -> Response:
    state.delete_car(_get_car(state, car_id))
    return Response(status_code=204)


# ---- booking draft ----


@router.get("/draft", response_model=DraftSchema)
def get_draft(state: BookingFlowState = Depends(get_booking_flow_state)):
    return _draft(state)


@router.put("/draft/service", response_model=DraftSchema)
def select_service(req: SelectServiceSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    service = state.catalog.find_service(req.service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    state.select_service(service)
    return _draft(state)


@router.put("/draft/master", response_model=DraftSchema)
def select_master(req: SelectMasterSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    master = state.catalog.find_master(req.master_id)
    if master is None:
        raise HTTPException(status_code=404, detail="Master not found")
    state.select_master(master)
    return _draft(state)


@router.put("/draft/datetime", response_model=DraftSchema)
def select_date_time(req: SelectDateTimeSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    if not state.select_date_time(req.date, req.time):
        raise HTTPException(status_code=422, detail="Time slot is required")
    return _draft(state)


@router.put("/draft/car", response_model=DraftSchema)
def select_car(req: SelectCarSchema, state: BookingFlowState = Depends(get_booking_flow_state)):
    state.select_car(_get_car(state, req.car_id))
    return _draft(state)


@router.delete("/draft", response_model=DraftSchema)
def reset_draft(state: BookingFlowState = Depends(get_booking_flow_state)):
    state.reset_all()
    return _draft(state)


@router.delete("/draft/{step}", response_model=DraftSchema)
def reset_draft_step(step: str, state: BookingFlowState = Depends(get_booking_flow_state)):
    resets = {
        "service": state.reset_service,
        "master": state.reset_master,
        "datetime": state.reset_date_time,
        "car": state.reset_car,
    }
    reset = resets.get(step)
    if reset is None:
        raise HTTPException(status_code=404, detail=f"Unknown draft step: {step}")
    reset()
    return _draft(state)


@router.post("/draft/confirm", response_model=BookingSchema, status_code=201)
def confirm_draft(state: BookingFlowState = Depends(get_booking_flow_state)):
    booking = state.confirm_current_booking()
    if booking is None:
        raise HTTPException(status_code=409, detail="Booking draft is incomplete")
    return BookingSchema.from_entity(booking)


# ---- records ----


@router.get("/records", response_model=RecordsSchema)
def list_records(state: BookingFlowState = Depends(get_booking_flow_state)):
    now = state.now()
    bookings = state.bookings
    return RecordsSchema(
        upcoming=[BookingSchema.from_entity(b) for b in upcoming_bookings(bookings, now)],
        past=[BookingSchema.from_entity(b) for b in past_bookings(bookings, now)],
    )


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(booking_id: UUID, state: BookingFlowState = Depends(get_booking_flow_state)):
    booking = state.cancel_booking(_get_booking(state, booking_id))
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/reviews", response_model=ReviewSchema, status_code=201)
def add_review(
    booking_id: UUID,
    req: ReviewCreateSchema,
    state: BookingFlowState = Depends(get_booking_flow_state),
):
    booking = _get_booking(state, booking_id)
    review = state.add_review(booking, req.text, _decode(req.image_base64))
    if review is None:
        raise HTTPException(status_code=422, detail="Review text is required")
    return ReviewSchema.from_entity(review)


# ---- feed ----


@router.get("/feed/news", response_model=list[PostSchema])
def news_feed(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [PostSchema.from_entity(p) for p in state.news_posts]


@router.get("/feed/promos", response_model=list[PostSchema])
def promo_feed(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [PostSchema.from_entity(p) for p in state.promo_posts]


@router.get("/feed/reviews", response_model=list[PostSchema])
def review_feed(state: BookingFlowState = Depends(get_booking_flow_state)):
    return [PostSchema.from_entity(p) for p in state.review_posts()]
