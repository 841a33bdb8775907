from __future__ import annotations

from vbunker.domain.entities.car import CarItem
from vbunker.domain.entities.post import ADMIN_AVATAR_NAME, Post, PostSource
from vbunker.domain.entities.service_catalog import AdminMaster, AdminService, Master, ServiceCategory, ServiceItem

SERVICE_CATEGORIES: tuple[ServiceCategory, ...] = (
    ServiceCategory(
        title="Тонировка",
        services=(
            ServiceItem(title="Тонировка", area="Передние стекла", duration="60 минут", price="4400 ₽"),
            ServiceItem(title="Тонировка", area="Задняя полусфера", duration="90 минут", price="6500 ₽"),
            ServiceItem(title="Тонировка", area="Лобовое стекло", duration="60 минут", price="5000 ₽"),
        ),
    ),
    ServiceCategory(
        title="Бронеплёнка",
        services=(
            ServiceItem(title="Бронеплёнка", area="Передний бампер", duration="3 часа", price="15000 ₽"),
        ),
    ),
    ServiceCategory(
        title="Полировка",
        services=(
            ServiceItem(title="Полировка", area="Кузов", duration="1 день", price="25000 ₽"),
        ),
    ),
    ServiceCategory(
        title="Доп. услуги",
        services=(
            ServiceItem(title="Химчистка салона", area="Полный салон", duration="4 часа", price="8000 ₽"),
        ),
    ),
    ServiceCategory(
        title="Акции",
        services=(
            ServiceItem(title="Комплекс «Премиум»", area="Кузов + салон", duration="1 день", price="по акции"),
        ),
    ),
)

MASTERS: tuple[Master, ...] = (
    Master(
        name="Дмитрий",
        role="Мастер по тонировке и оклейке",
        next_day_label="завтра:",
        time_slots=("11:00", "12:30", "18:00", "18:30", "20:00"),
    ),
    Master(
        name="Евгений",
        role="Мастер по полировке",
        next_day_label="завтра:",
        time_slots=("11:00", "12:30", "18:00", "18:30", "20:00"),
    ),
)

TIME_SLOTS: dict[str, tuple[str, ...]] = {
    "morning": ("09:00", "09:30", "10:00", "11:30"),
    "day": ("14:00", "15:30", "16:00"),
    "evening": ("18:00", "19:30"),
}

NEWS_POSTS: tuple[Post, ...] = (
    Post(
        source=PostSource.admin,
        author_name="VBunker31",
        author_avatar_name=ADMIN_AVATAR_NAME,
        car_name="Changan Uni-S",
        date_string="01 января 2025 года",
        images=("image_1", "image_2", "image_3", "image_4"),
        text=(
            "❗️Установка амбиентой (контурной подсветки салона);\n"
            "✅Оклеили малый комплекс зон риска полиуретановой пленкой: Капот, полоса крыши, фары, "
            "зона под ручками, внутренние пороги, зона погрузки;\n"
            "⚫️Тонировка задней части 5% Llumar atr;"
        ),
    ),
    Post(
        source=PostSource.admin,
        author_name="VBunker31",
        author_avatar_name=ADMIN_AVATAR_NAME,
        car_name="BMW M5",
        date_string="15 января 2025 года",
        images=("work_3",),
        text="Полная детейлинг-мойка и полировка кузова.",
    ),
)

PROMO_POSTS: tuple[Post, ...] = (
    Post(
        source=PostSource.admin,
        author_name="VBunker31",
        author_avatar_name=ADMIN_AVATAR_NAME,
        car_name="Jaguar",
        date_string="До 31 января",
        images=("promo_1",),
        text="Скидка 20% на полную химчистку салона при записи в будни.",
    ),
    Post(
        source=PostSource.admin,
        author_name="VBunker31",
        author_avatar_name=ADMIN_AVATAR_NAME,
        car_name="Любое авто",
        date_string="Весь февраль",
        images=("promo_2",),
        text="Акция: третья мойка в подарок при покупке абонемента.",
    ),
)

REVIEW_POSTS: tuple[Post, ...] = (
    Post(
        source=PostSource.user,
        author_name="Иван Иванов",
        author_avatar_name="user_ivan",
        car_name="Audi A6",
        date_string="20 января 2025 года",
        images=("review_1",),
        text="Остался очень доволен сервисом. Буду обращаться ещё!",
    ),
    Post(
        source=PostSource.user,
        author_name="Павел Петров",
        author_avatar_name="user_pavel",
        car_name="Toyota Camry",
        date_string="22 января 2025 года",
        images=("review_2",),
        text="Сделали всё вовремя, отдельное спасибо за обслуживание.",
    ),
)

ADMIN_SERVICES: tuple[AdminService, ...] = (
    AdminService(category="Тонировка", title="Передние стёкла", duration_minutes=60, price_text="от 4400 ₽"),
    AdminService(category="Бронеплёнка", title="Передний бампер", duration_minutes=180, price_text="от 15000 ₽"),
)

ADMIN_MASTERS: tuple[AdminMaster, ...] = (
    AdminMaster(name="Дмитрий", categories=frozenset({"Тонировка", "Бронирование"})),
    AdminMaster(name="Антон", categories=frozenset({"Полировка"})),
    AdminMaster(name="Сергей", categories=frozenset({"Доп. услуги"})),
)


def starter_car() -> CarItem:
    # fresh identity per session
    return CarItem(number="О212УС31", brand="LADA", model="Vesta", year=2023, body_type="Универсал")
