import os

# Engine модуля не должен трогать реальную базу во время тестов
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlmodel import SQLModel, Session

import sale_engine.models  # noqa: F401
from sale_engine.db.session import build_engine
from sale_engine.models import Category, Product, User, UserGroup, UserGroupMember, Order
from sale_engine.services.sale_repository import SaleRepository


class StaticCategories:
    """Категории по источнику из словаря"""

    def __init__(self, mapping=None):
        self.mapping = mapping or {}

    def related_category_ids(self, source):
        return set(self.mapping.get(source, ()))


class StaticUserGroups:
    """Группы по id пользователя из словаря"""

    def __init__(self, mapping=None):
        self.mapping = mapping or {}
        self.calls = []

    def group_ids_for_user(self, user):
        self.calls.append(user)
        if user is None:
            return set()
        return set(self.mapping.get(user.id, ()))


def make_purchasable(purchasable_id=1, price="100.00", is_promotable=True):
    return SimpleNamespace(
        purchasable_id=purchasable_id,
        promotion_relation_source=purchasable_id,
        price=Decimal(price),
        is_promotable=is_promotable,
    )


@pytest.fixture
def now():
    return datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'sales.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repository(engine):
    return SaleRepository(engine)


@pytest.fixture
def category(session):
    category = Category(name="Sponges", slug="sponges")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def other_category(session):
    category = Category(name="Brushes", slug="brushes")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def product(session, category):
    product = Product(
        name="Kitchen sponge",
        slug="kitchen-sponge",
        sku="SP-001",
        price=Decimal("100.00"),
        category_id=category.id,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def other_product(session, other_category):
    product = Product(
        name="Dish brush",
        slug="dish-brush",
        sku="BR-001",
        price=Decimal("40.00"),
        category_id=other_category.id,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def wholesale_group(session):
    group = UserGroup(name="Wholesale", handle="wholesale")
    session.add(group)
    session.commit()
    session.refresh(group)
    return group


@pytest.fixture
def retail_group(session):
    group = UserGroup(name="Customers", handle="customers")
    session.add(group)
    session.commit()
    session.refresh(group)
    return group


@pytest.fixture
def customer(session, wholesale_group):
    user = User(email="buyer@example.com", first_name="Buyer")
    session.add(user)
    session.flush()
    session.add(UserGroupMember(user_id=user.id, user_group_id=wholesale_group.id))
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def completed_order(session, customer, now):
    order = Order(
        order_number="SE-0001",
        user_id=customer.id,
        is_completed=True,
        date_ordered=now - timedelta(days=30),
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order
