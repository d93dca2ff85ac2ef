"""
Внешние связи, которые нужны для сопоставления распродаж:
категории товара, группы пользователя и тип purchasable.
"""
from typing import Optional, Set, Tuple
from sqlmodel import Session, select
from sale_engine.core.exceptions import PurchasableNotFoundError
from sale_engine.models.product import Product
from sale_engine.models.user import User, UserGroupMember


class CategoryRelations:
    """Категории, связанные с источником (товаром)"""

    def __init__(self, db: Session):
        self.db = db

    def related_category_ids(self, source: Optional[int]) -> Set[int]:
        if source is None:
            return set()

        stmt = select(Product.category_id).where(
            Product.id == source,
            Product.category_id != None,
        )
        return set(self.db.exec(stmt).all())


class UserGroupRelations:
    """Группы, в которых состоит пользователь"""

    def __init__(self, db: Session):
        self.db = db

    def group_ids_for_user(self, user: Optional[User]) -> Set[int]:
        if user is None or user.id is None:
            return set()

        stmt = select(UserGroupMember.user_group_id).where(UserGroupMember.user_id == user.id)
        return set(self.db.exec(stmt).all())


def get_purchasable(db: Session, purchasable_id: int) -> Tuple[Product, str]:
    """Найти purchasable по id и вернуть его вместе с типом"""
    item = db.get(Product, purchasable_id)
    if item is None:
        raise PurchasableNotFoundError(purchasable_id)
    return item, type(item).__name__
