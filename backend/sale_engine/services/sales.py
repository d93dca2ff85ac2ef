from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
from sqlmodel import Session
from sale_engine.models.sale import Sale
from sale_engine.models.user import User
from sale_engine.services import sale_mutations
from sale_engine.services.pricing import calculate_sale_price
from sale_engine.services.relations import CategoryRelations, UserGroupRelations
from sale_engine.services.sale_matcher import (
    BeforeMatchHook, OrderContext, Purchasable, SaleMatcher,
)
from sale_engine.services.sale_repository import SaleRepository


class SalesService:
    """
    Распродажи в рамках одного запроса.
    Репозиторий (и его кэш) и сессия БД создаются на каждый запрос.
    """

    def __init__(
        self,
        db: Session,
        repository: SaleRepository,
        hooks: Iterable[BeforeMatchHook] = (),
        matcher: Optional[SaleMatcher] = None,
    ):
        self.db = db
        self.repository = repository
        self.matcher = matcher or SaleMatcher(
            categories=CategoryRelations(db),
            user_groups=UserGroupRelations(db),
            hooks=hooks,
        )

    def get_all_sales(self) -> Tuple[Sale, ...]:
        return self.repository.get_all()

    def get_all_enabled_sales(self) -> Tuple[Sale, ...]:
        return self.repository.get_all_enabled()

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        return self.repository.get_by_id(sale_id)

    def populate_sale_relations(self, sale: Sale) -> None:
        self.repository.populate_relations(sale)

    def match_purchasable_and_sale(
        self,
        purchasable: Purchasable,
        sale: Sale,
        order: Optional[OrderContext] = None,
        user: Optional[User] = None,
    ) -> bool:
        return self.matcher.matches(purchasable, sale, order, user)

    def get_sales_for_purchasable(
        self,
        purchasable: Purchasable,
        order: Optional[OrderContext] = None,
        user: Optional[User] = None,
    ) -> List[Sale]:
        return self.matcher.get_sales_for_purchasable(
            purchasable, self.repository.get_all_enabled(), order, user
        )

    def get_sale_price_for_purchasable(
        self,
        purchasable: Purchasable,
        order: Optional[OrderContext] = None,
        user: Optional[User] = None,
    ) -> Decimal:
        sales = self.get_sales_for_purchasable(purchasable, order, user)
        return calculate_sale_price(purchasable.price, sales)

    def save_sale(
        self,
        sale: Sale,
        groups: Iterable[int],
        categories: Iterable[int],
        purchasables: Iterable[int],
    ) -> bool:
        return sale_mutations.save_sale(self.db, sale, groups, categories, purchasables)

    def delete_sale_by_id(self, sale_id: int) -> bool:
        return sale_mutations.delete_sale_by_id(self.db, sale_id)
