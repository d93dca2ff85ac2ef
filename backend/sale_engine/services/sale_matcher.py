"""
Проверка, подходит ли распродажа к товару (и, опционально, к заказу).

Порядок проверок:
1. товар допускает распродажи;
2. товар входит в правило (если правило не на все товары);
3. категории товара пересекаются с категориями правила;
4. группы покупателя пересекаются с группами правила;
5. текущая дата попадает в окно действия;
6. ни один хук не отклонил совпадение.
"""
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Set
from sale_engine.models.sale import Sale
from sale_engine.models.user import User


class Purchasable(Protocol):
    price: Decimal
    is_promotable: bool

    @property
    def purchasable_id(self) -> Optional[int]: ...

    @property
    def promotion_relation_source(self) -> Optional[int]: ...


class OrderContext(Protocol):
    is_completed: bool
    date_ordered: Optional[datetime]
    user: Optional[User]


class CategoryResolver(Protocol):
    def related_category_ids(self, source: Optional[int]) -> Set[int]: ...


class UserGroupResolver(Protocol):
    def group_ids_for_user(self, user: Optional[User]) -> Set[int]: ...


BeforeMatchHook = Callable[[Sale], bool]


class SaleMatcher:
    def __init__(
        self,
        categories: CategoryResolver,
        user_groups: UserGroupResolver,
        hooks: Iterable[BeforeMatchHook] = (),
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.categories = categories
        self.user_groups = user_groups
        self.hooks = list(hooks)
        self.clock = clock

    def matches(
        self,
        purchasable: Purchasable,
        sale: Sale,
        order: Optional[OrderContext] = None,
        user: Optional[User] = None,
    ) -> bool:
        if not purchasable.is_promotable:
            return False

        if not sale.all_purchasables and purchasable.purchasable_id not in sale.purchasable_ids:
            return False

        if not sale.all_categories:
            related = self.categories.related_category_ids(purchasable.promotion_relation_source)
            if not related & sale.category_ids:
                return False

        if not sale.all_groups:
            # В контексте заказа важен покупатель заказа, а не текущий пользователь
            customer = order.user if order is not None else user
            if customer is None:
                return False
            groups = self.user_groups.group_ids_for_user(customer)
            if not groups & sale.user_group_ids:
                return False

        reference = self._reference_date(order)

        if sale.date_from and sale.date_from >= reference:
            return False

        if sale.date_to and sale.date_to <= reference:
            return False

        for hook in self.hooks:
            if not hook(sale):
                return False

        return True

    def get_sales_for_purchasable(
        self,
        purchasable: Purchasable,
        sales: Sequence[Sale],
        order: Optional[OrderContext] = None,
        user: Optional[User] = None,
    ) -> List[Sale]:
        return [sale for sale in sales if self.matches(purchasable, sale, order, user)]

    def _reference_date(self, order: Optional[OrderContext]) -> datetime:
        # Для оформленного заказа считаем на дату оформления
        if order is not None and order.is_completed and order.date_ordered is not None:
            return order.date_ordered
        return self.clock()
