"""
Репозиторий распродаж.

Загружает все правила одним запросом (LEFT JOIN на три таблицы привязок)
и держит два кэша на всё время жизни экземпляра: все распродажи и только
включённые. Явного сброса кэша нет: после сохранения правила в том же
экземпляре кэш остаётся прежним. В API экземпляр создаётся на запрос.
"""
import logging
import threading
from typing import Callable, Dict, Generic, Optional, Set, Tuple, TypeVar
from sqlalchemy.engine import Engine
from sqlmodel import Session, select
from sale_engine.models.sale import (
    Sale, SaleRecord, SalePurchasable, SaleCategory, SaleUserGroup,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyValue(Generic[T]):
    """Значение, которое вычисляется один раз (Unloaded -> Loaded)"""

    def __init__(self, loader: Callable[[], T]):
        self._loader = loader
        self._lock = threading.Lock()
        self._loaded = False
        self._value: Optional[T] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self) -> T:
        if not self._loaded:
            with self._lock:
                if not self._loaded:
                    self._value = self._loader()
                    self._loaded = True
        return self._value


def _relations_query():
    return (
        select(
            SaleRecord,
            SalePurchasable.purchasable_id,
            SaleCategory.category_id,
            SaleUserGroup.user_group_id,
        )
        .outerjoin(SalePurchasable, SalePurchasable.sale_id == SaleRecord.id)
        .outerjoin(SaleCategory, SaleCategory.sale_id == SaleRecord.id)
        .outerjoin(SaleUserGroup, SaleUserGroup.sale_id == SaleRecord.id)
    )


class SaleRepository:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._all_sales: LazyValue[Tuple[Sale, ...]] = LazyValue(self._load_all)
        self._all_enabled_sales: LazyValue[Tuple[Sale, ...]] = LazyValue(self._load_enabled)

    def get_all(self) -> Tuple[Sale, ...]:
        return self._all_sales.get()

    def get_all_enabled(self) -> Tuple[Sale, ...]:
        return self._all_enabled_sales.get()

    def get_by_id(self, sale_id: int) -> Optional[Sale]:
        for sale in self.get_all():
            if sale.id == sale_id:
                return sale
        return None

    def populate_relations(self, sale: Sale) -> None:
        """Перечитать привязки одного правила и перезаписать его наборы"""
        stmt = _relations_query().where(SaleRecord.id == sale.id)

        purchasable_ids: Set[int] = set()
        category_ids: Set[int] = set()
        user_group_ids: Set[int] = set()

        with Session(self.engine) as session:
            for _, purchasable_id, category_id, user_group_id in session.exec(stmt).all():
                if purchasable_id:
                    purchasable_ids.add(purchasable_id)
                if category_id:
                    category_ids.add(category_id)
                if user_group_id:
                    user_group_ids.add(user_group_id)

        sale.purchasable_ids = purchasable_ids
        sale.category_ids = category_ids
        sale.user_group_ids = user_group_ids

    def _load_all(self) -> Tuple[Sale, ...]:
        stmt = _relations_query().order_by(SaleRecord.id)

        records: Dict[int, SaleRecord] = {}
        purchasables: Dict[int, Set[int]] = {}
        categories: Dict[int, Set[int]] = {}
        groups: Dict[int, Set[int]] = {}

        with Session(self.engine) as session:
            for record, purchasable_id, category_id, user_group_id in session.exec(stmt).all():
                sale_id = record.id
                records.setdefault(sale_id, record)
                if purchasable_id:
                    purchasables.setdefault(sale_id, set()).add(purchasable_id)
                if category_id:
                    categories.setdefault(sale_id, set()).add(category_id)
                if user_group_id:
                    groups.setdefault(sale_id, set()).add(user_group_id)

            sales = tuple(
                Sale.from_record(
                    record,
                    purchasable_ids=purchasables.get(sale_id, ()),
                    category_ids=categories.get(sale_id, ()),
                    user_group_ids=groups.get(sale_id, ()),
                )
                for sale_id, record in records.items()
            )

        logger.info(f"[SALES] Loaded {len(sales)} sales")
        return sales

    def _load_enabled(self) -> Tuple[Sale, ...]:
        return tuple(sale for sale in self.get_all() if sale.enabled)
