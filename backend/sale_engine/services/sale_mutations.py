"""
Сохранение и удаление распродаж.

Запись правила и все три набора привязок меняются в одной транзакции:
либо фиксируется всё, либо ничего.
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Sequence, Type
from sqlmodel import Session, SQLModel, select
from sale_engine.core.exceptions import SaleNotFoundError
from sale_engine.models.sale import (
    DiscountType, Sale, SaleRecord, SalePurchasable, SaleCategory, SaleUserGroup,
    copy_sale_to_record,
)
from sale_engine.services.relations import get_purchasable

logger = logging.getLogger(__name__)


def validate_sale(record: SaleRecord) -> Dict[str, List[str]]:
    """Проверка полей; возвращает ошибки по полям"""
    errors: Dict[str, List[str]] = {}

    def add(field: str, message: str):
        errors.setdefault(field, []).append(message)

    if not record.name or not record.name.strip():
        add("name", "Name cannot be blank.")
    elif len(record.name) > 255:
        add("name", "Name should contain at most 255 characters.")

    # Тип и наличие суммы уже проверены моделью Sale
    amount = record.discount_amount
    if amount > 0:
        add("discount_amount", "Discount amount must be zero or negative.")
    elif record.discount_type == DiscountType.PERCENT and amount < -1:
        add("discount_amount", "Percentage discount cannot exceed 100%.")

    if record.date_from and record.date_to and record.date_from >= record.date_to:
        add("date_to", "End date must be after start date.")

    return errors


def replace_associations(
    db: Session,
    link_model: Type[SQLModel],
    sale_id: int,
    rows: Sequence[SQLModel],
) -> None:
    """Удалить все привязки правила в таблице и вставить новые"""
    existing = db.exec(select(link_model).where(link_model.sale_id == sale_id)).all()
    for row in existing:
        db.delete(row)
    db.flush()

    db.add_all(rows)
    db.flush()


def save_sale(
    db: Session,
    sale: Sale,
    groups: Iterable[int],
    categories: Iterable[int],
    purchasables: Iterable[int],
) -> bool:
    """
    Сохранить правило и пересобрать его привязки.
    Возвращает False, если есть ошибки валидации (ничего не пишется).
    """
    groups = list(dict.fromkeys(groups))
    categories = list(dict.fromkeys(categories))
    purchasables = list(dict.fromkeys(purchasables))

    if sale.id:
        record = db.get(SaleRecord, sale.id)
        if not record:
            raise SaleNotFoundError(sale.id)
    else:
        record = SaleRecord()

    copy_sale_to_record(sale, record)

    # Пустой список = правило на всех
    record.all_groups = sale.all_groups = not groups
    record.all_categories = sale.all_categories = not categories
    record.all_purchasables = sale.all_purchasables = not purchasables

    sale.add_errors(validate_sale(record))
    if sale.has_errors():
        # Не оставляем изменённую запись в сессии
        if record.id is not None:
            db.expire(record)
        logger.info(f"[SALES] Sale '{sale.name}' not saved: {sale.errors}")
        return False

    original_id = sale.id
    try:
        record.date_updated = datetime.utcnow()
        db.add(record)
        db.flush()
        sale.id = record.id

        replace_associations(db, SaleUserGroup, sale.id, [
            SaleUserGroup(sale_id=sale.id, user_group_id=group_id)
            for group_id in groups
        ])
        replace_associations(db, SaleCategory, sale.id, [
            SaleCategory(sale_id=sale.id, category_id=category_id)
            for category_id in categories
        ])

        purchasable_rows = []
        for purchasable_id in purchasables:
            _, purchasable_type = get_purchasable(db, purchasable_id)
            purchasable_rows.append(SalePurchasable(
                sale_id=sale.id,
                purchasable_id=purchasable_id,
                purchasable_type=purchasable_type,
            ))
        replace_associations(db, SalePurchasable, sale.id, purchasable_rows)

        db.commit()
    except Exception:
        db.rollback()
        sale.id = original_id
        logger.exception(f"[SALES] Failed to save sale '{sale.name}', rolled back")
        raise

    sale.purchasable_ids = set(purchasables)
    sale.category_ids = set(categories)
    sale.user_group_ids = set(groups)

    logger.info(f"[SALES] Saved sale {sale.id}")
    return True


def delete_sale_by_id(db: Session, sale_id: int) -> bool:
    record = db.get(SaleRecord, sale_id)
    if not record:
        return False

    try:
        for link_model in (SaleUserGroup, SaleCategory, SalePurchasable):
            replace_associations(db, link_model, sale_id, [])
        db.delete(record)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"[SALES] Failed to delete sale {sale_id}, rolled back")
        raise

    logger.info(f"[SALES] Deleted sale {sale_id}")
    return True
