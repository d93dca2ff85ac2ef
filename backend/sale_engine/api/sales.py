from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from typing import List
from sale_engine.api.deps import get_sales_service, admin_required
from sale_engine.core.exceptions import SaleEngineError
from sale_engine.models.sale import Sale
from sale_engine.models.user import User
from sale_engine.schemas.sale import SaleResponse, SaleSave, SaleErrorsResponse
from sale_engine.services.sales import SalesService

router = APIRouter(prefix="/api/sales", tags=["sales"])


def sale_to_response(sale: Sale) -> SaleResponse:
    return SaleResponse(
        id=sale.id,
        name=sale.name,
        description=sale.description,
        date_from=sale.date_from,
        date_to=sale.date_to,
        discount_type=sale.discount_type,
        discount_amount=sale.discount_amount,
        all_groups=sale.all_groups,
        all_categories=sale.all_categories,
        all_purchasables=sale.all_purchasables,
        enabled=sale.enabled,
        purchasable_ids=sorted(sale.purchasable_ids),
        category_ids=sorted(sale.category_ids),
        user_group_ids=sorted(sale.user_group_ids),
    )


def _save(service: SalesService, sale: Sale, data: SaleSave):
    try:
        saved = service.save_sale(
            sale,
            groups=data.user_group_ids,
            categories=data.category_ids,
            purchasables=data.purchasable_ids,
        )
    except SaleEngineError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if not saved:
        body = SaleErrorsResponse(message="Couldn't save sale", errors=sale.errors)
        return JSONResponse(status_code=422, content=body.model_dump())

    return sale_to_response(sale)


# === Public ===

@router.get("/active", response_model=List[SaleResponse])
def list_enabled_sales(service: SalesService = Depends(get_sales_service)):
    """Список включённых распродаж (публичный)"""
    return [sale_to_response(sale) for sale in service.get_all_enabled_sales()]


# === Admin CRUD ===

@router.get("/", response_model=List[SaleResponse])
def list_sales(
    service: SalesService = Depends(get_sales_service),
    _: User = Depends(admin_required)
):
    """Список всех распродаж (админ)"""
    return [sale_to_response(sale) for sale in service.get_all_sales()]


@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: int,
    service: SalesService = Depends(get_sales_service),
    _: User = Depends(admin_required)
):
    """Получить распродажу по ID (админ)"""
    sale = service.get_sale_by_id(sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return sale_to_response(sale)


@router.post("/", response_model=SaleResponse, responses={422: {"model": SaleErrorsResponse}})
def create_sale(
    data: SaleSave,
    service: SalesService = Depends(get_sales_service),
    _: User = Depends(admin_required)
):
    """Создать распродажу (админ)"""
    sale = Sale(
        name=data.name,
        description=data.description,
        date_from=data.date_from,
        date_to=data.date_to,
        discount_type=data.discount_type,
        discount_amount=data.discount_amount,
        enabled=data.enabled,
    )
    return _save(service, sale, data)


@router.put("/{sale_id}", response_model=SaleResponse, responses={422: {"model": SaleErrorsResponse}})
def update_sale(
    sale_id: int,
    data: SaleSave,
    service: SalesService = Depends(get_sales_service),
    _: User = Depends(admin_required)
):
    """Обновить распродажу (админ)"""
    sale = Sale(
        id=sale_id,
        name=data.name,
        description=data.description,
        date_from=data.date_from,
        date_to=data.date_to,
        discount_type=data.discount_type,
        discount_amount=data.discount_amount,
        enabled=data.enabled,
    )
    return _save(service, sale, data)


@router.delete("/{sale_id}")
def delete_sale(
    sale_id: int,
    service: SalesService = Depends(get_sales_service),
    _: User = Depends(admin_required)
):
    """Удалить распродажу (админ)"""
    if not service.delete_sale_by_id(sale_id):
        raise HTTPException(status_code=404, detail="Sale not found")
    return {"message": "Sale deleted"}
