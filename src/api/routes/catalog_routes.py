"""
Catalog routes - priced SKUs from the price tab, or the built-in list.
"""
from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.auth.dependencies import get_optional_user
from api.helpers import get_sales_service, resolve_account_config

router = APIRouter()


class SKUResponse(BaseModel):
    id: str
    name: str
    unit_price: Union[int, float]
    pack_type: str = ""
    pack_type_2: str = ""


class CatalogResponse(BaseModel):
    source: str
    message: str
    count: int
    skus: List[SKUResponse]


@router.get(
    "",
    response_model=CatalogResponse,
    summary="Load the product catalog",
)
async def get_catalog(user: Optional[dict] = Depends(get_optional_user)):
    """
    Always succeeds. When the price tab is unreadable the built-in catalog is
    returned with ``source="fallback"``.
    """
    result = await get_sales_service().load_catalog(resolve_account_config(user))
    return CatalogResponse(
        source=result.source,
        message=result.message,
        count=len(result.skus),
        skus=[SKUResponse(**vars(sku)) for sku in result.skus],
    )
