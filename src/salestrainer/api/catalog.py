"""Product catalog endpoints (upload, fetch)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from salestrainer.api.deps import get_catalog_repository
from salestrainer.core.db import get_db
from salestrainer.models import CatalogRead, CatalogUpload, CatalogUploadResult
from salestrainer.services.catalog import CatalogRepository

router = APIRouter(prefix="/api/products", tags=["catalog"])


@router.get("", response_model=CatalogRead)
async def get_products(
    catalog: CatalogRepository = Depends(get_catalog_repository),
    db: AsyncSession = Depends(get_db),
):
    """Return the current catalog snapshot (null before the first upload)."""
    return CatalogRead(products=await catalog.load(db))


@router.post("", response_model=CatalogUploadResult)
async def upload_products(
    payload: CatalogUpload,
    catalog: CatalogRepository = Depends(get_catalog_repository),
    db: AsyncSession = Depends(get_db),
):
    """Replace the global catalog snapshot."""
    count = await catalog.replace(db, payload.products)
    return CatalogUploadResult(ok=True, count=count)
