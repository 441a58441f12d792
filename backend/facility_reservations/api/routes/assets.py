"""
Asset catalog endpoints used by the venue/vehicle pickers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from facility_reservations.api.deps import get_catalog
from facility_reservations.api.responses import asset_response
from facility_reservations.domain.errors import AssetNotFoundError
from facility_reservations.domain.models import AssetType
from facility_reservations.schemas.asset import AssetResponse
from facility_reservations.stores.interfaces import AssetCatalog

router = APIRouter(prefix="/assets", tags=["Assets"])


@router.get("/", response_model=list[AssetResponse])
def list_assets_endpoint(
    asset_type: Optional[AssetType] = Query(None, alias="type"),
    catalog: AssetCatalog = Depends(get_catalog),
):
    return [asset_response(a) for a in catalog.list_assets(asset_type)]


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset_endpoint(
    asset_id: int,
    catalog: AssetCatalog = Depends(get_catalog),
):
    asset = catalog.get_asset(asset_id)
    if asset is None:
        raise AssetNotFoundError(asset_id)
    return asset_response(asset)
