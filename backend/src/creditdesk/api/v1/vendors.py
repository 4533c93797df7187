"""Vendor and vendor service API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.models.vendor import VendorService as VendorServiceRow
from creditdesk.schemas.vendor import (
    Vendor,
    VendorCreate,
    VendorService,
    VendorServiceCreate,
    VendorStatusUpdate,
)
from creditdesk.services.vendor_service import VendorCatalogService
from creditdesk.state import VENDOR_SERVICES, VENDORS, AppState

router = APIRouter(tags=["Vendors"])


def with_vendor_name(rows: list[tuple[VendorServiceRow, str]]) -> list[VendorService]:
    """Build vendor service responses from (service, vendor_name) rows."""
    return [
        VendorService.model_validate(service).model_copy(update={"vendor_name": name})
        for service, name in rows
    ]


@router.get("/vendors", response_model=list[Vendor])
async def list_vendors(
    include_inactive: bool = Query(False, description="Also list deactivated vendors"),
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> list[Vendor]:
    """List vendors by name."""
    service = VendorCatalogService(db)

    async def load() -> list[Vendor]:
        return [Vendor.model_validate(v) for v in await service.list_vendors(include_inactive)]

    if include_inactive:
        return await load()
    return await state.get(VENDORS, load)


@router.post("/vendors", response_model=Vendor, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    vendor_data: VendorCreate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> Vendor:
    """Create a new vendor."""
    vendor = await VendorCatalogService(db).create_vendor(vendor_data)
    await db.commit()

    state.mutated("vendor_changed")
    return vendor


@router.put("/vendors/{vendor_id}/status", response_model=Vendor)
async def set_vendor_status(
    vendor_id: str,
    status_data: VendorStatusUpdate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> Vendor:
    """Activate or deactivate a vendor. History and balances are kept."""
    service = VendorCatalogService(db)

    try:
        vendor = await service.set_vendor_active(vendor_id, status_data.is_active)
        await db.commit()
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    state.mutated("vendor_changed")
    return vendor


@router.get("/vendor-services", response_model=list[VendorService])
async def list_vendor_services(
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> list[VendorService]:
    """Available services of active vendors."""

    async def load() -> list[VendorService]:
        return with_vendor_name(await VendorCatalogService(db).list_services())

    return await state.get(VENDOR_SERVICES, load)


@router.get("/vendor-services/{vendor_id}", response_model=list[VendorService])
async def list_services_for_vendor(
    vendor_id: str,
    db: AsyncSession = Depends(get_db),
) -> list[VendorService]:
    """Available services of one vendor."""
    return with_vendor_name(await VendorCatalogService(db).list_services(vendor_id))


@router.post("/vendor-services", response_model=VendorService, status_code=status.HTTP_201_CREATED)
async def create_vendor_service(
    service_data: VendorServiceCreate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> VendorService:
    """Add a service to a vendor's catalog."""
    service = VendorCatalogService(db)

    try:
        vendor_service = await service.create_service(service_data)
        await db.commit()
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    state.mutated("vendor_service_changed")
    return vendor_service
