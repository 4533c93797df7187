"""Vendor and vendor service catalog."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.models.vendor import Vendor, VendorService
from creditdesk.schemas.vendor import VendorCreate, VendorServiceCreate


class VendorCatalogService:
    """Service layer for vendors and the services they offer."""

    def __init__(self, db: AsyncSession):
        """Initialize vendor catalog service with database session."""
        self.db = db

    async def create_vendor(self, vendor_data: VendorCreate) -> Vendor:
        """
        Create a new vendor.

        Args:
            vendor_data: Vendor creation data

        Returns:
            Created vendor
        """
        vendor = Vendor(**vendor_data.model_dump(), is_active=True)

        self.db.add(vendor)
        await self.db.flush()
        await self.db.refresh(vendor)

        return vendor

    async def get_vendor(self, vendor_id: str) -> Vendor | None:
        """Get vendor by ID."""
        result = await self.db.execute(select(Vendor).where(Vendor.id == vendor_id))
        return result.scalar_one_or_none()

    async def list_vendors(self, include_inactive: bool = False) -> list[Vendor]:
        """
        List vendors by name.

        Args:
            include_inactive: Also return deactivated vendors

        Returns:
            List of vendors
        """
        query = select(Vendor)
        if not include_inactive:
            query = query.where(Vendor.is_active.is_(True))
        result = await self.db.execute(query.order_by(Vendor.name))
        return list(result.scalars().all())

    async def set_vendor_active(self, vendor_id: str, is_active: bool) -> Vendor:
        """
        Activate or deactivate a vendor.

        Balances and history are kept; inactive vendors are only hidden.

        Raises:
            ValueError: If vendor not found
        """
        vendor = await self.get_vendor(vendor_id)
        if not vendor:
            raise ValueError(f"Vendor {vendor_id} not found")

        vendor.is_active = is_active
        await self.db.flush()
        await self.db.refresh(vendor)
        return vendor

    async def create_service(self, service_data: VendorServiceCreate) -> VendorService:
        """
        Add a service to a vendor's catalog.

        Args:
            service_data: Vendor service creation data

        Returns:
            Created vendor service

        Raises:
            ValueError: If vendor not found
        """
        vendor = await self.get_vendor(service_data.vendor_id)
        if not vendor:
            raise ValueError(f"Vendor {service_data.vendor_id} not found")

        service = VendorService(**service_data.model_dump(), is_available=True)

        self.db.add(service)
        await self.db.flush()
        await self.db.refresh(service)

        return service

    async def list_services(self, vendor_id: str | None = None) -> list[tuple[VendorService, str]]:
        """
        List available vendor services with vendor names.

        Without a vendor filter only services of active vendors are returned.

        Args:
            vendor_id: Restrict to one vendor

        Returns:
            List of (service, vendor_name) tuples, ordered by vendor then service
        """
        query = (
            select(VendorService, Vendor.name)
            .join(Vendor, VendorService.vendor_id == Vendor.id)
            .where(VendorService.is_available.is_(True))
        )
        if vendor_id:
            query = query.where(VendorService.vendor_id == vendor_id)
        else:
            query = query.where(Vendor.is_active.is_(True))
        query = query.order_by(Vendor.name, VendorService.service_name)

        result = await self.db.execute(query)
        return [(service, name) for service, name in result.all()]
