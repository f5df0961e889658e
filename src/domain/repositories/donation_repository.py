"""Donation and donor repository protocols."""

from typing import Protocol
from uuid import UUID

from domain.entities.donation import Business, Contact, Donation, DonationPage, DonationQuery


class IDonationRepository(Protocol):
    """Repository interface for Donation entities."""

    async def get(self, id: UUID) -> Donation | None:
        """Get a donation by ID."""
        ...

    async def find(
        self,
        query: DonationQuery,
        workspace_id: UUID | None = None,
        contact_id: UUID | None = None,
        business_id: UUID | None = None,
    ) -> DonationPage:
        """List donations matching every given scope and the query."""
        ...

    async def create(self, donation: Donation) -> Donation:
        """Create a new donation."""
        ...

    async def update(self, donation: Donation) -> Donation:
        """Persist amount/status changes on an existing donation."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a donation and return success status."""
        ...


class IDonorRepository(Protocol):
    """Repository interface for the contacts and businesses donations hang off."""

    async def get_contact(self, id: UUID) -> Contact | None:
        """Get a contact by ID."""
        ...

    async def get_business(self, id: UUID) -> Business | None:
        """Get a business by ID."""
        ...
