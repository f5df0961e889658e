"""Donation service layer with business logic."""

import logging
from collections.abc import Callable
from decimal import Decimal
from uuid import UUID

from core.exceptions import (
    BusinessNotFoundError,
    ContactNotFoundError,
    DonationNotFoundError,
    InsufficientPermissionsError,
    NotAMemberError,
)
from domain.entities.donation import Business, Contact, Donation, DonationPage, DonationQuery
from domain.entities.workspace import WorkspaceRole, has_permission
from domain.repositories.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


class DonationService:
    """Service layer for Donation business logic.

    Every donation is scoped to the workspace of its donor. Any member may
    read, Basic User+ may create and update, Admin+ may delete.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    # --- Listing ---

    async def list_for_contact(
        self, contact_id: UUID, user_id: UUID, query: DonationQuery
    ) -> DonationPage:
        """List donations made by a contact."""
        async with self._uow_factory() as uow:
            contact = await self._get_contact(uow, contact_id, user_id, WorkspaceRole.VOLUNTEER)
            return await uow.donations.find(  # type: ignore[no-any-return]
                query, workspace_id=contact.workspace_id, contact_id=contact_id
            )

    async def list_for_business(
        self, business_id: UUID, user_id: UUID, query: DonationQuery
    ) -> DonationPage:
        """List donations made by a business."""
        async with self._uow_factory() as uow:
            business = await self._get_business(
                uow, business_id, user_id, WorkspaceRole.VOLUNTEER
            )
            return await uow.donations.find(  # type: ignore[no-any-return]
                query, workspace_id=business.workspace_id, business_id=business_id
            )

    async def list_for_workspace(
        self, workspace_id: UUID, user_id: UUID, query: DonationQuery
    ) -> DonationPage:
        """List every donation in a workspace."""
        async with self._uow_factory() as uow:
            member = await uow.workspaces.get_membership(workspace_id, user_id)
            if not member:
                raise NotAMemberError(str(workspace_id))
            return await uow.donations.find(query, workspace_id=workspace_id)  # type: ignore[no-any-return]

    # --- Mutations ---

    async def create_for_contact(
        self,
        contact_id: UUID,
        user_id: UUID,
        amount: Decimal,
        status: str,
        notes: str | None = None,
        payment_type: str | None = None,
    ) -> Donation:
        """Record a donation from a contact."""
        async with self._uow_factory() as uow:
            contact = await self._get_contact(uow, contact_id, user_id, WorkspaceRole.BASIC_USER)
            donation = Donation(
                workspace_id=contact.workspace_id,
                contact_id=contact.id,
                amount=amount,
                status=status,
                notes=notes,
                payment_type=payment_type,
            )
            created = await uow.donations.create(donation)
            await uow.commit()
            logger.info("Donation %s created for contact %s", created.id, contact_id)
            return created  # type: ignore[no-any-return]

    async def create_for_business(
        self,
        business_id: UUID,
        user_id: UUID,
        amount: Decimal,
        status: str,
        notes: str | None = None,
        payment_type: str | None = None,
    ) -> Donation:
        """Record a donation from a business."""
        async with self._uow_factory() as uow:
            business = await self._get_business(
                uow, business_id, user_id, WorkspaceRole.BASIC_USER
            )
            donation = Donation(
                workspace_id=business.workspace_id,
                business_id=business.id,
                amount=amount,
                status=status,
                notes=notes,
                payment_type=payment_type,
            )
            created = await uow.donations.create(donation)
            await uow.commit()
            logger.info("Donation %s created for business %s", created.id, business_id)
            return created  # type: ignore[no-any-return]

    async def update(
        self,
        donation_id: UUID,
        user_id: UUID,
        amount: Decimal | None = None,
        status: str | None = None,
    ) -> Donation:
        """Partially update a donation's amount and/or status."""
        async with self._uow_factory() as uow:
            donation = await self._get_donation(uow, donation_id, user_id, WorkspaceRole.BASIC_USER)
            donation.apply_update(amount=amount, status=status)
            updated = await uow.donations.update(donation)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def delete(self, donation_id: UUID, user_id: UUID) -> bool:
        """Delete a donation. Requires Admin+ role."""
        async with self._uow_factory() as uow:
            await self._get_donation(uow, donation_id, user_id, WorkspaceRole.ADMIN)
            deleted = await uow.donations.delete(donation_id)
            await uow.commit()
            logger.info("Donation %s deleted by %s", donation_id, user_id)
            return deleted  # type: ignore[no-any-return]

    # --- Internal helpers ---

    async def _require_role(
        self,
        uow: IUnitOfWork,
        workspace_id: UUID,
        user_id: UUID,
        required_role: WorkspaceRole,
    ) -> bool:
        """Return False for non-members, raise if the member's role is too low."""
        member = await uow.workspaces.get_membership(workspace_id, user_id)
        if not member:
            return False
        if not has_permission(member.role, required_role):
            raise InsufficientPermissionsError(required_role.label)
        return True

    async def _get_contact(
        self, uow: IUnitOfWork, contact_id: UUID, user_id: UUID, required_role: WorkspaceRole
    ) -> Contact:
        contact = await uow.donors.get_contact(contact_id)
        # Contacts in foreign workspaces are reported as missing
        if not contact or not await self._require_role(
            uow, contact.workspace_id, user_id, required_role
        ):
            raise ContactNotFoundError(str(contact_id))
        return contact

    async def _get_business(
        self, uow: IUnitOfWork, business_id: UUID, user_id: UUID, required_role: WorkspaceRole
    ) -> Business:
        business = await uow.donors.get_business(business_id)
        if not business or not await self._require_role(
            uow, business.workspace_id, user_id, required_role
        ):
            raise BusinessNotFoundError(str(business_id))
        return business

    async def _get_donation(
        self, uow: IUnitOfWork, donation_id: UUID, user_id: UUID, required_role: WorkspaceRole
    ) -> Donation:
        donation = await uow.donations.get(donation_id)
        if not donation or not await self._require_role(
            uow, donation.workspace_id, user_id, required_role
        ):
            raise DonationNotFoundError(str(donation_id))
        return donation
