"""SQLAlchemy implementation of Donation and donor repositories."""

import operator
from collections.abc import Callable
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.donation import (
    Business,
    Contact,
    Donation,
    DonationFilter,
    DonationPage,
    DonationQuery,
    FilterOperator,
    SortDirection,
)
from infrastructure.database.models import BusinessModel, ContactModel, DonationModel

_COLUMNS = {
    "amount": DonationModel.amount,
    "status": DonationModel.status,
    "payment_type": DonationModel.payment_type,
    "notes": DonationModel.notes,
    "created_at": DonationModel.created_at,
    "updated_at": DonationModel.updated_at,
}


_OPERATORS: dict[FilterOperator, Callable[[Any, Any], ColumnElement[bool]]] = {
    FilterOperator.EQ: operator.eq,
    FilterOperator.NE: operator.ne,
    FilterOperator.GT: operator.gt,
    FilterOperator.GTE: operator.ge,
    FilterOperator.LT: operator.lt,
    FilterOperator.LTE: operator.le,
    FilterOperator.CONTAINS: lambda column, value: column.ilike(f"%{value}%"),
}


def _filter_clause(flt: DonationFilter) -> ColumnElement[bool]:
    return _OPERATORS[flt.operator](_COLUMNS[flt.field], flt.value)


class SQLAlchemyDonationRepository:
    """SQLAlchemy implementation of IDonationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Donation | None:
        """Get a donation by ID."""
        stmt = select(DonationModel).where(DonationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find(
        self,
        query: DonationQuery,
        workspace_id: UUID | None = None,
        contact_id: UUID | None = None,
        business_id: UUID | None = None,
    ) -> DonationPage:
        """List donations matching every given scope, then search/filter/sort/page."""
        stmt = self._apply_query(
            select(DonationModel), query, workspace_id, contact_id, business_id
        )

        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self._session.execute(count_stmt)).scalar_one()

        if query.page is not None:
            stmt = stmt.offset(query.offset).limit(query.page_size)

        result = await self._session.execute(stmt)
        return DonationPage(
            items=[self._to_entity(model) for model in result.scalars()],
            total=total,
            page=query.page,
            page_size=query.page_size if query.page is not None else None,
        )

    async def create(self, donation: Donation) -> Donation:
        """Create a new donation."""
        model = self._to_model(donation)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, donation: Donation) -> Donation:
        """Persist amount/status changes on an existing donation."""
        stmt = select(DonationModel).where(DonationModel.id == donation.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Donation {donation.id} not found")

        model.amount = donation.amount
        model.status = donation.status
        model.updated_at = donation.updated_at

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a donation."""
        stmt = select(DonationModel).where(DonationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _apply_query(
        self,
        stmt: Select[tuple[DonationModel]],
        query: DonationQuery,
        workspace_id: UUID | None,
        contact_id: UUID | None,
        business_id: UUID | None,
    ) -> Select[tuple[DonationModel]]:
        if workspace_id is not None:
            stmt = stmt.where(DonationModel.workspace_id == workspace_id)
        if contact_id is not None:
            stmt = stmt.where(DonationModel.contact_id == contact_id)
        if business_id is not None:
            stmt = stmt.where(DonationModel.business_id == business_id)

        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(
                or_(
                    DonationModel.notes.ilike(pattern),
                    DonationModel.status.ilike(pattern),
                    DonationModel.payment_type.ilike(pattern),
                )
            )

        for flt in query.filters:
            stmt = stmt.where(_filter_clause(flt))

        order_by = [
            _COLUMNS[s.field].desc() if s.direction == SortDirection.DESC else _COLUMNS[s.field].asc()
            for s in query.sort
        ]
        if not order_by:
            order_by = [DonationModel.created_at.desc()]
        # Stable paging needs a unique tie-breaker
        return stmt.order_by(*order_by, DonationModel.id)

    def _to_entity(self, model: DonationModel) -> Donation:
        """Convert ORM model to domain entity."""
        return Donation(
            id=model.id,
            workspace_id=model.workspace_id,
            contact_id=model.contact_id,
            business_id=model.business_id,
            amount=model.amount,
            status=model.status,
            notes=model.notes,
            payment_type=model.payment_type,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Donation) -> DonationModel:
        """Convert domain entity to ORM model."""
        return DonationModel(
            id=entity.id,
            workspace_id=entity.workspace_id,
            contact_id=entity.contact_id,
            business_id=entity.business_id,
            amount=entity.amount,
            status=entity.status,
            notes=entity.notes,
            payment_type=entity.payment_type,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class SQLAlchemyDonorRepository:
    """SQLAlchemy implementation of IDonorRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_contact(self, id: UUID) -> Contact | None:
        """Get a contact by ID."""
        stmt = select(ContactModel).where(ContactModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        return Contact(id=model.id, workspace_id=model.workspace_id, name=model.name)

    async def get_business(self, id: UUID) -> Business | None:
        """Get a business by ID."""
        stmt = select(BusinessModel).where(BusinessModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        return Business(id=model.id, workspace_id=model.workspace_id, name=model.name)
