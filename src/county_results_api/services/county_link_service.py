"""County link service -- CRUD and bulk save for county data source configuration."""

import uuid

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from county_results_api.models.county_link import CountyLink
from county_results_api.schemas.county_link import (
    BulkSaveResponse,
    CountyLinkCreateRequest,
    CountyLinkUpdateRequest,
)


async def create_link(session: AsyncSession, data: CountyLinkCreateRequest) -> CountyLink:
    """Store a new county link.

    Args:
        session: Database session.
        data: Validated link fields.

    Returns:
        The created CountyLink.
    """
    link = CountyLink(county_name=data.county_name, link=data.link, parse_method=data.parse_method)
    session.add(link)
    await session.commit()
    await session.refresh(link)
    logger.info(f"Created county link {link.id} ({link.county_name}, method={link.parse_method})")
    return link


async def get_link(session: AsyncSession, link_id: uuid.UUID) -> CountyLink | None:
    """Return a county link by id, or None if it does not exist."""
    return await session.get(CountyLink, link_id)


async def list_links(session: AsyncSession, *, parse_method: str | None = None) -> list[CountyLink]:
    """Return county links ordered by county name, optionally filtered by method.

    Args:
        session: Database session.
        parse_method: Only return links configured for this method.

    Returns:
        List of county links.
    """
    query = select(CountyLink).order_by(CountyLink.county_name, CountyLink.created_at)
    if parse_method is not None:
        query = query.where(CountyLink.parse_method == parse_method)
    result = await session.execute(query)
    links = list(result.scalars().all())
    logger.debug(f"Listed {len(links)} county links")
    return links


async def update_link(
    session: AsyncSession,
    link_id: uuid.UUID,
    data: CountyLinkUpdateRequest,
) -> CountyLink | None:
    """Apply a partial update to a county link.

    Returns:
        The updated link, or None if it does not exist.
    """
    link = await session.get(CountyLink, link_id)
    if link is None:
        return None
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(link, key, value)
    await session.commit()
    await session.refresh(link)
    logger.info(f"Updated county link {link.id}")
    return link


async def delete_link(session: AsyncSession, link_id: uuid.UUID) -> bool:
    """Delete a county link. Returns False when it does not exist.

    The county's results collection is left in place; use the admin cleanup
    to drop stored results.
    """
    link = await session.get(CountyLink, link_id)
    if link is None:
        return False
    await session.delete(link)
    await session.commit()
    logger.info(f"Deleted county link {link_id}")
    return True


async def bulk_create_links(
    session: AsyncSession,
    links: list[CountyLinkCreateRequest],
) -> BulkSaveResponse:
    """Save many county links, continuing past individual failures.

    Each link is committed on its own so one failed insert does not discard
    the others.

    Args:
        session: Database session.
        links: Validated link payloads.

    Returns:
        Counts of submitted and saved links plus one message per failure.
    """
    response = BulkSaveResponse(total_submitted=len(links), saved_count=0)
    for index, data in enumerate(links):
        try:
            session.add(CountyLink(county_name=data.county_name, link=data.link, parse_method=data.parse_method))
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.warning(f"Failed to save county link at index {index}: {exc}")
            response.errors.append(f"Failed to save link at index {index}: {exc}")
            continue
        response.saved_count += 1
    logger.info(f"Bulk saved {response.saved_count}/{response.total_submitted} county links")
    return response
