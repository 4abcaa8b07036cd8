"""Page service — ownership-scoped CRUD over pages.

Learn: Every method takes the owner id from the authenticated identity.
Writes are single conditional statements:

    UPDATE pages SET ... WHERE id = :id AND owner_id = :owner
    DELETE FROM pages WHERE id = :id AND owner_id = :owner

If no row matches, the page either doesn't exist or belongs to someone
else. Both cases raise the same NotFoundOrForbidden, so a user can't
learn which page ids exist in other accounts. An id that isn't a base-10
integer, or won't fit in a signed 64-bit column, can never match a row
and gets the same answer.
"""

import re
from typing import Optional, Union

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pagevault.db.models import Page
from pagevault.errors import NotFoundOrForbidden, ValidationError

logger = structlog.get_logger()

MAX_PAGE_ID = 2**63 - 1
_PAGE_ID_RE = re.compile(r"-?[0-9]+")


def parse_page_id(raw: Union[int, str]) -> Optional[int]:
    """Return the id as an int, or None when no stored page could have it."""
    if isinstance(raw, str):
        if not _PAGE_ID_RE.fullmatch(raw):
            return None
        raw = int(raw)
    if not -MAX_PAGE_ID - 1 <= raw <= MAX_PAGE_ID:
        return None
    return raw


def _require_title(title: Optional[str]) -> None:
    if not title:
        raise ValidationError("Title is required.")


class PageService:
    """Business logic for pages, always scoped to one owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_pages(self, owner_id: int) -> list[Page]:
        result = await self.db.execute(
            select(Page).where(Page.owner_id == owner_id).order_by(Page.id)
        )
        return list(result.scalars().all())

    async def get_page(self, page_id: Union[int, str], owner_id: int) -> Page:
        pid = parse_page_id(page_id)
        if pid is None:
            raise NotFoundOrForbidden()
        result = await self.db.execute(
            select(Page).where(Page.id == pid, Page.owner_id == owner_id)
        )
        page = result.scalars().first()
        if page is None:
            raise NotFoundOrForbidden()
        return page

    async def create_page(
        self, owner_id: int, title: Optional[str], content: Optional[str] = None
    ) -> Page:
        _require_title(title)
        page = Page(title=title, content=content or "", owner_id=owner_id)
        self.db.add(page)
        await self.db.commit()
        logger.info("pages.created", page_id=page.id, owner_id=owner_id)
        return page

    async def update_page(
        self,
        page_id: Union[int, str],
        owner_id: int,
        title: Optional[str],
        content: Optional[str] = None,
    ) -> None:
        """Overwrite title and content. Missing content is stored as ""."""
        _require_title(title)
        pid = parse_page_id(page_id)
        if pid is None:
            raise NotFoundOrForbidden(
                "Page not found or you don't have permission to edit it."
            )
        result = await self.db.execute(
            update(Page)
            .where(Page.id == pid, Page.owner_id == owner_id)
            .values(title=title, content=content or "")
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundOrForbidden(
                "Page not found or you don't have permission to edit it."
            )
        await self.db.commit()
        logger.info("pages.updated", page_id=pid, owner_id=owner_id)

    async def delete_page(self, page_id: Union[int, str], owner_id: int) -> None:
        pid = parse_page_id(page_id)
        if pid is None:
            raise NotFoundOrForbidden(
                "Page not found or you don't have permission to delete it."
            )
        result = await self.db.execute(
            delete(Page).where(Page.id == pid, Page.owner_id == owner_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundOrForbidden(
                "Page not found or you don't have permission to delete it."
            )
        await self.db.commit()
        logger.info("pages.deleted", page_id=pid, owner_id=owner_id)
