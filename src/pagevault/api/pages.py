"""Page API routes.

Learn: Every route depends on get_current_user, so a request without a
valid bearer token is rejected before any of this code runs. The owner
id passed to PageService always comes from the token.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pagevault.auth.dependencies import CurrentIdentity, get_current_user
from pagevault.db.engine import get_db
from pagevault.schemas.page import MessageResponse, PageCreated, PageRead, PageWrite
from pagevault.services.page_service import PageService

router = APIRouter(prefix="/pages")


def _svc(db: AsyncSession = Depends(get_db)) -> PageService:
    return PageService(db)


@router.get("", response_model=list[PageRead])
async def list_pages(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PageService = Depends(_svc),
):
    return await svc.list_pages(identity.user_id)


@router.post("", response_model=PageCreated, status_code=201)
async def create_page(
    body: PageWrite,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PageService = Depends(_svc),
):
    page = await svc.create_page(identity.user_id, body.title, body.content)
    return PageCreated(
        id=page.id,
        title=page.title,
        content=page.content,
        owner_id=page.owner_id,
    )


@router.get("/{page_id}", response_model=PageRead)
async def get_page(
    page_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PageService = Depends(_svc),
):
    return await svc.get_page(page_id, identity.user_id)


@router.put("/{page_id}", response_model=MessageResponse)
async def update_page(
    page_id: str,
    body: PageWrite,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PageService = Depends(_svc),
):
    await svc.update_page(page_id, identity.user_id, body.title, body.content)
    return MessageResponse(message="Page updated successfully.")


@router.delete("/{page_id}", status_code=204)
async def delete_page(
    page_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PageService = Depends(_svc),
):
    await svc.delete_page(page_id, identity.user_id)
    return Response(status_code=204)
