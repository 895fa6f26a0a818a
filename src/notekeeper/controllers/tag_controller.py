"""Tags and categories API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from notekeeper.config.database import get_db
from notekeeper.schemas.schemas import NameRequest, TagItem, CategoryItem
from notekeeper.services.tag_service import TagService, CategoryService
from notekeeper.middlewares.auth import get_current_user_id

router = APIRouter(prefix="/tags", tags=["Tags"])
category_router = APIRouter(prefix="/categories", tags=["Categories"])


# ============ Tags ============

@router.get("", response_model=List[TagItem])
async def list_tags(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """List tags."""
    return await TagService(db).list_tags(user_id)


@router.post("", response_model=TagItem, status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: NameRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a tag."""
    return await TagService(db).create_tag(user_id, request.name)


@router.get("/{tagId}", response_model=TagItem)
async def get_tag(
    tagId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    return await TagService(db).get_tag(tagId, user_id)


@router.patch("/{tagId}", response_model=TagItem)
async def rename_tag(
    tagId: str,
    request: NameRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Rename a tag."""
    return await TagService(db).update_tag(tagId, user_id, request.name)


@router.delete("/{tagId}")
async def delete_tag(
    tagId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Delete a tag."""
    await TagService(db).delete_tag(tagId, user_id)
    return {"success": True}


# ============ Categories ============

@category_router.get("", response_model=List[CategoryItem])
async def list_categories(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """List categories."""
    return await CategoryService(db).list_categories(user_id)


@category_router.post("", response_model=CategoryItem, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: NameRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a category."""
    return await CategoryService(db).create_category(user_id, request.name)


@category_router.get("/{categoryId}", response_model=CategoryItem)
async def get_category(
    categoryId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    return await CategoryService(db).get_category(categoryId, user_id)


@category_router.patch("/{categoryId}", response_model=CategoryItem)
async def rename_category(
    categoryId: str,
    request: NameRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Rename a category."""
    return await CategoryService(db).update_category(categoryId, user_id, request.name)


@category_router.delete("/{categoryId}")
async def delete_category(
    categoryId: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Delete a category."""
    await CategoryService(db).delete_category(categoryId, user_id)
    return {"success": True}
