"""
Region Routes
Region catalogue and region-owned groups and users
"""

from uuid import UUID
from fastapi import APIRouter, Depends
from attendance_api.auth import get_current_user, get_region_staff
from attendance_api.dependencies import get_region_service, get_scope_authorizer
from attendance_api.schemas.group import GroupResponse
from attendance_api.schemas.region import RegionResponse, RegionUserResponse
from attendance_api.services.region_service import RegionService
from attendance_api.services.scope_service import ScopeAuthorizer

router = APIRouter()


@router.get("", response_model=list[RegionResponse])
async def list_regions(
    current_user: dict = Depends(get_current_user),
    regions: RegionService = Depends(get_region_service)
):
    """All predefined regions (for dropdowns)"""
    return await regions.list_regions()


@router.get("/{region_id}", response_model=RegionResponse)
async def get_region(
    region_id: UUID,
    current_user: dict = Depends(get_region_staff),
    regions: RegionService = Depends(get_region_service)
):
    return await regions.get_region(region_id)


@router.get("/{region_id}/groups", response_model=list[GroupResponse])
async def list_region_groups(
    region_id: UUID,
    current_user: dict = Depends(get_region_staff),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    regions: RegionService = Depends(get_region_service)
):
    """Groups owned by a region (Super Admin, or that region's manager)"""
    await authorizer.authorize_region(current_user, region_id)
    return await regions.list_region_groups(region_id)


@router.get("/{region_id}/users", response_model=list[RegionUserResponse])
async def list_region_users(
    region_id: UUID,
    current_user: dict = Depends(get_region_staff),
    authorizer: ScopeAuthorizer = Depends(get_scope_authorizer),
    regions: RegionService = Depends(get_region_service)
):
    """Users owned by a region (Super Admin, or that region's manager)"""
    await authorizer.authorize_region(current_user, region_id)
    return await regions.list_region_users(region_id)
