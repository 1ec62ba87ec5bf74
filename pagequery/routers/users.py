from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from pagequery.database import get_session
from pagequery.models import User
from pagequery.dependencies import get_paginate_params
from pagequery.query.columns import ColumnWhitelist
from pagequery.query.params import PaginateParams
from pagequery.services.paginator import PaginationService
from pagequery.schemas.common import PaginatedResponse
from pagequery.schemas.responses import UserResponse

router = APIRouter()
service = PaginationService(
    User.__tablename__,
    ColumnWhitelist.of(
        filterable=["id", "name", "email", "age", "is_active", "created_at"],
        sortable=["id", "name", "age", "created_at"],
    ),
)


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    params: PaginateParams = Depends(get_paginate_params),
    session: AsyncSession = Depends(get_session),
):
    """Get users with `filter.<column>=<op>:<value>`, `orderBy=<column>:<dir>` and pagination."""
    page = await service.paginate(session, params)

    return PaginatedResponse(records=page.records, meta=page.meta)
