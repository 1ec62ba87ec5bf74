from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from pagequery.database import get_session
from pagequery.models import Article
from pagequery.dependencies import get_paginate_params
from pagequery.query.columns import ColumnWhitelist
from pagequery.query.params import PaginateParams
from pagequery.services.paginator import PaginationService
from pagequery.schemas.common import PaginatedResponse
from pagequery.schemas.responses import ArticleResponse

router = APIRouter()
service = PaginationService(
    Article.__tablename__,
    ColumnWhitelist.of(
        filterable=["id", "title", "author_id", "views", "published", "created_at"],
        sortable=["id", "title", "views", "created_at"],
    ),
)


@router.get("", response_model=PaginatedResponse[ArticleResponse])
async def list_articles(
    params: PaginateParams = Depends(get_paginate_params),
    session: AsyncSession = Depends(get_session),
):
    """Get articles with filtering, sorting and pagination."""
    page = await service.paginate(session, params)

    return PaginatedResponse(records=page.records, meta=page.meta)
