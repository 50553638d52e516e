"""API v1 router."""
from fastapi import APIRouter

from docatlas.api.v1 import documents, search, tagging

api_router: APIRouter = APIRouter()
api_router.include_router(documents.router, tags=["documents"])
api_router.include_router(tagging.router, tags=["tagging"])
api_router.include_router(search.router, tags=["search"])
