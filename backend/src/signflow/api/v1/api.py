from fastapi import APIRouter

from signflow.api.v1.endpoints import auth, document, query

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(document.router, prefix="/documents")
api_router.include_router(query.router, prefix="/query")
