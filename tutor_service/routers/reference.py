from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared.errors import NotFoundError, create_success_response
from reference import NotationCatalog, VocabularyGuide, get_notation_catalog, get_vocabulary_guide


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api/reference", tags=["reference"])

    @router.get("/notation")
    async def search_notation(
        q: str = Query("", max_length=200),
        category: Optional[str] = None,
        catalog: NotationCatalog = Depends(get_notation_catalog),
    ):
        results = catalog.search(q, category)
        return create_success_response(
            {"notations": [entry.model_dump(by_alias=True) for entry in results], "total": len(results)}
        )

    @router.get("/notation/categories")
    async def notation_categories(catalog: NotationCatalog = Depends(get_notation_catalog)):
        return create_success_response({"categories": catalog.categories()})

    @router.get("/notation/{notation_id}")
    async def get_notation(notation_id: str, catalog: NotationCatalog = Depends(get_notation_catalog)):
        entry = catalog.get(notation_id)
        if entry is None:
            raise NotFoundError("Notation")
        return create_success_response(entry.model_dump(by_alias=True))

    @router.get("/vocabulary")
    async def search_vocabulary(
        q: str = Query("", max_length=200),
        category: Optional[str] = None,
        guide: VocabularyGuide = Depends(get_vocabulary_guide),
    ):
        results = guide.search(q, category)
        return create_success_response(
            {"words": [entry.model_dump(by_alias=True) for entry in results], "total": len(results)}
        )

    @router.get("/vocabulary/categories")
    async def vocabulary_categories(guide: VocabularyGuide = Depends(get_vocabulary_guide)):
        categories = [{"key": key, "name": name} for key, name in guide.categories().items()]
        return create_success_response({"categories": categories})

    return router
