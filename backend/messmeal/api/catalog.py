from fastapi import APIRouter, Depends

from messmeal.context import AppContext, get_context

router = APIRouter()


@router.get("/catalog")
def get_catalog(context: AppContext = Depends(get_context)) -> list[dict]:
    """The selectable items the selection sessions price against, grouped by category."""
    return context.catalog.as_dict()
