"""
Menu router.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status

from shared.utils.schemas import CreateMenuItemRequest, MenuItemOutput, UpdateMenuItemRequest
from pos_api.repositories import DataStore
from pos_api.routers._common import domain_errors, get_store, schedule_mirror_push
from pos_api.services.domain import MenuService


router = APIRouter(prefix="/api/menu", tags=["menu"])


@router.get("", response_model=list[MenuItemOutput])
def list_menu(store: DataStore = Depends(get_store)):
    """Full menu ordered by category, then name."""
    with domain_errors():
        return MenuService(store).list_menu()


@router.get("/by-category", response_model=dict[str, list[MenuItemOutput]])
def menu_by_category(store: DataStore = Depends(get_store)):
    """Available items grouped by category for order entry."""
    with domain_errors():
        return MenuService(store).menu_by_category()


@router.post("", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def add_menu_item(
    body: CreateMenuItemRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    with domain_errors():
        item = MenuService(store).add_menu_item(**body.model_dump())
    schedule_mirror_push(background_tasks)
    return item


@router.patch("/{item_id}", response_model=MenuItemOutput)
def update_menu_item(
    item_id: str,
    body: UpdateMenuItemRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    """Partial update. Existing orders keep the name and price they were placed with."""
    with domain_errors():
        item = MenuService(store).update_menu_item(item_id, body.model_dump(exclude_unset=True))
    schedule_mirror_push(background_tasks)
    return item
