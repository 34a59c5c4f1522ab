"""
Shared CRUD routes for the entity plugins. Each plugin's get_router() calls
add_crud_routes() and then adds its own read views.

Routes (relative to the plugin prefix):
  GET    /data          list
  GET    /data/{id}     one record
  POST   /data          create (201)
  PATCH  /data/{id}     partial update
  DELETE /data/{id}     delete, returns {"id": id}
"""
from typing import Any, Callable, List, Type

from fastapi import APIRouter, status
from pydantic import BaseModel


class DeletedResponse(BaseModel):
    """Response for DELETE /data/{id}."""

    id: int


def add_crud_routes(
    router: APIRouter,
    get_store: Callable[[], Any],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    response_model: Type[BaseModel],
    to_response: Callable[[Any], BaseModel],
) -> None:
    """Register list/get/create/update/delete on router for the store returned by get_store()."""

    @router.get("/data", response_model=List[response_model])
    def list_records() -> List[Any]:
        return [to_response(entity) for entity in get_store().list()]

    @router.get("/data/{record_id}", response_model=response_model)
    def get_record(record_id: int) -> Any:
        return to_response(get_store().get(record_id))

    @router.post("/data", response_model=response_model, status_code=status.HTTP_201_CREATED)
    def create_record(payload: create_model) -> Any:  # type: ignore[valid-type]
        return to_response(get_store().create(payload.model_dump()))

    @router.patch("/data/{record_id}", response_model=response_model)
    def update_record(record_id: int, payload: update_model) -> Any:  # type: ignore[valid-type]
        return to_response(get_store().update(record_id, payload.model_dump(exclude_unset=True)))

    @router.delete("/data/{record_id}", response_model=DeletedResponse)
    def delete_record(record_id: int) -> DeletedResponse:
        return DeletedResponse(id=get_store().delete(record_id))
