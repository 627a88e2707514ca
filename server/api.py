"""FastAPI server exposing the closet pages to a local browser front end."""

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, ValidationError

from closet_app.app import EmptyCombinationError, ItemNotFoundError, SmartClosetApp
from closet_app.logging_config import configure_logging


class ItemRequest(BaseModel):
    """Item editor form payload."""

    category: str | None = None
    color: str | None = None
    notes: str | None = None
    image_preview: str | None = Field(None, alias="imagePreview", description="Image as a data URL")

    model_config = {"populate_by_name": True}


class CombinationCreateRequest(BaseModel):
    """Combination builder payload."""

    name: str = ""
    tags: str | list[str] = Field("", description="Comma separated string or list of tags")
    item_ids: list[str] = Field(default_factory=list, alias="items")

    model_config = {"populate_by_name": True}


def create_app(closet: SmartClosetApp | None = None) -> FastAPI:
    """Build the API around one closet instance."""

    closet_app = closet or SmartClosetApp()
    api = FastAPI(title="Smart Closet", version="0.1.0")
    api.state.closet = closet_app

    @api.get("/healthz")
    async def healthcheck() -> dict:
        return {
            "status": "ok",
            "service": "smart-closet",
            "environment": closet_app.config.environment or "local",
            "storage": closet_app.config.storage_backend,
        }

    @api.get("/dashboard")
    async def dashboard() -> dict:
        return closet_app.dashboard()

    @api.get("/items")
    async def list_items(search: str = "", category: str = "") -> dict:
        return closet_app.list_items(search_term=search, category=category)

    @api.get("/items/{item_id}")
    async def get_item(item_id: str) -> dict:
        item = closet_app.load_item_for_edit(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail="Item not found")
        return item

    @api.post("/items", status_code=201)
    async def create_item(request: ItemRequest) -> dict:
        return _save_item(closet_app, request, None)

    @api.put("/items/{item_id}")
    async def update_item(item_id: str, request: ItemRequest) -> dict:
        """Merge the fields the client sent into the stored item."""

        return _save_item(closet_app, request, item_id)

    @api.delete("/items/{item_id}")
    async def delete_item(item_id: str) -> dict:
        if not closet_app.remove_item(item_id):
            raise HTTPException(status_code=404, detail="Item not found")
        return {"deleted": item_id}

    @api.get("/combinations")
    async def list_combinations() -> list:
        return closet_app.list_combinations()

    @api.get("/combinations/builder")
    async def combination_builder() -> dict:
        return closet_app.combination_builder()

    @api.post("/combinations", status_code=201)
    async def create_combination(request: CombinationCreateRequest) -> dict:
        try:
            return closet_app.create_combination(
                name=request.name, tags=request.tags, item_ids=request.item_ids
            )
        except EmptyCombinationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @api.delete("/combinations/{combination_id}")
    async def delete_combination(combination_id: str) -> dict:
        if not closet_app.remove_combination(combination_id):
            raise HTTPException(status_code=404, detail="Combination not found")
        return {"deleted": combination_id}

    return api


def _save_item(closet_app: SmartClosetApp, request: ItemRequest, item_id: str | None) -> dict:
    fields = request.model_dump(exclude={"image_preview"}, exclude_unset=True)
    try:
        return closet_app.save_item(fields, item_id=item_id, image_preview=request.image_preview)
    except ItemNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False, include_input=False)) from exc


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    configure_logging()
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="127.0.0.1", port=8080, reload=False)
