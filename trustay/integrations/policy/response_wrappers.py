from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel, Field, ValidationError

from trustay.integrations.contracts.interfaces import Page, PageMeta

T = TypeVar("T")


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload if payload is not None else {}


class PageMetaModel(BaseModel):
    page: int = 1
    limit: int = 0
    total: int = 0
    total_pages: int = Field(default=0, alias="totalPages")

    model_config = {"populate_by_name": True}


class PageEnvelopeModel(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    meta: PageMetaModel = Field(default_factory=PageMetaModel)
    next_cursor: Optional[str] = None


def unwrap_entity(raw: Any) -> Any:
    """`{data: X}` -> X, bare X -> X."""
    if isinstance(raw, dict) and "data" in raw and _looks_like_envelope(raw):
        return raw["data"]
    return raw


def normalize_entity_response(raw: Any, factory: Callable[[Dict[str, Any]], T]) -> T:
    entity = unwrap_entity(raw)
    if not isinstance(entity, dict):
        raise IntegrationResponseError(
            f"Expected an object in backend response, got {type(entity).__name__}.",
            payload=raw,
        )
    return factory(entity)


def normalize_list_response(raw: Any, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
    items = unwrap_entity(raw)
    if isinstance(items, dict):
        items = items.get("items") or items.get("data") or []
    if not isinstance(items, list):
        raise IntegrationResponseError("Expected a list in backend response.", payload=raw)
    return [factory(item) for item in items if isinstance(item, dict)]


def normalize_page(raw: Any, factory: Callable[[Dict[str, Any]], T]) -> Page[T]:
    """
    Accepts the three pagination shapes the backend uses:
    `{data, meta}`, `{data, pagination}` and flat `{data, page, limit, total, totalPages}`.
    A bare list is treated as a single page.
    """
    if isinstance(raw, list):
        items = [factory(i) for i in raw if isinstance(i, dict)]
        return Page(items=items, meta=PageMeta(page=1, limit=len(items), total=len(items), total_pages=1))
    if not isinstance(raw, dict):
        raise IntegrationResponseError("Expected a paginated object in backend response.", payload=raw)

    meta_raw = raw.get("meta") or raw.get("pagination")
    if not isinstance(meta_raw, dict):
        meta_raw = {k: raw[k] for k in ("page", "limit", "total", "totalPages") if k in raw}

    envelope = _build_model(
        PageEnvelopeModel,
        {
            "data": raw.get("data") or raw.get("items") or [],
            "meta": meta_raw,
            "next_cursor": raw.get("nextCursor"),
        },
        raw,
    )
    meta = envelope.meta
    return Page(
        items=[factory(item) for item in envelope.data],
        meta=PageMeta(page=meta.page, limit=meta.limit, total=meta.total, total_pages=meta.total_pages),
        next_cursor=envelope.next_cursor,
    )


def _looks_like_envelope(raw: Dict[str, Any]) -> bool:
    # entities carry an id; envelopes carry data plus at most a message/success flag
    return "id" not in raw


def _build_model(model_cls, values: Dict[str, Any], raw: Any):
    try:
        return model_cls(**values)
    except ValidationError as exc:
        raise IntegrationResponseError(
            f"Backend response failed validation for {model_cls.__name__}: {exc}",
            payload=raw,
        ) from exc
