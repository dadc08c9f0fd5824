# /teacherboard/routers/content_router.py

"""
CRUD endpoints for the content kinds a teacher can share with students:
notices, saved links, book contents and class-shared chalkboard content.

All four follow the same contract, so their routers are built by
`build_content_router`. Saved links get a few extra endpoints for the
educational quick-link list.
"""

from typing import Callable, List, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, status
from pydantic import BaseModel

from ..core.deps import get_current_teacher, get_document_store, teacher_from_token
from ..core.exceptions import AuthenticationError, ContentNotFoundError, DuplicateLinkError, ValidationError, WriteFailure
from ..models import content_model
from ..models.auth_model import TeacherAccount
from ..services import content_service
from ..services.document_store import DocumentStore
from .subscriptions import stream_snapshots

ManagerFactory = Callable[[DocumentStore, str], content_service.ContentManager]


def build_content_router(
    manager_factory: ManagerFactory,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    response_model: Type[BaseModel],
    extra_fields: dict = None,
) -> APIRouter:
    router = APIRouter()
    label = response_model.__name__

    def _not_found(e: ContentNotFoundError) -> HTTPException:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    def _write_failed(e: WriteFailure) -> HTTPException:
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    @router.get("", response_model=List[response_model], summary=f"List {label} Items")
    def list_items(
        store: DocumentStore = Depends(get_document_store),
        current_teacher: TeacherAccount = Depends(get_current_teacher),
    ):
        return manager_factory(store, current_teacher.uid).list()

    @router.post("", response_model=response_model, status_code=status.HTTP_201_CREATED, summary=f"Create a {label}")
    def create_item(
        item_create: create_model,
        store: DocumentStore = Depends(get_document_store),
        current_teacher: TeacherAccount = Depends(get_current_teacher),
    ):
        fields = {**item_create.model_dump(mode="json"), **(extra_fields or {})}
        try:
            return manager_factory(store, current_teacher.uid).create(fields)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        except WriteFailure as e:
            raise _write_failed(e)

    @router.put("/{item_id}", response_model=response_model, summary=f"Update a {label}")
    def update_item(
        item_id: str,
        item_update: update_model,
        store: DocumentStore = Depends(get_document_store),
        current_teacher: TeacherAccount = Depends(get_current_teacher),
    ):
        try:
            return manager_factory(store, current_teacher.uid).update(item_id, item_update.model_dump(mode="json", exclude_none=True))
        except ContentNotFoundError as e:
            raise _not_found(e)
        except WriteFailure as e:
            raise _write_failed(e)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    @router.put("/{item_id}/active", response_model=response_model, summary=f"Show or Hide a {label}")
    def set_item_active(
        item_id: str,
        toggle: content_model.ActiveToggle,
        store: DocumentStore = Depends(get_document_store),
        current_teacher: TeacherAccount = Depends(get_current_teacher),
    ):
        try:
            return manager_factory(store, current_teacher.uid).set_active(item_id, toggle.isActive)
        except ContentNotFoundError as e:
            raise _not_found(e)
        except WriteFailure as e:
            raise _write_failed(e)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete a {label}")
    def delete_item(
        item_id: str,
        store: DocumentStore = Depends(get_document_store),
        current_teacher: TeacherAccount = Depends(get_current_teacher),
    ):
        try:
            manager_factory(store, current_teacher.uid).remove(item_id)
        except ContentNotFoundError as e:
            raise _not_found(e)
        except WriteFailure as e:
            raise _write_failed(e)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.websocket("/subscribe")
    async def subscribe_to_items(
        websocket: WebSocket,
        token: str = Query(default=""),
        store: DocumentStore = Depends(get_document_store),
    ):
        try:
            teacher = teacher_from_token(token)
        except AuthenticationError:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        await websocket.accept()
        manager = manager_factory(store, teacher.uid)
        await stream_snapshots(websocket, manager.subscribe, manager.kind.collection)

    return router


def _manager(kind: content_service.ContentKind) -> ManagerFactory:
    return lambda store, teacher_id: content_service.ContentManager(store, teacher_id, kind)


notices_router = build_content_router(
    _manager(content_service.NOTICES),
    content_model.NoticeCreate, content_model.NoticeUpdate, content_model.Notice,
)

book_contents_router = build_content_router(
    _manager(content_service.BOOK_CONTENTS),
    content_model.BookContentCreate, content_model.BookContentUpdate, content_model.BookContent,
)

class_content_router = build_content_router(
    _manager(content_service.CLASS_CONTENT),
    content_model.ClassContentCreate, content_model.ClassContentUpdate, content_model.ClassContent,
    extra_fields={"type": "chalkboard"},
)

links_router = build_content_router(
    content_service.LinkManager,
    content_model.LinkCreate, content_model.LinkUpdate, content_model.SavedLink,
)


# --- Quick links (/api/links/...) ---

@links_router.get("/quick/defaults", response_model=List[content_model.QuickLinkCreate], summary="List the Educational Quick Links")
def list_default_quick_links(current_teacher: TeacherAccount = Depends(get_current_teacher)):
    return content_service.DEFAULT_EDUCATIONAL_SITES


@links_router.post("/quick", response_model=content_model.SavedLink, status_code=status.HTTP_201_CREATED, summary="Save a Quick Link")
def add_quick_link(
    site: content_model.QuickLinkCreate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return content_service.LinkManager(store, current_teacher.uid).add_quick_link(site.model_dump())
    except DuplicateLinkError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@links_router.post("/quick/seed", response_model=content_model.SeedResult, summary="Save All Default Quick Links")
def seed_default_links(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return {"added": content_service.LinkManager(store, current_teacher.uid).seed_default_links()}
