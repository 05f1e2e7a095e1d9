from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from ...core import Core
from ...enums import Namespace
from ...errors import NotFoundError, ValidationFailedError
from ...i18n import gettext as _
from ...utils import is_empty
from ..deps import get_core


class InstanceListResponse(BaseModel):
    success: bool = True
    items: list[dict[str, Any]]


class ChildResponse(BaseModel):
    success: bool = True
    child_id: str
    component: dict[str, Any]


class DeleteResponse(BaseModel):
    success: bool = True


def build_router(namespace: Namespace) -> APIRouter:
    router = APIRouter(prefix=f"/{namespace.value}s", tags=[f"{namespace.value}s"])

    @router.get("", response_model=InstanceListResponse)
    def list_instances(
        parent_id: Optional[str] = None,
        context: Optional[str] = None,
        section_id: Optional[str] = None,
        core: Core = Depends(get_core),
    ):
        instances = core.instances(namespace).list(
            parent_id=parent_id, context=context, section_id=section_id
        )
        return InstanceListResponse(items=[i.model_dump(mode="json") for i in instances])

    if namespace == Namespace.COMPONENT:

        @router.post("/with-defaults", status_code=201)
        def create_with_defaults(payload: dict[str, Any] = Body(...), core: Core = Depends(get_core)):
            missing = [name for name in ("id", "type") if is_empty(payload.get(name))]
            if missing:
                raise ValidationFailedError(
                    [_("Missing required field: {name}").format(name=name) for name in missing],
                    missing,
                )
            data = dict(payload)
            instance = core.instances(namespace).create_with_defaults(
                str(data.pop("type")), str(data.pop("id")), data
            )
            return instance.model_dump(mode="json")

        @router.post("/{instance_id}/children", status_code=201, response_model=ChildResponse)
        def add_child(
            instance_id: str,
            payload: Optional[dict[str, Any]] = Body(default=None),
            core: Core = Depends(get_core),
        ):
            store = core.instances(namespace)
            child_id = store.add_child(instance_id, payload or {})
            return ChildResponse(
                child_id=child_id, component=store.get(instance_id).model_dump(mode="json")
            )

        @router.delete("/{instance_id}/children/{child_id}", response_model=DeleteResponse)
        def remove_child(instance_id: str, child_id: str, core: Core = Depends(get_core)):
            if not core.instances(namespace).remove_child(instance_id, child_id):
                raise NotFoundError("Child", child_id)
            return DeleteResponse()

    @router.get("/{instance_id}")
    def get_instance(instance_id: str, core: Core = Depends(get_core)):
        return core.instances(namespace).get(instance_id).model_dump(mode="json")

    @router.post("", status_code=201)
    def create_instance(payload: dict[str, Any] = Body(...), core: Core = Depends(get_core)):
        return core.instances(namespace).create(payload).model_dump(mode="json")

    @router.put("/{instance_id}")
    def update_instance(
        instance_id: str, payload: dict[str, Any] = Body(...), core: Core = Depends(get_core)
    ):
        return core.instances(namespace).update(instance_id, payload).model_dump(mode="json")

    @router.delete("/{instance_id}", response_model=DeleteResponse)
    def delete_instance(instance_id: str, core: Core = Depends(get_core)):
        core.instances(namespace).delete(instance_id)
        return DeleteResponse()

    return router


routers = [build_router(namespace) for namespace in Namespace]
