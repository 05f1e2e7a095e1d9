from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from ...consts import FILTER_TYPE_CONFIG_RESPONSE, REQUIRED_TYPE_FIELDS
from ...core import Core
from ...enums import Namespace
from ...errors import DuplicateRegistrationError, NotFoundError, ValidationFailedError
from ...i18n import gettext as _
from ...utils import is_empty
from ..deps import get_core

TYPE_PREFIXES = {
    Namespace.FIELD: "/field-types",
    Namespace.COMPONENT: "/component-types",
    Namespace.SECTION: "/section-types",
}


class TypeListResponse(BaseModel):
    success: bool = True
    types: list[dict[str, Any]]


class DeleteResponse(BaseModel):
    success: bool = True


def build_router(namespace: Namespace) -> APIRouter:
    router = APIRouter(prefix=TYPE_PREFIXES[namespace], tags=[f"{namespace.value}-types"])

    @router.get("", response_model=TypeListResponse)
    def list_types(core: Core = Depends(get_core)):
        types = core.resolver(namespace).list_types()
        return TypeListResponse(types=[t.model_dump(mode="json") for t in types])

    @router.get("/{type_id}")
    def get_type(type_id: str, core: Core = Depends(get_core)):
        return core.resolver(namespace).resolve(type_id).model_dump(mode="json")

    @router.post("", status_code=201)
    def create_type(payload: dict[str, Any] = Body(...), core: Core = Depends(get_core)):
        missing = [name for name in REQUIRED_TYPE_FIELDS if is_empty(payload.get(name))]
        if missing:
            raise ValidationFailedError(
                [_("Missing required field: {name}").format(name=name) for name in missing],
                missing,
            )

        type_id = str(payload["id"])
        resolver = core.resolver(namespace)
        if resolver.exists(type_id):
            raise DuplicateRegistrationError(
                f"{namespace.value.capitalize()} type already exists: {type_id}"
            )
        return resolver.save_override(type_id, payload).model_dump(mode="json")

    @router.put("/{type_id}")
    def update_type(
        type_id: str, payload: dict[str, Any] = Body(...), core: Core = Depends(get_core)
    ):
        resolver = core.resolver(namespace)
        if not resolver.exists(type_id):
            raise NotFoundError(f"{namespace.value.capitalize()} type", type_id)
        record = resolver.get_override(type_id) or {}
        record.update(payload)
        return resolver.save_override(type_id, record).model_dump(mode="json")

    @router.delete("/{type_id}", response_model=DeleteResponse)
    def delete_type(type_id: str, core: Core = Depends(get_core)):
        core.resolver(namespace).delete_override(type_id)
        return DeleteResponse()

    @router.get("/{type_id}/config")
    def get_type_config(type_id: str, core: Core = Depends(get_core)):
        response = core.config_fields(namespace, type_id).model_dump(mode="json")
        return core.hooks.apply_filter(
            FILTER_TYPE_CONFIG_RESPONSE.format(namespace=namespace.value), response, type_id
        )

    return router


routers = [build_router(namespace) for namespace in Namespace]
