from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...consts import DEFAULT_CONTEXT
from ...core import Core
from ..deps import get_core

router = APIRouter(prefix="/meta", tags=["meta"])


class MetaValueRequest(BaseModel):
    value: Any = None


class MetaValueResponse(BaseModel):
    success: bool = True
    object_type: str
    object_id: str
    meta_key: str
    context: str
    value: Any = None


@router.get("/{object_type}/{object_id}/{meta_key}", response_model=MetaValueResponse)
def get_meta(
    object_type: str,
    object_id: str,
    meta_key: str,
    context: str = DEFAULT_CONTEXT,
    core: Core = Depends(get_core),
):
    value = core.meta_store.get_meta(object_id, object_type, meta_key, context)
    return MetaValueResponse(
        object_type=object_type,
        object_id=object_id,
        meta_key=meta_key,
        context=context,
        value=value,
    )


@router.put("/{object_type}/{object_id}/{meta_key}", response_model=MetaValueResponse)
def save_meta(
    object_type: str,
    object_id: str,
    meta_key: str,
    payload: MetaValueRequest,
    context: str = DEFAULT_CONTEXT,
    core: Core = Depends(get_core),
):
    core.meta_store.save_meta(object_id, object_type, meta_key, payload.value, context)
    return MetaValueResponse(
        object_type=object_type,
        object_id=object_id,
        meta_key=meta_key,
        context=context,
        value=payload.value,
    )
