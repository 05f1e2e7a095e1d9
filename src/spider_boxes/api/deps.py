from fastapi import Request

from ..core import Core


def get_core(request: Request) -> Core:
    return request.app.state.core
