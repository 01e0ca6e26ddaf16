from __future__ import annotations

from fastapi import Request

from batchembed.settings import AppSettings

from .container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_settings_dep(request: Request) -> AppSettings:
    return request.app.state.container.settings
