from typing import Annotated

from fastapi import Depends, Request

from statproxy.core.config import Settings
from statproxy.core.gateway.forwarder import UpstreamForwarder
from statproxy.core.gateway.resolver import RouteTable


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_route_table(request: Request) -> RouteTable:
    return request.app.state.route_table


def get_forwarder(request: Request) -> UpstreamForwarder:
    return request.app.state.forwarder


SettingsDep = Annotated[Settings, Depends(get_settings)]
RouteTableDep = Annotated[RouteTable, Depends(get_route_table)]
ForwarderDep = Annotated[UpstreamForwarder, Depends(get_forwarder)]
