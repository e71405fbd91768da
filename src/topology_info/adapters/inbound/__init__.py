"""Inbound adapters - REST API over topology discovery."""

from topology_info.adapters.inbound.rest_api import create_app

__all__ = ["create_app"]
