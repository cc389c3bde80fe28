"""Report browsing web app."""

from donut.api.app import create_app

__all__ = ["create_app"]
