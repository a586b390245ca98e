"""Demo admin application: home, user, sitemap, admin and login routes."""

from fastapi_view_pipeline.demo.app import create_app

__all__ = ["create_app"]
