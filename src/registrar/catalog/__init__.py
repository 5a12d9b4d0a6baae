"""Catalog package - subjects, courses, schedules and students."""

from registrar.catalog.service import CatalogService

__all__ = ["CatalogService"]
