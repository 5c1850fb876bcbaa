"""Core services package."""

from .resource_service import ResourceService
from .seeder import DataGenerator, Seeder

__all__ = [
    "DataGenerator",
    "ResourceService",
    "Seeder",
]
