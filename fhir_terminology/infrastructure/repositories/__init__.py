"""Repository implementations for terminology resources.

This module provides resolvers and loaders that turn FHIR JSON and CSV
files into code systems and value sets for the terminology engine.
"""

from .csv_code_system_loader import code_system_from_frame, load_csv_code_system
from .resource_loader import (
    ResourceLoadError,
    code_system_from_dict,
    load_resource_file,
    resource_from_dict,
    value_set_from_dict,
)
from .resource_repository import DirectoryResourceResolver, InMemoryResourceResolver

__all__ = [
    # Resolvers
    "DirectoryResourceResolver",
    "InMemoryResourceResolver",
    # Loaders
    "ResourceLoadError",
    "code_system_from_dict",
    "code_system_from_frame",
    "load_csv_code_system",
    "load_resource_file",
    "resource_from_dict",
    "value_set_from_dict",
]
