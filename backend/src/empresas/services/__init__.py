"""
Services package - Business operations of the registry.

Includes onboarding, transfer recording, reporting and deletion.
"""

from .registry import RegistryService

__all__ = ["RegistryService"]
