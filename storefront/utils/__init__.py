"""Utility modules."""

from storefront.utils.auth import get_current_user, require_permission, verify_api_key

__all__ = ["get_current_user", "require_permission", "verify_api_key"]
