"""Utilities package for the analytics period engine"""

from analytics_backend.utils.errors import ErrorCode, create_error_response

__all__ = ['ErrorCode', 'create_error_response']
