"""
Parley error types: connectivity, auth, precondition and config failures.
"""

from typing import Any, Optional


class ParleyError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConnectivityError(ParleyError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("connectivity_error", message, details)


class AuthError(ParleyError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class PreconditionError(ParleyError):
    def __init__(self, message: str):
        super().__init__("precondition_error", message)


class ConfigError(ParleyError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("config_error", message, details)


class DispatchError(ParleyError):
    def __init__(self, message: str):
        super().__init__("dispatch_error", message)
