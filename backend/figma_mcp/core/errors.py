from __future__ import annotations


class ToolError(Exception):
    """Base for failures reported back to the caller as an error result."""


class ValidationFailure(ToolError):
    pass


class UpstreamAPIError(ToolError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ConfigurationMissingError(ToolError):
    pass
