"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""


class ConfigurationError(UtilError):
    """A setting required by the current environment is missing."""

    def __init__(self, setting: str, environment: str):
        self.setting = setting
        self.environment = environment
        super().__init__(f"{setting} must be configured in {environment}")
