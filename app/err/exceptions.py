"""Simple wrappers for the failure states the watchdog cares about"""


class ModemNotOkError(Exception):
    """Exception for non-2xx responses from modem."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message, status_code, payload)
        self.status_code = status_code


class ConfigError(Exception):
    """Exception for env-vars or flags that can't be turned into a usable config."""

    def __init__(self, message, setting=None, value=None):
        super().__init__(message, setting, value)
        self.setting = setting
        self.value = value
