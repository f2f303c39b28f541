"""Exception taxonomy shared by the database layer, runtime and UI."""

from __future__ import annotations


class ClazyError(Exception):
    """Base class for every error clazydbm raises on purpose."""


class ConfigError(ClazyError):
    """A connection entry is malformed or incomplete."""


class ConfigFileError(ConfigError):
    """A configuration file could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DatabaseConnectionError(ClazyError, ConnectionError):
    """The backend could not be reached."""


class AuthenticationError(DatabaseConnectionError):
    """The backend rejected the credentials."""


class MissingDriverError(DatabaseConnectionError):
    """Exception raised when a required database driver package is not installed."""

    def __init__(
        self,
        driver_name: str,
        extra_name: str,
        package_name: str,
        *,
        module_name: str | None = None,
        import_error: str | None = None,
    ):
        self.driver_name = driver_name
        self.extra_name = extra_name
        self.package_name = package_name
        self.module_name = module_name
        self.import_error = import_error
        super().__init__(
            f"Missing driver for {driver_name}: pip install 'clazydbm[{extra_name}]' (or {package_name})"
        )


class QueryError(ClazyError):
    """A statement failed on the backend."""


class NotFoundError(QueryError):
    """The database, schema or table no longer exists."""


class ToolUnavailableError(ClazyError):
    """The external query tool for a backend is not installed."""

    def __init__(self, tool: str, message: str | None = None):
        self.tool = tool
        super().__init__(message or f"{tool} is not installed (pip install {tool})")


class TerminalError(ClazyError):
    """Releasing or restoring the terminal failed.

    ``fatal`` is set when the terminal could not be put back into application
    mode; the runtime stops in that case.
    """

    def __init__(self, message: str, *, fatal: bool = False):
        self.fatal = fatal
        super().__init__(message)


class ToolInterrupted(ClazyError):
    """The user interrupted the external tool with Ctrl-C."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"{tool} stopped by Ctrl-C")


class TerminalInterrupted(ClazyError):
    """A termination signal arrived while the terminal was released."""

    def __init__(self, signum: int):
        self.signum = signum
        super().__init__(f"interrupted by signal {signum}")


__all__ = [
    "AuthenticationError",
    "ClazyError",
    "ConfigError",
    "ConfigFileError",
    "DatabaseConnectionError",
    "MissingDriverError",
    "NotFoundError",
    "QueryError",
    "TerminalError",
    "TerminalInterrupted",
    "ToolInterrupted",
    "ToolUnavailableError",
]
