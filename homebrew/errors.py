class HomebrewError(Exception):
    """Base class for errors raised by the weather report service."""


class AuthError(HomebrewError):
    """Shared secret header missing or wrong."""


class ValidationError(HomebrewError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StorageError(HomebrewError):
    """Backing database failed a statement (connectivity, constraint or query)."""
