"""Exception type shared by the package."""


class DVisionError(Exception):
    """General error raised by the package."""

    def __init__(self, message: str = "DVision error") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message