"""
Client exceptions.
"""


class ApiError(Exception):
    """
    Raised for any non-2xx response from the API.

    Carries the HTTP status and the ``message`` from the server's
    ``{success: false, message}`` envelope.
    """

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401
