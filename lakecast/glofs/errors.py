"""Exceptions raised by the GLOFS frame client."""


class GlofsError(Exception):
    """Base class for GLOFS client errors."""


class GlofsHTTPError(GlofsError):
    """
    Non-success HTTP status from the frame server.

    Carries the endpoint label, status code and raw response body.
    Never retried by the client.
    """

    def __init__(self, endpoint: str, status_code: int, body: str):
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body
        super().__init__(f"{endpoint} failed: {status_code} {body}")


class FrameUnavailableError(GlofsError):
    """A lake's frame was requested but the server reported an error for it."""


class NoRunAvailableError(GlofsError):
    """Run discovery returned no run for the lake."""
