import httpx


class WmsClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StockLookupError(WmsClientError, LookupError):
    """A lookup request failed in transport or was rejected by the backend."""


class NotFoundError(StockLookupError):
    pass


class SubmissionError(WmsClientError):
    pass


class InvalidAdjustment(WmsClientError, ValueError):
    pass


class SubmissionInProgress(WmsClientError):
    pass


def error_message(response: httpx.Response, fallback: str) -> str:
    """Pull the backend's message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("msg")
        if isinstance(detail, str) and detail:
            return detail
        if isinstance(detail, list) and detail:
            first = detail[0]
            if isinstance(first, dict) and first.get("msg"):
                return str(first["msg"])
    return fallback
