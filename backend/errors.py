from __future__ import annotations


class LottoAnalysisError(Exception):
    """Base error carrying a client-facing message and HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(LottoAnalysisError):
    status_code = 409


class EmptyInputError(LottoAnalysisError):
    status_code = 400


class MalformedRequestError(LottoAnalysisError):
    status_code = 400
