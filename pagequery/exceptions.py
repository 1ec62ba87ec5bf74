from fastapi import HTTPException, status


class BadRequestException(HTTPException):
    """Bad request exception (400)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class MalformedQueryException(BadRequestException):
    """The store rejected a whitelisted query as invalid (400).

    The detail is always the generic message; store diagnostics stay in the logs.
    """

    def __init__(self, detail: str = "malformed query"):
        super().__init__(detail)


class UnknownCollectionError(LookupError):
    """No table model is registered under the requested collection name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown collection: {name!r}")
        self.name = name
