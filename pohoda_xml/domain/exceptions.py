class PohodaDomainError(Exception):
    pass


class UnknownEntityKindError(PohodaDomainError, LookupError):
    pass

    def __init__(self, kind: str) -> None:
        super().__init__(f"Not allowed entity: {kind}")
        self.kind = kind


class ValidationError(PohodaDomainError):
    pass

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"Invalid {kind} data: {message}")
        self.kind = kind
