class TerminologyError(Exception):
    pass


class ResourceNotFoundError(TerminologyError):
    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource '{uri}' could not be resolved")
        self.uri = uri


class ExpansionError(TerminologyError):
    pass


class UnresolvableReferenceError(ExpansionError):
    def __init__(self, uri: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Referenced resource '{uri}' could not be resolved"
        )
        self.uri = uri


class CircularImportError(UnresolvableReferenceError):
    def __init__(self, uri: str, chain: tuple[str, ...]) -> None:
        path = " -> ".join((*chain, uri))
        super().__init__(uri, f"Value set imports form a cycle: {path}")
        self.chain = chain


class ExpansionTooLargeError(ExpansionError):
    def __init__(self, value_set_url: str, size: int, limit: int) -> None:
        super().__init__(
            f"Expansion of '{value_set_url}' has {size} concepts, "
            f"exceeding the maximum of {limit}"
        )
        self.value_set_url = value_set_url
        self.size = size
        self.limit = limit


class UnsupportedFilterError(ExpansionError):
    def __init__(self, system: str, property_name: str, op: str) -> None:
        super().__init__(
            f"Filter '{property_name} {op}' on system '{system}' is not supported"
        )
        self.system = system
        self.property_name = property_name
        self.op = op
