"""Errors raised while building a quote."""


class ResolutionError(LookupError):
    """One or more requested items have no matching catalog product."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Products not found: {', '.join(self.missing)}")


class QuoteValidationError(ValueError):
    """Quote input was rejected before reaching the engine."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Invalid quote input: {summary}")
