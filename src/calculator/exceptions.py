"""Fatal engine errors. Expected data gaps are findings, not exceptions."""


class TaxEngineError(Exception):
    """Base class for errors that stop a computation."""
    pass


class UnsupportedTaxYearError(TaxEngineError, LookupError):
    """Raised when no rules module is registered for a tax year."""

    def __init__(self, tax_year: int, supported_years=()):
        self.tax_year = tax_year
        self.supported_years = tuple(sorted(supported_years))
        supported = ", ".join(str(y) for y in self.supported_years) or "none"
        super().__init__(
            f"No rules module registered for tax year {tax_year}. Supported years: {supported}"
        )


class StateModuleNotFoundError(TaxEngineError, LookupError):
    """Raised when a state return is requested and strict lookup is on."""

    def __init__(self, state_code: str, tax_year: int):
        self.state_code = state_code
        self.tax_year = tax_year
        super().__init__(f"No state rules module registered for {state_code} in tax year {tax_year}")


class TraceGraphError(TaxEngineError):
    """Raised when a trace graph references a missing node or contains a cycle."""
    pass
