from dataclasses import dataclass

TAX_SOURCES = ('api', 'fallback')


@dataclass(frozen=True)
class TaxBreakdown:
    gross_annual: float
    federal_tax_annual: int
    state_tax_annual: int
    fica_tax_annual: int
    total_tax_annual: int
    net_income_annual: int
    source: str = 'fallback'

    def __post_init__(self):
        if self.source not in TAX_SOURCES:
            raise ValueError(f"Unknown tax source: {self.source}")

    @property
    def net_income_monthly(self) -> float:
        return self.net_income_annual / 12

    @property
    def effective_tax_rate(self) -> float:
        if self.gross_annual <= 0:
            return 0.0
        return self.total_tax_annual / self.gross_annual

    def to_dict(self) -> dict:
        return {
            'gross_annual': self.gross_annual,
            'federal_tax_annual': self.federal_tax_annual,
            'state_tax_annual': self.state_tax_annual,
            'fica_tax_annual': self.fica_tax_annual,
            'total_tax_annual': self.total_tax_annual,
            'net_income_annual': self.net_income_annual,
            'source': self.source,
        }
