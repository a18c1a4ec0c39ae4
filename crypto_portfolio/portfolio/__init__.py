"""Portfolio domain package."""

from crypto_portfolio.portfolio.models import AddAssetRequest, AggregatedHolding, HoldingRecord, PortfolioSummary

__all__ = ["AddAssetRequest", "AggregatedHolding", "HoldingRecord", "PortfolioSummary"]
