"""In-memory data stores for maintaining entity relationships."""

from collection_engine.store.portfolio import PortfolioStore

__all__ = ["PortfolioStore"]
