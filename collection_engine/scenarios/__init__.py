"""Scenarios for generating realistic collection portfolios."""

from collection_engine.scenarios.collection_portfolio import CollectionPortfolioScenario

__all__ = ["CollectionPortfolioScenario"]
