"""Synthetic collection portfolio generators."""

from collection_engine.generators.base import BaseGenerator
from collection_engine.generators.portfolio import (
    ClientGenerator,
    ContactGenerator,
    PaymentBehavior,
    TitleGenerator,
)

__all__ = [
    "BaseGenerator",
    "ClientGenerator",
    "ContactGenerator",
    "PaymentBehavior",
    "TitleGenerator",
]
