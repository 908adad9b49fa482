"""Household budget projector: P&L tables, investment growth and goal tracking."""

__version__ = "0.1.0"
