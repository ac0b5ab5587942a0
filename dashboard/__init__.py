"""Analytics dashboard engine: CSV inference, totals, sorting and reports."""
__version__ = "1.0.0"
