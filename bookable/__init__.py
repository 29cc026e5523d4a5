"""
bookable - compute bookable appointment slots for a business day.
"""

__version__ = "0.1.0"
