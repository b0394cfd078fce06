"""
Mortality Insights - analytical engine for country mortality records.
"""

__version__ = "0.1.0"
