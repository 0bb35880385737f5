"""
Azure Cost Report

Quick cost reports for an Azure subscription from the Cost Management API:
actual daily costs, forecast, and breakdowns by service and location.
"""

__version__ = "1.0.0"
__author__ = "Azure Cost Report Team"
