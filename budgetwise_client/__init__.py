# budgetwise_client/__init__.py
"""Client for the BudgetWise REST API: services, resource store and report views."""

__version__ = "0.1.0"
