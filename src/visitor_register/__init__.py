"""Visitor Register package.

Feature modules (visits, reports, users) each carry their own model,
repository interface, MySQL repository, service and thin Flask controller.
"""
