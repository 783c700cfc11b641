"""Staff payroll package.

Feature modules (staff, attendance, closures, leaves, payroll) each keep a
plain model, a repository interface with its MySQL implementation, a service
holding the business rules and, where exposed, a thin Flask controller.
"""
