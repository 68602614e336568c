"""
High-level use cases for the CRM core.

Service modules orchestrate repositories (store wiring, demo seeding) or
compute read-only projections over their data (dashboard, list filters).
Routers call these instead of touching storage backends directly.
"""
