"""Local CRM core: customers, tasks, activity trail and dashboard views."""
