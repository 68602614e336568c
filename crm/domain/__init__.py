"""Domain records and rules that do not depend on storage."""
