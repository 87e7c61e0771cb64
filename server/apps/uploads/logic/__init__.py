"""Business logic layer for uploads app.

This package contains all business logic for uploads:
- Batch ingestion with collision-free naming
- Soft delete toggle and permanent delete
- Metadata queries (listing, search, lookup by name)

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).

Reference: https://github.com/dry-python
for decoupling business logic from Django views.
"""
