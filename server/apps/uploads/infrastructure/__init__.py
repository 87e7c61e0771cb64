"""Infrastructure layer for uploads app.

This package contains integrations with external systems:
- Filesystem storage backend
- File name encoding and collision-free name resolution

Keep infrastructure concerns separate from business logic.
"""
