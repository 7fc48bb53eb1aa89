"""Infrastructure modules for the API hub.

- Storage: persistence backends and repositories for connections, history,
  schedules and settings
- Catalog: read-only connection templates
"""
