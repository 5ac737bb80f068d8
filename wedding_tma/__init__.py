"""
Wedding Mini App.

- backend/: API, services, storage providers, database, configuration
"""
