"""
Service layer abstraction.

Each service encapsulates business logic for a domain and reaches the
database only through the store it is constructed with, so API
handlers stay unaware of how records are persisted.
"""
