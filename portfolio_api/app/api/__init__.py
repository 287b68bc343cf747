"""HTTP routes, grouped by API version (``v1``, ...)."""
