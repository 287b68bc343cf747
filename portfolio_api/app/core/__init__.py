"""Settings, logging setup and database access shared by the application."""
