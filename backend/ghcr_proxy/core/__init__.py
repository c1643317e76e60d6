"""Configuration, logging, error handling, HTTP client setup and dependency wiring."""
