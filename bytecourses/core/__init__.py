"""Core configuration, logging, errors and monitoring."""
