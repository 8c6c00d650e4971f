"""Conference program configuration and schedule consistency for Django."""
