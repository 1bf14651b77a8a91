"""Time report ingestion and semi-monthly payroll reporting."""

__version__ = "0.1.0"
