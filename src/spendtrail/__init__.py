"""SpendTrail: statement import and spending analytics."""

__version__ = "1.0.0"
