"""Team Activity DB - monthly GitHub PR activity ingestion and scoring."""

__version__ = "0.1.0"
