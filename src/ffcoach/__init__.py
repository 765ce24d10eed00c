"""Fantasy football companion: ESPN league ingest, coaching analytics and API."""

__version__ = "0.1.0"
