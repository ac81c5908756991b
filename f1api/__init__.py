"""Read-only JSON web API (WSGI) for Formula 1 drivers, constructors and circuits."""

__version__ = "0.1.0"