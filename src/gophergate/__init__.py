"""Local HTTP gateway for browsing Gopherspace from a web browser."""

__version__ = "0.1.0"
