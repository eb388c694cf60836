"""Plugin-routing gRPC core server, its logging and configuration, and the feature client that drives it."""

__version__ = "0.1.0"