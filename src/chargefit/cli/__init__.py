"""Command line interface for chargefit."""

from chargefit.cli.app import app

__all__ = ["app"]
