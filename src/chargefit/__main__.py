"""Allow ``python -m chargefit``."""

from chargefit.cli.app import app

app()
