"""rulesync — keep a Prometheus rule file in sync with a remote rule source."""

__version__ = "0.1.0"
