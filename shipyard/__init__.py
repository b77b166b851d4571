"""Multi-cluster deployment control-plane engine."""

__version__ = "0.3.0"
