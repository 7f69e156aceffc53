"""On-the-fly image transformation gateway for a CDN origin."""

__version__ = "0.1.0"
