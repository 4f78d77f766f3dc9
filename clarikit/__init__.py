"""Helpers for Clarity smart-contract projects: manifests, seeds, cost reports, test-run bookkeeping and build glue."""

__version__ = "0.1.0"