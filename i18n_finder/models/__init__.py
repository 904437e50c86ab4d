"""Data models for scan results, key usages and translation reports."""
