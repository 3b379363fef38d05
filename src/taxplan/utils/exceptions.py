"""Custom exceptions for taxplan."""

from __future__ import annotations


class TaxplanError(Exception):
    """Base exception for taxplan."""


class ConfigError(TaxplanError):
    """Invalid or missing tax rule table."""


class ScenarioError(TaxplanError):
    """Malformed scenario document."""
