from __future__ import annotations


class SmartFlowError(Exception):
    """Base class for errors raised at the loading edges of smartflow."""


class ConditionSyntaxError(SmartFlowError, ValueError):
    """A stored conditions blob is not valid JSON or not a condition group."""


class TemplateLoadError(SmartFlowError):
    """A template document could not be fetched, read or validated."""


class ConfigError(SmartFlowError):
    """An environment setting has a value we can't use."""
