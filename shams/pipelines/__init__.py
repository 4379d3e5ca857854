"""
SHAMS Pipelines Package.
"""
from shams.pipelines.suggestions import (
    suggest_wire_size,
    suggest_string_configuration,
    suggest_advanced_string_configuration,
    optimize_design,
    WireSizeSuggestion,
    StringConfigSuggestion,
    StringDesignSuggestion,
    DesignSuggestion,
)

__all__ = [
    "suggest_wire_size",
    "suggest_string_configuration",
    "suggest_advanced_string_configuration",
    "optimize_design",
    "WireSizeSuggestion",
    "StringConfigSuggestion",
    "StringDesignSuggestion",
    "DesignSuggestion",
]
