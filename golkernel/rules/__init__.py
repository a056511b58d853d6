"""Rule model, rule strings and presets."""

from .rule_spec import RuleSpec
from .rule_strings import (
    parse_rule_string, format_rule_string,
    parse_neighbor_spec_to_mask, format_mask_to_neighbor_spec,
)

__all__ = [
    'RuleSpec',
    'parse_rule_string',
    'format_rule_string',
    'parse_neighbor_spec_to_mask',
    'format_mask_to_neighbor_spec',
]
