"""Rule string parsing and formatting.

Grammar: ``B<neighbor-spec>/S<neighbor-spec>[/C<num-states>]``, case
insensitive, whitespace ignored. A neighbor spec is either a run of digits
("23" -> 2 and 3) or a comma/range list ("2-5,8"). Parsing is lenient: tokens
that are malformed or out of range are dropped rather than rejecting the rule.
"""

import re
from typing import List, Optional, Union

from ..core.mappings import NeighborhoodId, coerce_id
from ..core.neighborhood import max_neighbors
from .rule_spec import RuleSpec

# The string does not encode the neighborhood, so parse against the largest one.
PARSE_MAX_NEIGHBORS = 24

_RULE_RE = re.compile(r'^B([\d,-]*)/S([\d,-]*)(?:/C(\d+))?$')
_RANGE_RE = re.compile(r'^(\d+)-(\d+)$')
_LEADING_INT_RE = re.compile(r'^\d+')
_WHITESPACE_RE = re.compile(r'\s+')


def _range_mask(start: int, end: int, limit: int) -> int:
    mask = 0
    for i in range(start, min(end, limit) + 1):
        mask |= 1 << i
    return mask


def parse_neighbor_spec_to_mask(spec: str, limit: int) -> int:
    """Parse a neighbor specification into a bitmask.

    Supports "23" (single digits), "9-17" (range), "2-5,8" (mixed) and
    "3,11,12" (explicit list). Values above limit are ignored.
    """
    if not spec:
        return 0

    whole_range = _RANGE_RE.match(spec)
    if whole_range:
        return _range_mask(int(whole_range.group(1)), int(whole_range.group(2)), limit)

    mask = 0
    if ',' in spec or '-' in spec:
        for part in spec.split(','):
            sub_range = _RANGE_RE.match(part)
            if sub_range:
                mask |= _range_mask(int(sub_range.group(1)), int(sub_range.group(2)), limit)
                continue
            leading = _LEADING_INT_RE.match(part)
            if leading:
                n = int(leading.group(0))
                if n <= limit:
                    mask |= 1 << n
        return mask

    for digit in spec:
        n = int(digit)
        if n <= limit:
            mask |= 1 << n
    return mask


def normalize_rule_string(rule_string: str) -> str:
    return _WHITESPACE_RE.sub('', rule_string.upper())


def parse_rule_string(rule_string: str,
                      neighborhood: Union[NeighborhoodId, str] = NeighborhoodId.MOORE,
                      name: Optional[str] = None) -> Optional[RuleSpec]:
    """Parse a B/S[/C] rule string.

    Args:
        rule_string: Rule such as "B3/S23" or "b2/s345/c4"
        neighborhood: Neighborhood to attach; the string does not carry one
        name: Optional display name

    Returns:
        RuleSpec, or None if the string does not match the grammar
    """
    normalized = normalize_rule_string(rule_string)
    match = _RULE_RE.match(normalized)
    if not match:
        return None

    num_states = int(match.group(3)) if match.group(3) else 2
    if num_states < 2:
        return None

    return RuleSpec(
        birth_mask=parse_neighbor_spec_to_mask(match.group(1), PARSE_MAX_NEIGHBORS),
        survive_mask=parse_neighbor_spec_to_mask(match.group(2), PARSE_MAX_NEIGHBORS),
        num_states=num_states,
        neighborhood=coerce_id(NeighborhoodId, neighborhood),
        name=name,
        rule_string=normalized,
    )


def format_mask_to_neighbor_spec(mask: int, limit: int) -> str:
    """Format a bitmask as a neighbor spec.

    Digit concatenation when every count is a single digit, otherwise a
    comma-separated list.
    """
    values: List[int] = [i for i in range(limit + 1) if mask & (1 << i)]
    if not values:
        return ''
    if all(n < 10 for n in values):
        return ''.join(str(n) for n in values)
    return ','.join(str(n) for n in values)


def format_rule_string(rule: RuleSpec) -> str:
    """Canonical rule string for a RuleSpec (supports counts up to 24)."""
    limit = max_neighbors(rule.neighborhood)
    birth = format_mask_to_neighbor_spec(rule.birth_mask, limit)
    survive = format_mask_to_neighbor_spec(rule.survive_mask, limit)
    result = f"B{birth}/S{survive}"
    if rule.num_states > 2:
        result += f"/C{rule.num_states}"
    return result
