"""Ordered substitution rules for folding free-text EVTYPE labels.

The raw archive holds ~183 distinct labels for what NWS Directive
10-1605 defines as 48 event types. The rules below fix only the
highest-impact labels; anything they do not touch passes through
trimmed and uppercased.

Rules run in order, each on the output of the previous one, so the
order matters: "TSTM" must be expanded before the rule that collapses
every "THUNDERSTORM..." label, and the "HIGH WIND..." rule must run
before the catch-all "WIND..." rule.
"""

from __future__ import annotations

import re
from typing import NamedTuple


class SubstitutionRule(NamedTuple):
    pattern: re.Pattern
    replacement: str


def _rule(pattern: str, replacement: str) -> SubstitutionRule:
    return SubstitutionRule(re.compile(pattern), replacement)


EVENT_TYPE_RULES: tuple[SubstitutionRule, ...] = (
    _rule(r"TSTM", "THUNDERSTORM"),
    _rule(r"^THUNDERSTORM.*", "THUNDERSTORM WIND"),
    _rule(r".*HURRICANE.*", "HURRICANE (TYPHOON)"),
    _rule(r"^TYPHOON.*", "HURRICANE (TYPHOON)"),
    _rule(r"^STORM SURGE.*", "STORM SURGE/TIDE"),
    _rule(r"CSTL", "COASTAL"),
    _rule(r"^EXTREME COLD.*", "EXTREME COLD/WIND CHILL"),
    _rule(r"^TIDAL FLOODING$", "COASTAL FLOOD"),
    _rule(r".*COASTAL FLOOD.*", "COASTAL FLOOD"),
    _rule(r"COASTALSTORM", "COASTAL STORM"),
    _rule(r"^RIVER FLOOD.*", "FLOOD"),
    _rule(r"^ICE JAM FLOOD.*", "FLOOD"),
    _rule(r".*FLASH.*FLOOD.*", "FLASH FLOOD"),
    _rule(r"^GUSTY WIND.*", "STRONG WIND"),
    _rule(r"^NON[- ]THUNDERSTORM WIND.*", "STRONG WIND"),
    _rule(r"^HIGH WIND.*", "HIGH WIND"),
    _rule(r"^WIND.*", "HIGH WIND"),
    _rule(r"WINDS", "WIND"),
    _rule(r"^FOG.*", "DENSE FOG"),
    _rule(r"AVALANCE", "AVALANCHE"),
    _rule(r"^MUD.*SLIDE.*", "AVALANCHE"),
    _rule(r"^WILD.* FIRE.*", "WILDFIRE"),
    _rule(r"RIP CURRENTS", "RIP CURRENT"),
    _rule(r"^URBAN/SML STREAM FLD$", "FLASH FLOOD"),
    _rule(r"^WINTRY MIX.*", "WINTER WEATHER"),
    _rule(r"^WINTER WEATHER.*", "WINTER WEATHER"),
)

# Storm Data Event Table, NWS Directive 10-1605 section 2.1.1.
OFFICIAL_EVENT_TYPES: frozenset[str] = frozenset(
    {
        "ASTRONOMICAL LOW TIDE",
        "AVALANCHE",
        "BLIZZARD",
        "COASTAL FLOOD",
        "COLD/WIND CHILL",
        "DEBRIS FLOW",
        "DENSE FOG",
        "DENSE SMOKE",
        "DROUGHT",
        "DUST DEVIL",
        "DUST STORM",
        "EXCESSIVE HEAT",
        "EXTREME COLD/WIND CHILL",
        "FLASH FLOOD",
        "FLOOD",
        "FREEZING FOG",
        "FROST/FREEZE",
        "FUNNEL CLOUD",
        "HAIL",
        "HEAT",
        "HEAVY RAIN",
        "HEAVY SNOW",
        "HIGH SURF",
        "HIGH WIND",
        "HURRICANE (TYPHOON)",
        "ICE STORM",
        "LAKE-EFFECT SNOW",
        "LAKESHORE FLOOD",
        "LIGHTNING",
        "MARINE HAIL",
        "MARINE HIGH WIND",
        "MARINE STRONG WIND",
        "MARINE THUNDERSTORM WIND",
        "RIP CURRENT",
        "SEICHE",
        "SLEET",
        "STORM SURGE/TIDE",
        "STRONG WIND",
        "THUNDERSTORM WIND",
        "TORNADO",
        "TROPICAL DEPRESSION",
        "TROPICAL STORM",
        "TSUNAMI",
        "VOLCANIC ASH",
        "WATERSPOUT",
        "WILDFIRE",
        "WINTER STORM",
        "WINTER WEATHER",
    }
)


def normalize_event_type(label: str) -> str:
    """Fold a raw EVTYPE label to its uppercase canonical form.

    Examples:
        " tstm wind "        → "THUNDERSTORM WIND"
        "HURRICANE EDOUARD"  → "HURRICANE (TYPHOON)"
        "WINTER WEATHER MIX" → "WINTER WEATHER"
        "TORNADO"            → "TORNADO"  (no rule applies)
    """
    text = label.strip().upper()
    for rule in EVENT_TYPE_RULES:
        text = rule.pattern.sub(rule.replacement, text)
    return text


def display_event_type(canonical: str) -> str:
    """Title-case a canonical label for reports, e.g. "Storm Surge/Tide"."""
    return canonical.title()


def is_official_event_type(canonical: str) -> bool:
    return canonical in OFFICIAL_EVENT_TYPES
