# shoescrape/retailers/__init__.py

# One rule set per supported retailer, keyed by the name used on the command line.
from typing import Dict

from ..errors import ConfigurationError
from ..models import ExtractionRuleSet
from .eastbay import EASTBAY
from .holabird import HOLABIRD
from .jackrabbit import JACKRABBIT

RULE_SETS: Dict[str, ExtractionRuleSet] = {rules.name: rules for rules in (EASTBAY, JACKRABBIT, HOLABIRD)}


def get_rule_set(name: str) -> ExtractionRuleSet:
    try:
        return RULE_SETS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown retailer {name!r}. Choose one of: {', '.join(sorted(RULE_SETS))}"
        ) from None
