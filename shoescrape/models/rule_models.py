# shoescrape/models/rule_models.py

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
from urllib.parse import quote_plus

from .. import config

# A path into a decoded payload value: ints index lists, strings index objects.
FieldPath = Tuple[Union[int, str], ...]


@dataclass(frozen=True)
class PriceCandidate:
    """
    One place a price can be read from. `strip_selectors` name child elements whose
    text is removed from the candidate text before `pick` is applied.
    pick: "first_line", "last_token" or "full".
    """
    selector: str
    strip_selectors: Tuple[str, ...] = ()
    pick: str = "full"


@dataclass(frozen=True)
class GenderRule:
    """
    Ordered (marker, gender) pairs; the first marker found in the title wins, so
    "women's" must come before "men's". The title is split around the marker:
    the text before it is the product name when name_source is "before", and the
    text after it is the color when color_from_remainder is set.
    """
    markers: Tuple[Tuple[str, str], ...] = (("women's", "Woman"), ("men's", "Man"))
    default_gender: str = "Man"
    name_source: str = "before"
    color_from_remainder: bool = False


@dataclass(frozen=True)
class BrandRule:
    # tried in this order: regex over the page, labeled token scan of a script, title token
    pattern: Optional[str] = None
    label_selector: Optional[str] = None
    label: str = "Brand"
    label_offset: int = 2
    title_token: Optional[int] = None


@dataclass(frozen=True)
class PayloadRule:
    """Where the variant blob sits inside the page and how to cut it out."""
    script_selector: Optional[str] = None
    start_sentinel: Optional[str] = None
    end_sentinel: Optional[str] = None
    brace_balanced: bool = True


@dataclass(frozen=True)
class VariantLayout:
    """
    Maps positions inside one decoded variant entry to VariantGroup fields.
    `root_key` descends into a nested object before the entries are read.
    Entries are only used when the value at `match_path` contains `match_text`.
    """
    sizes: FieldPath
    size_label: FieldPath
    size_price: Optional[FieldPath] = None
    color: Optional[FieldPath] = None
    width: Optional[FieldPath] = None
    price: Optional[FieldPath] = None
    image_url: Optional[FieldPath] = None
    image_url_template: Optional[str] = None
    root_key: Optional[str] = None
    match_path: Optional[FieldPath] = None
    match_text: Optional[str] = None


@dataclass(frozen=True)
class ExtractionRuleSet:
    """Everything that differs between two retailers. Data only; no behaviour."""
    name: str
    retailer_name: str
    file_name_prefix: str
    search_url_template: str
    listing_item_selector: str
    next_page_selector: str
    title_selector: str
    payload: PayloadRule
    variants: VariantLayout
    keyword_suffix: str = ""
    listing_link_selector: Optional[str] = None
    listing_id_attribute: Optional[str] = None
    title_attribute: Optional[str] = None
    lowercase_title: bool = False
    juvenile_markers: Tuple[str, ...] = config.JUVENILE_MARKERS
    gender: GenderRule = field(default_factory=GenderRule)
    brand: BrandRule = field(default_factory=BrandRule)
    price_candidates: Tuple[PriceCandidate, ...] = ()
    currency_marker: str = "$"
    image_selector: Optional[str] = None
    image_attribute: str = "src"
    width_selector: Optional[str] = None

    def search_url(self, keyword: str) -> str:
        """Interpolates the URL-encoded keyword into the retailer's search URL."""
        return self.search_url_template.format(keyword=quote_plus(keyword + self.keyword_suffix))
