# shoescrape/models/product_models.py

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..delegates.html_document import HtmlDocument


@dataclass(frozen=True)
class ProductReference:
    """A product link found on a listing page. `identifier` is the dedup key."""
    identifier: str
    url: str


@dataclass
class ListingPage:
    """One page of search results. Discarded once its links have been read."""
    url: str
    references: List[ProductReference] = field(default_factory=list)
    next_page_url: Optional[str] = None


@dataclass
class DetailPage:
    url: str
    document: "HtmlDocument"


@dataclass
class SizeOption:
    label: str
    price: str = ""


@dataclass
class VariantGroup:
    """
    One purchasable color/width combination of a product (a "shoe" in the
    retailer data). Sizes keep the order in which the retailer lists them.
    """
    variant_id: str
    color: str = ""
    width: str = ""
    price: str = ""
    image_url: str = ""
    sizes: List[SizeOption] = field(default_factory=list)


@dataclass(frozen=True)
class ProductVariantRecord:
    """
    This class is the blueprint for our final output: one row per
    (variant, size) pair. All fields are plain strings, ready for the CSV file.
    """
    keyword: str
    brand: str
    name: str
    price: str
    url: str
    image_url: str
    size: str
    width: str
    color: str
    gender: str
    retailer: str

    def to_row(self) -> List[str]:
        """Returns the fields in the column order of config.CSV_HEADER."""
        return [
            self.keyword,
            self.brand,
            self.name,
            self.price,
            self.url,
            self.image_url,
            self.size,
            self.width,
            self.color,
            self.gender,
            self.retailer,
        ]
