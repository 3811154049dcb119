# shoescrape/models/__init__.py

# This file makes the model classes directly available from the 'models' package.
# Instead of: from shoescrape.models.product_models import ProductVariantRecord
# We can now use: from shoescrape.models import ProductVariantRecord

from .product_models import (
    DetailPage,
    ListingPage,
    ProductReference,
    ProductVariantRecord,
    SizeOption,
    VariantGroup,
)
from .rule_models import (
    BrandRule,
    ExtractionRuleSet,
    FieldPath,
    GenderRule,
    PayloadRule,
    PriceCandidate,
    VariantLayout,
)
