# shoescrape/retailers/jackrabbit.py

from ..models import BrandRule, ExtractionRuleSet, GenderRule, PayloadRule, PriceCandidate, VariantLayout

# Magento store. Titles read "Men's Nike Air Zoom Pegasus 35", so the brand is the
# second word and the whole title is kept as the product name.
JACKRABBIT = ExtractionRuleSet(
    name="jackrabbit",
    retailer_name="jack-rabbit",
    file_name_prefix="jack_rabbit_shoes",
    search_url_template="https://www.jackrabbit.com/catalogsearch/result/?q={keyword}",
    keyword_suffix=" SHOES",
    listing_item_selector="a.product-image",
    next_page_selector="a.next.i-next",
    title_selector="div.product-name > h1",
    gender=GenderRule(default_gender="Unisex", name_source="title"),
    brand=BrandRule(title_token=1),
    price_candidates=(
        PriceCandidate(".regular-price .price", pick="first_line"),
        PriceCandidate(".special-price .price", pick="first_line"),
        PriceCandidate(".old-price .price", pick="first_line"),
    ),
    image_selector=".zoomWrapper img:first-of-type",
    payload=PayloadRule(
        script_selector="#product-options-wrapper script:nth-of-type(2)",
        start_sentinel="new Product.Config(",
    ),
    variants=VariantLayout(
        root_key="attributes",
        match_path=(0, "label"),
        match_text="size",
        sizes=(0, "options"),
        size_label=("label",),
    ),
)
