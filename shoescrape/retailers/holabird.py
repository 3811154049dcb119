# shoescrape/retailers/holabird.py

from ..models import BrandRule, ExtractionRuleSet, GenderRule, PayloadRule, PriceCandidate, VariantLayout

# Titles read "Nike Air Zoom Pegasus 35 Women's Black/White": name before the gender
# marker, colorway after it. The brand only appears in the Google pixel script,
# as `Brand : "Nike",`.
HOLABIRD = ExtractionRuleSet(
    name="holabird",
    retailer_name="holabird sports",
    file_name_prefix="holabird_sports_shoes",
    search_url_template="http://shop.holabirdsports.com/search?w={keyword}",
    listing_item_selector="a.product-image",
    next_page_selector=".next-page > a",
    title_selector='meta[name="twitter:title"]',
    title_attribute="content",
    gender=GenderRule(default_gender="Man", color_from_remainder=True),
    brand=BrandRule(label_selector="#google_smart_pixel_beta script", label="Brand", label_offset=2),
    price_candidates=(
        PriceCandidate(".add-to-cart-price", strip_selectors=(".price_check", ".our_price_text"), pick="last_token"),
        PriceCandidate(".msrp_price"),
    ),
    image_selector="#product_image_anchor img:first-of-type",
    width_selector="#product-options-wrapper dd:nth-of-type(2)",
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
