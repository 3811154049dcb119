# shoescrape/retailers/eastbay.py

from ..models import BrandRule, ExtractionRuleSet, GenderRule, PayloadRule, VariantLayout

# Eastbay ships every style of a model in `var styles = {...}`: model id -> positional list.
# Position 6 is the style price, 7 the size list, 15 the color and 16 the width.
# Every size is itself a list: [label, ..., price].
EASTBAY = ExtractionRuleSet(
    name="eastbay",
    retailer_name="Eastbay.com",
    file_name_prefix="eastbay_com",
    search_url_template="https://www.eastbay.com/Running/Shoes/_-_/N-1dwZne/keyword-{keyword}",
    listing_item_selector="#endeca_search_results > ul > li",
    listing_link_selector="a:nth-of-type(1)",
    listing_id_attribute="data-model",
    next_page_selector=".endeca_pagination .next",
    title_selector='meta[name="title"]',
    title_attribute="content",
    lowercase_title=True,
    gender=GenderRule(default_gender="Man"),
    brand=BrandRule(pattern=r'tagMgt\.brand\s*=\s*"([^"]*)";'),
    payload=PayloadRule(
        script_selector=".content_container script:nth-of-type(6)",
        start_sentinel="var styles =",
    ),
    variants=VariantLayout(
        price=(6,),
        sizes=(7,),
        color=(15,),
        width=(16,),
        size_label=(0,),
        size_price=(2,),
        image_url_template="https://images.eastbay.com/is/image/EBFL2/{variant_id}",
    ),
)
