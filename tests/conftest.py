"""
Pytest configuration and fixtures for the shoescrape test suite.

Pages are built as small HTML strings shaped like the real retailer pages, and
served by an in-memory downloader instead of the network.
"""

import asyncio
import json

import pytest

from shoescrape.delegates import HtmlDocument
from shoescrape.errors import NetworkError

EASTBAY_SEARCH_AIR_MAX = "https://www.eastbay.com/Running/Shoes/_-_/N-1dwZne/keyword-air+max"


class FakeDownloader:
    """Serves HTML from a dict. Unknown URLs fail like a 404."""

    def __init__(self, pages, delays=None):
        self.pages = pages
        self.delays = delays or {}
        self.calls = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def fetch_document(self, url):
        self.calls.append(url)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            if url not in self.pages:
                raise NetworkError(url, "HTTP 404", status_code=404)
            return HtmlDocument(url, self.pages[url])
        finally:
            self.in_flight -= 1


def eastbay_style(color, width, price, sizes):
    """One entry of Eastbay's `var styles` object: a 17 element positional list."""
    values = [""] * 17
    values[0] = "Air Max"
    values[3] = {"flags": {"new": True, "label": "{sale}"}}
    values[6] = price
    values[7] = [[f' "{size}"', "in stock", price] for size in sizes]
    values[15] = color
    values[16] = width
    return values


def eastbay_detail_html(title, styles, brand="Nike"):
    styles_json = styles if isinstance(styles, str) else json.dumps(styles)
    fillers = "".join(f"<script>var filler{i} = {{}};</script>" for i in range(5))
    return f"""<html><head>
<meta name="title" content="{title}">
<script>var tagMgt = {{}}; tagMgt.brand = "{brand}";</script>
</head><body>
<div class="content_container">{fillers}<script>
    var styles = {styles_json};
    var sizeChart = {{"us": "eu"}};
</script></div>
</body></html>"""


def eastbay_listing_html(models, next_href=None):
    items = "".join(
        f'<li data-model="{model}"><a href="/product/model:{model}/">Shoe {model}</a><a href="/reviews/{model}">Reviews</a></li>'
        for model in models
    )
    pagination = f'<a class="next" href="{next_href}">Next</a>' if next_href else ""
    return f"""<html><body>
<div id="endeca_search_results"><ul>{items}</ul></div>
<div class="endeca_pagination">{pagination}</div>
</body></html>"""


def eastbay_detail_url(model):
    return f"https://www.eastbay.com/product/model:{model}/"


MAGENTO_CONFIG = {
    "attributes": {
        "136": {
            "id": "136",
            "code": "shoe_size",
            "label": "Size",
            "options": [
                {"id": "10", "label": "8", "price": "0"},
                {"id": "11", "label": "9", "price": "0"},
            ],
        },
        "137": {"id": "137", "code": "width", "label": "Width", "options": [{"id": "20", "label": "D"}]},
    },
    "template": "$#{price}",
}


def magento_options_html(config=None):
    config_json = config if isinstance(config, str) else json.dumps(config or MAGENTO_CONFIG)
    return f"""<div id="product-options-wrapper">
<dl><dt>Size</dt><dd>8 9</dd><dt>Width</dt><dd>B - Medium</dd></dl>
<script>var optionsPrice = 1;</script>
<script>var spConfig = new Product.Config({config_json});</script>
</div>"""


def holabird_detail_html(title="Nike Air Zoom Pegasus 35 Women's Black/White", price="$119.95", config=None):
    return f"""<html><head><meta name="twitter:title" content="{title}"></head><body>
<div id="google_smart_pixel_beta"><script>var pixel = {{ Brand : "Nike", Category : "Running" }};</script></div>
<a id="product_image_anchor"><img src="https://img.holabirdsports.com/pegasus.jpg"></a>
<div class="add-to-cart-price"><span class="our_price_text">Our Price:</span> {price} <span class="price_check">Check</span></div>
<div class="msrp_price">$130.00</div>
{magento_options_html(config)}
</body></html>"""


def jackrabbit_detail_html(title="Women's Brooks Ghost 11", regular=None, special="$99.95", old="$130.00"):
    boxes = ""
    if regular is not None:
        boxes += f'<span class="regular-price"><span class="price">{regular}</span></span>'
    if old is not None:
        boxes += f'<p class="old-price"><span class="price-label">Regular Price:</span><span class="price">{old}</span></p>'
    if special is not None:
        boxes += f'<p class="special-price"><span class="price-label">Special Price</span><span class="price">{special}</span></p>'
    return f"""<html><body>
<div class="product-name"><h1>{title}</h1></div>
<div class="price-box">{boxes}</div>
<div class="zoomWrapper"><img src="https://www.jackrabbit.com/media/ghost11.jpg"><img src="other.jpg"></div>
{magento_options_html()}
</body></html>"""


@pytest.fixture
def air_max_site():
    """
    Two listing pages for "air max". Page 1 links M1 and M2, page 2 repeats M1.
    M1 has two colors with two sizes each; M2 is a kids' shoe.
    """
    m1_styles = {
        "M1-BLK": eastbay_style("Black/White", "D - Medium", "$149.99", ["9.0", "10.0"]),
        "M1-RED": eastbay_style("University Red", "D - Medium", "$139.99", ["9.5", "11.0"]),
    }
    page_2 = "https://www.eastbay.com/Running/Shoes/_-_/N-1dwZne/keyword-air+max?page=2"
    return {
        EASTBAY_SEARCH_AIR_MAX: eastbay_listing_html(["M1", "M2"], next_href="/Running/Shoes/_-_/N-1dwZne/keyword-air+max?page=2"),
        page_2: eastbay_listing_html(["M1"]),
        eastbay_detail_url("M1"): eastbay_detail_html("nike air max 270 - women's", m1_styles),
        eastbay_detail_url("M2"): eastbay_detail_html(
            "nike air max 270 - kids' preschool",
            {"M2-BLU": eastbay_style("Blue", "M", "$79.99", ["1.0"])},
        ),
    }
