# shoescrape/pipeline/extractor.py
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..delegates.html_document import HtmlDocument
from ..errors import NoPriceFound, NoVariantsFound, OutOfScopeProduct
from ..models import (
    BrandRule,
    DetailPage,
    ExtractionRuleSet,
    FieldPath,
    GenderRule,
    PriceCandidate,
    ProductVariantRecord,
    SizeOption,
    VariantGroup,
    VariantLayout,
)
from .payload import ParseFailure, normalize_payload, find_embedded_payload

logger = logging.getLogger(__name__)


class VariantLayoutError(ValueError):
    """A variant entry does not have the shape its layout describes."""


@dataclass
class ExtractionContext:
    """Per-page values shared by the extraction steps."""
    keyword: str
    url: str
    rules: ExtractionRuleSet
    title: str = ""
    gender: str = ""
    name: str = ""
    color: str = ""
    brand: str = ""
    price: str = ""


def derive_title(document: HtmlDocument, rules: ExtractionRuleSet) -> str:
    if rules.title_attribute:
        title = document.attr(rules.title_attribute, rules.title_selector)
    else:
        title = document.text(rules.title_selector)
    title = " ".join(title.split())
    return title.lower() if rules.lowercase_title else title


def is_juvenile(title: str, markers: Tuple[str, ...]) -> bool:
    lowered = title.lower()
    return any(marker.lower() in lowered for marker in markers)


def split_gender_and_name(title: str, rule: GenderRule) -> Tuple[str, str, str]:
    """
    Returns (gender, name, remainder). The remainder is whatever follows the
    gender marker; some retailers put the colorway there.
    """
    lowered = title.lower()
    for marker, gender in rule.markers:
        index = lowered.find(marker.lower())
        if index == -1:
            continue
        before = title[:index].strip(" -")
        after = title[index + len(marker):].strip(" -")
        if rule.name_source == "title" or not before:
            name = title.strip()
        else:
            name = before
        return gender, name, after
    return rule.default_gender, title.strip(), ""


def _brand_from_label(text: str, label: str, offset: int) -> str:
    tokens = text.split()
    positions = [i for i, token in enumerate(tokens) if token == label]
    if not positions:
        return ""
    # the last label wins when a script mentions it more than once
    index = positions[-1] + offset
    if index >= len(tokens):
        return ""
    return tokens[index].strip("\"',;:")


def extract_brand(document: HtmlDocument, title: str, rule: BrandRule) -> str:
    """Missing brand is not fatal; an empty string is returned."""
    if rule.pattern:
        match = re.search(rule.pattern, document.html)
        if match and match.group(1).strip():
            return match.group(1).strip()
    if rule.label_selector:
        brand = _brand_from_label(document.script_text(rule.label_selector), rule.label, rule.label_offset)
        if brand:
            return brand
    if rule.title_token is not None:
        tokens = title.split()
        if 0 <= rule.title_token < len(tokens) and "-" not in tokens[rule.title_token]:
            return tokens[rule.title_token]
    return ""


def _candidate_text(document: HtmlDocument, candidate: PriceCandidate) -> str:
    text = document.text(candidate.selector)
    for selector in candidate.strip_selectors:
        unwanted = document.text(selector)
        if unwanted:
            text = text.replace(unwanted, "", 1)
    if candidate.pick == "first_line":
        return text.strip().split("\n")[0].strip()
    if candidate.pick == "last_token":
        tokens = text.split()
        return tokens[-1] if tokens else ""
    return text.strip()


def extract_price(document: HtmlDocument, rules: ExtractionRuleSet, url: str) -> str:
    """
    Tries the retailer's price candidates in precedence order and returns the first
    that starts with the currency marker. Retailers without page level candidates
    price each size inside the variant payload; "" is returned for them.
    """
    if not rules.price_candidates:
        return ""
    for candidate in rules.price_candidates:
        price = _candidate_text(document, candidate)
        if price.startswith(rules.currency_marker):
            return price
        if price:
            logger.debug("Ignoring price candidate %s=%r for %s", candidate.selector, price, url)
    raise NoPriceFound(url)


def resolve_field(node: Any, path: FieldPath) -> Any:
    """Walks `path` through nested lists and objects, checking every step."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, (list, tuple)):
                raise VariantLayoutError(f"expected a list at [{step}], got {type(node).__name__}")
            if not -len(node) <= step < len(node):
                raise VariantLayoutError(f"index {step} out of range for {len(node)} values")
            node = node[step]
        else:
            if not isinstance(node, dict):
                raise VariantLayoutError(f"expected an object at [{step!r}], got {type(node).__name__}")
            if step not in node:
                raise VariantLayoutError(f"missing key {step!r}")
            node = node[step]
    return node


def _text_field(node: Any, path: Optional[FieldPath]) -> str:
    if path is None:
        return ""
    value = resolve_field(node, path)
    if value is None:
        return ""
    if isinstance(value, bool) or isinstance(value, (list, tuple, dict)):
        raise VariantLayoutError(f"expected text at {path}, got {type(value).__name__}")
    return str(value).strip()


def read_sizes(values: List[Any], layout: VariantLayout, variant_id: str) -> List[SizeOption]:
    entries = resolve_field(values, layout.sizes)
    if not isinstance(entries, (list, tuple)):
        raise VariantLayoutError(f"expected a size list at {layout.sizes}, got {type(entries).__name__}")
    sizes = []
    for entry in entries:
        try:
            label = _text_field(entry, layout.size_label).strip(' "')
            price = _text_field(entry, layout.size_price)
        except VariantLayoutError as e:
            logger.debug("Skipping malformed size of variant %s: %s", variant_id, e)
            continue
        if label:
            sizes.append(SizeOption(label=label, price=price))
    return sizes


def read_variant(variant_id: str, values: List[Any], layout: VariantLayout, ctx: ExtractionContext,
                 document: HtmlDocument) -> VariantGroup:
    """Maps one payload entry to a VariantGroup, falling back to page level values."""
    rules = ctx.rules
    image_url = _text_field(values, layout.image_url)
    if not image_url and layout.image_url_template:
        image_url = layout.image_url_template.format(variant_id=variant_id)
    if not image_url and rules.image_selector:
        image_url = document.attr(rules.image_attribute, rules.image_selector)

    width = _text_field(values, layout.width)
    if not width and rules.width_selector:
        width = document.text(rules.width_selector)

    return VariantGroup(
        variant_id=variant_id,
        color=_text_field(values, layout.color) or ctx.color,
        width=width,
        price=_text_field(values, layout.price),
        image_url=image_url,
        sizes=read_sizes(values, layout, variant_id),
    )


def _matches(values: List[Any], layout: VariantLayout) -> bool:
    if layout.match_path is None or layout.match_text is None:
        return True
    try:
        value = resolve_field(values, layout.match_path)
    except VariantLayoutError:
        return False
    return layout.match_text.lower() in str(value).lower()


def extract_variants(document: HtmlDocument, ctx: ExtractionContext) -> List[VariantGroup]:
    rules = ctx.rules
    layout = rules.variants
    raw_text = document.script_text(rules.payload.script_selector)
    payload = find_embedded_payload(
        raw_text,
        start_sentinel=rules.payload.start_sentinel,
        end_sentinel=rules.payload.end_sentinel,
        brace_balanced=rules.payload.brace_balanced,
    )
    if isinstance(payload, ParseFailure):
        raise NoVariantsFound(ctx.url, str(payload))

    if layout.root_key is not None:
        # an empty attribute set is serialized as [] rather than {}
        root = (payload.get(layout.root_key) or [None])[0]
        payload = normalize_payload(root)
        if isinstance(payload, ParseFailure):
            raise NoVariantsFound(ctx.url, f"{layout.root_key!r}: {payload}")

    variants = []
    for variant_id, values in payload.items():
        if not _matches(values, layout):
            continue
        try:
            variant = read_variant(variant_id, values, layout, ctx, document)
        except VariantLayoutError as e:
            logger.debug("Skipping malformed variant %s on %s: %s", variant_id, ctx.url, e)
            continue
        if not variant.sizes:
            logger.debug("Skipping variant %s on %s: no sizes", variant_id, ctx.url)
            continue
        variants.append(variant)

    if not variants:
        raise NoVariantsFound(ctx.url, f"none of {len(payload)} payload entries usable")
    return variants


def flatten(variants: List[VariantGroup], ctx: ExtractionContext) -> List[ProductVariantRecord]:
    """
    One record per (variant, size). The price is the first of size, variant and page
    price that starts with the currency marker; sizes without one are dropped.
    """
    marker = ctx.rules.currency_marker
    records = []
    for variant in variants:
        for size in variant.sizes:
            price = next((p for p in (size.price, variant.price, ctx.price) if p.startswith(marker)), "")
            if not price:
                logger.debug("No price for size %s of variant %s on %s", size.label, variant.variant_id, ctx.url)
                continue
            records.append(ProductVariantRecord(
                keyword=ctx.keyword,
                brand=ctx.brand,
                name=ctx.name,
                price=price,
                url=ctx.url,
                image_url=variant.image_url,
                size=size.label,
                width=variant.width,
                color=variant.color,
                gender=ctx.gender,
                retailer=ctx.rules.retailer_name,
            ))
    return records


def extract_product(page: DetailPage, keyword: str, rules: ExtractionRuleSet) -> List[ProductVariantRecord]:
    """
    Turns one detail page into records. Raises an ExtractionFailure subclass when
    the product has to be skipped; a returned list is never empty.
    """
    document = page.document
    ctx = ExtractionContext(keyword=keyword, url=page.url, rules=rules)

    ctx.title = derive_title(document, rules)
    if is_juvenile(ctx.title, rules.juvenile_markers):
        raise OutOfScopeProduct(page.url, ctx.title)

    ctx.gender, ctx.name, remainder = split_gender_and_name(ctx.title, rules.gender)
    if rules.gender.color_from_remainder:
        ctx.color = remainder

    ctx.brand = extract_brand(document, ctx.title, rules.brand)
    if not ctx.brand:
        logger.debug("No brand found on %s", page.url)

    ctx.price = extract_price(document, rules, page.url)

    variants = extract_variants(document, ctx)
    records = flatten(variants, ctx)
    if not records:
        raise NoPriceFound(page.url, "no size carries a price")
    return records
