"""Pricing resolver: base catalog price, then price lists, then quantity breaks.

The optional stages form a small pipeline. Each takes the quote so far and
returns it (updated or unchanged) together with a StageOutcome, so a quote
that fell back to a cheaper computation says why. Only InvalidInput (no
product id) and NotFound (no such product or variant) reach the caller.
"""

import asyncio
from decimal import Decimal
from typing import Any, Optional

from opentelemetry.trace import SpanKind
from pydantic import ValidationError

from product_tables.bigcommerce.models import BulkPricingRule, PriceListRecord
from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.errors import InvalidInput, NotFound, ProductTablesError
from product_tables.models.customer import GUEST_GROUP, is_wholesale_name
from product_tables.models.money import quantize_cents
from product_tables.models.outcomes import StageOutcome
from product_tables.models.pricing import PriceQuote, Prices, QuantityBreak
from product_tables.utils.logger import get_logger
from product_tables.utils.tracing import get_tracer

logger = get_logger("product_tables.resolvers.pricing")

VARIANT_STAGE = "variant"
PRICE_LIST_STAGE = "price_list"
QUANTITY_BREAK_STAGE = "quantity_breaks"

DEFAULT_CURRENCY = "USD"
ZERO = Decimal("0.00")

# Upstream failures an optional stage absorbs
_ENRICHMENT_ERRORS = (ProductTablesError, ValidationError)


def coerce_quantity(value: Any) -> int:
    """Positive integer quantity; anything non-numeric, zero or negative becomes 1."""
    if value is None or isinstance(value, bool):
        return 1
    try:
        quantity = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 1
    return quantity if quantity >= 1 else 1


def is_guest_group(customer_group: Optional[str]) -> bool:
    return not customer_group or customer_group.strip().lower() == GUEST_GROUP


def _override(variant_value: Optional[Decimal], product_value: Optional[Decimal]) -> Optional[Decimal]:
    # Absent or zero on the variant means "inherit from the product"
    if variant_value is None or variant_value == 0:
        return product_value
    return variant_value


def select_price_record(records: list[PriceListRecord], variant_id: Optional[str]) -> Optional[PriceListRecord]:
    """Pick the record of one price list that prices this product/variant.

    With a variant: its own record, else the product-level record. Without a
    variant: the product-level record, else the first record returned.
    """
    if not records:
        return None
    product_level = next((r for r in records if r.variant_id is None), None)
    if variant_id:
        for record in records:
            if record.variant_id is not None and str(record.variant_id) == str(variant_id):
                return record
        return product_level
    return product_level or records[0]


def resolve_break_price(rule: BulkPricingRule, calculated_price: Decimal) -> Decimal:
    """Flat unit price for a bulk pricing rule, rounded to cents and never negative."""
    if rule.type == "price":
        price = rule.amount
    elif rule.type == "percent":
        price = calculated_price * (Decimal("1") - rule.amount / Decimal("100"))
    elif rule.type == "fixed":
        price = calculated_price - rule.amount
    else:
        logger.debug("pricing.quantity_breaks.unknown_type", rule_type=rule.type)
        price = calculated_price
    return max(quantize_cents(price), ZERO)


def resolve_quantity_breaks(rules: list[BulkPricingRule], calculated_price: Decimal) -> list[QuantityBreak]:
    return [
        QuantityBreak(
            min=max(rule.quantity_min, 1),
            max=rule.quantity_max,
            price=resolve_break_price(rule, calculated_price),
        )
        for rule in rules
    ]


async def apply_price_list(
    provider: CatalogProvider,
    quote: PriceQuote,
    customer_group: str,
) -> tuple[PriceQuote, StageOutcome]:
    """Price-list override for non-guest groups.

    Record lookups for all lists run concurrently; selection walks the results
    in upstream list order and the last matching list wins.
    """
    if is_guest_group(customer_group):
        return quote, StageOutcome.skipped(PRICE_LIST_STAGE, "guest group")

    try:
        price_lists = await provider.list_price_lists()
    except _ENRICHMENT_ERRORS as e:
        logger.debug("pricing.price_list.unavailable", error=str(e))
        return quote, StageOutcome.degraded(PRICE_LIST_STAGE, f"price lists unavailable: {e}")
    if not price_lists:
        return quote, StageOutcome.skipped(PRICE_LIST_STAGE, "no price lists")

    results = await asyncio.gather(
        *(provider.list_price_list_records(pl.id, quote.product_id) for pl in price_lists),
        return_exceptions=True,
    )

    matched = None
    wholesale = None
    failed = 0
    for price_list, records in zip(price_lists, results):
        if isinstance(records, _ENRICHMENT_ERRORS):
            failed += 1
            logger.debug("pricing.price_list.records_failed", price_list_id=price_list.id, error=str(records))
            continue
        if isinstance(records, BaseException):
            raise records
        record = select_price_record(records, quote.variant_id)
        if record is None or record.price is None:
            continue
        matched = (price_list, record)
        # Any wholesale/b2b match sets the wholesale price; later non-wholesale lists keep it
        if is_wholesale_name(price_list.name):
            wholesale = record.price

    if matched is None:
        if failed == len(price_lists):
            return quote, StageOutcome.degraded(PRICE_LIST_STAGE, "all price list lookups failed")
        return quote, StageOutcome.skipped(PRICE_LIST_STAGE, "no matching price list record")

    price_list, record = matched
    prices_update: dict[str, Any] = {}
    if wholesale is not None:
        prices_update["wholesale"] = wholesale
    quote = quote.model_copy(
        update={
            "price_list_price": record.price,
            "price_list_name": price_list.name,
            "prices": quote.prices.model_copy(update=prices_update),
        }
    )
    return quote, StageOutcome.applied(PRICE_LIST_STAGE, f"price list {price_list.id}")


async def apply_quantity_breaks(provider: CatalogProvider, quote: PriceQuote) -> tuple[PriceQuote, StageOutcome]:
    """Resolve the product's quantity breaks and pick the first tier containing the quantity."""
    try:
        rules = await provider.list_quantity_breaks(quote.product_id)
    except _ENRICHMENT_ERRORS as e:
        logger.debug("pricing.quantity_breaks.unavailable", error=str(e))
        return quote, StageOutcome.degraded(QUANTITY_BREAK_STAGE, f"quantity breaks unavailable: {e}")

    breaks = resolve_quantity_breaks(rules, quote.prices.calculated)
    quote = quote.model_copy(update={"quantity_breaks": breaks})
    if not breaks:
        return quote, StageOutcome.skipped(QUANTITY_BREAK_STAGE, "no quantity breaks")
    if quote.quantity <= 1:
        return quote, StageOutcome.skipped(QUANTITY_BREAK_STAGE, "quantity is 1")

    tier = next((b for b in breaks if b.contains(quote.quantity)), None)
    if tier is None:
        return quote, StageOutcome.skipped(QUANTITY_BREAK_STAGE, "no tier contains quantity")
    quote = quote.model_copy(update={"quantity_break_price": tier.price})
    return quote, StageOutcome.applied(QUANTITY_BREAK_STAGE, f"tier {tier.min}-{tier.max or '*'}")


def _finalize(quote: PriceQuote) -> PriceQuote:
    calculated = quote.prices.calculated
    if quote.quantity_break_price is not None:
        final = quote.quantity_break_price
    elif quote.price_list_price is not None:
        final = quote.price_list_price
    else:
        final = calculated
    retail = quote.price_list_price if quote.price_list_price is not None else calculated
    return quote.model_copy(update={"prices": quote.prices.model_copy(update={"final": final, "retail": retail})})


async def resolve_price(
    provider: CatalogProvider,
    product_id: Any,
    variant_id: Any = None,
    customer_group: Optional[str] = None,
    quantity: Any = 1,
    customer_tags: Optional[list[str]] = None,
) -> PriceQuote:
    """Compute a price quote for one product/variant, customer group and quantity."""
    product_id = str(product_id).strip() if product_id is not None else ""
    if not product_id:
        raise InvalidInput("productId is required")
    variant_id = (str(variant_id).strip() if variant_id is not None else "") or None
    customer_group = (customer_group or "").strip() or GUEST_GROUP
    quantity = coerce_quantity(quantity)

    attrs = {
        "pricing.product_id": product_id,
        "pricing.variant_id": variant_id or "",
        "pricing.customer_group": customer_group,
        "pricing.quantity": quantity,
    }
    with get_tracer().start_as_current_span("pricing.resolve", kind=SpanKind.INTERNAL, attributes=attrs) as span:
        logger.info(
            "pricing.resolve.start",
            product_id=product_id,
            variant_id=variant_id,
            customer_group=customer_group,
            quantity=quantity,
        )
        product = await provider.get_product(product_id)
        base, sale, calculated = product.base_price, product.sale_price, product.calculated_price

        diagnostics: list[StageOutcome] = []
        if variant_id:
            try:
                variant = await provider.get_variant(product_id, variant_id)
            except NotFound:
                raise
            except _ENRICHMENT_ERRORS as e:
                logger.warning("pricing.variant.unavailable", variant_id=variant_id, error=str(e))
                diagnostics.append(StageOutcome.degraded(VARIANT_STAGE, f"variant pricing unavailable: {e}"))
            else:
                base = _override(variant.price, base)
                sale = _override(variant.sale_price, sale)
                calculated = _override(variant.calculated_price, calculated)
                diagnostics.append(StageOutcome.applied(VARIANT_STAGE))

        if calculated is None:
            calculated = base if base is not None else ZERO

        quote = PriceQuote(
            product_id=product_id,
            variant_id=variant_id,
            user_group=customer_group,
            customer_tags=list(customer_tags or []),
            quantity=quantity,
            prices=Prices(
                base=base,
                sale=sale,
                calculated=calculated,
                retail=calculated,
                wholesale=calculated,
                final=calculated,
            ),
            currency=product.currency or DEFAULT_CURRENCY,
            min_quantity=product.min_quantity or 1,
            max_quantity=product.max_quantity,
        )

        quote, outcome = await apply_price_list(provider, quote, customer_group)
        diagnostics.append(outcome)
        quote, outcome = await apply_quantity_breaks(provider, quote)
        diagnostics.append(outcome)

        quote = _finalize(quote).model_copy(update={"diagnostics": diagnostics})
        span.set_attribute("pricing.final_price", str(quote.final_price))
        logger.info(
            "pricing.resolve.done",
            product_id=product_id,
            final_price=str(quote.final_price),
            stages={o.stage: o.status for o in diagnostics},
        )
        return quote
