"""Customer context resolver: customer + customer group lookups with a guest fallback.

Never raises for upstream failures; the returned context's ``resolution``
records which branch produced it.
"""

from typing import Any

from opentelemetry.trace import SpanKind
from pydantic import ValidationError

from product_tables.bigcommerce.protocol import CatalogProvider
from product_tables.errors import NotFound, ProductTablesError
from product_tables.models.customer import GUEST_GROUP, RETAIL_GROUP, CustomerContext, is_wholesale_name
from product_tables.models.outcomes import ContextResolution
from product_tables.utils.logger import get_logger
from product_tables.utils.tracing import get_tracer

logger = get_logger("product_tables.resolvers.customer_context")

_LOOKUP_ERRORS = (ProductTablesError, ValidationError)


def _dedupe(tags: list[str]) -> list[str]:
    return list(dict.fromkeys(tags))


async def _guest_context(provider: CatalogProvider) -> CustomerContext:
    try:
        group_id = await provider.get_store_default_guest_group_id()
    except _LOOKUP_ERRORS as e:
        logger.warning("customer_context.store_info_failed", error=str(e))
        return CustomerContext.guest(reason=f"store settings unavailable: {e}", degraded=True)
    if group_id is None:
        return CustomerContext.guest(reason="no default guest group")

    try:
        group = await provider.get_customer_group(group_id)
    except _LOOKUP_ERRORS as e:
        logger.warning("customer_context.guest_group_failed", customer_group_id=group_id, error=str(e))
        return CustomerContext.guest(reason=f"default guest group {group_id} unavailable", degraded=True)
    if not group.name.strip():
        return CustomerContext.guest(reason=f"default guest group {group_id} has no name")

    logger.debug("customer_context.guest_group", customer_group_id=group_id, name=group.name)
    return CustomerContext(
        customer_group=group.name.lower(),
        customer_group_id=group_id,
        is_wholesale=is_wholesale_name(group.name),
        resolution=ContextResolution(status="resolved", reason="default guest group"),
    )


async def _customer_context(provider: CatalogProvider, customer_id: str) -> CustomerContext:
    try:
        customer = await provider.get_customer(customer_id)
    except NotFound:
        logger.info("customer_context.customer_not_found", customer_id=customer_id)
        return CustomerContext.guest(reason="customer not found")
    except _LOOKUP_ERRORS as e:
        logger.warning("customer_context.customer_failed", customer_id=customer_id, error=str(e))
        return CustomerContext.guest(reason=f"customer lookup failed: {e}", degraded=True)

    group_id = customer.customer_group_id
    name = f"{customer.first_name or ''} {customer.last_name or ''}".strip()
    context = CustomerContext(
        customer_id=str(customer.id),
        customer_group=RETAIL_GROUP if group_id is not None else GUEST_GROUP,
        customer_group_id=group_id,
        customer_tags=_dedupe(customer.tags),
        is_logged_in=True,
        is_wholesale=group_id is not None,
        email=customer.email,
        name=name or None,
        resolution=ContextResolution(status="resolved"),
    )
    if group_id is None:
        return context

    try:
        group = await provider.get_customer_group(group_id)
    except _LOOKUP_ERRORS as e:
        logger.warning("customer_context.group_failed", customer_group_id=group_id, error=str(e))
        return context.model_copy(
            update={"resolution": ContextResolution(status="degraded", reason=f"customer group {group_id} unavailable")}
        )
    if not group.name.strip():
        return context

    return context.model_copy(
        update={
            "customer_group": group.name.lower(),
            "is_wholesale": is_wholesale_name(group.name),
        }
    )


async def resolve_customer_context(provider: CatalogProvider, customer_id: Any = None) -> CustomerContext:
    """Effective customer classification for a storefront visitor (guest when customer_id is absent)."""
    customer_id = (str(customer_id).strip() if customer_id is not None else "") or None

    attrs = {"customer.id": customer_id or "", "customer.is_guest": customer_id is None}
    with get_tracer().start_as_current_span("customer_context.resolve", kind=SpanKind.INTERNAL, attributes=attrs) as span:
        if customer_id is None:
            context = await _guest_context(provider)
        else:
            context = await _customer_context(provider, customer_id)
        span.set_attribute("customer.group", context.customer_group)
        logger.info(
            "customer_context.resolve.done",
            customer_id=context.customer_id,
            customer_group=context.customer_group,
            is_wholesale=context.is_wholesale,
            resolution=context.resolution.status,
        )
        return context
