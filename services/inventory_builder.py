"""
Inventory builder: RawRecord -> Product.

Row tolerance policy: a record that cannot become a Product is skipped,
never raised. build_product() returns None for skips so the rule is
testable on its own.
"""

import math
import re
from typing import Callable, Iterable, Optional
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError
import structlog

from models.product import Audience, Product, SizeBucket, StockUnit
from parsers.gviz_parser import RawRecord

logger = structlog.get_logger(__name__)

# Sizes come as "S, M/L" -> ["S", "M", "L"]
SIZE_SEPARATOR = re.compile(r"[,/]")

# Leading number of a cell like "3.7", "2 unidades", "-1", ".5"
LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class IdAllocator:
    """Hands out short random IDs, never repeating one within a build."""

    def __init__(self, taken: Iterable[str] = ()):
        self._taken = set(taken)

    def __call__(self) -> str:
        while True:
            candidate = uuid4().hex[:12]
            if candidate not in self._taken:
                self._taken.add(candidate)
                return candidate


def parse_unit_count(raw: str, max_units: Optional[int] = None) -> int:
    """
    Number of stock units for a stock cell.

    Reads the leading number, truncates toward zero and clamps
    negatives, blanks, text and non-finite values to 0.

    Examples:
        "3.7" -> 3, "2 unidades" -> 2, "" -> 0, "abc" -> 0, "-4" -> 0
    """
    match = LEADING_NUMBER.match(raw or "")
    if not match:
        return 0

    value = float(match.group())
    if not math.isfinite(value) or value <= 0:
        return 0

    count = math.floor(value)
    if max_units is not None and count > max_units:
        logger.warning("unit_count_capped", raw=raw, count=count, max_units=max_units)
        return max_units
    return count


def split_sizes(raw: str) -> list[str]:
    """Size labels in sheet order. Empty tokens dropped, duplicates kept."""
    return [token.strip() for token in SIZE_SEPARATOR.split(raw or "") if token.strip()]


def normalize_audience(raw: str) -> str:
    """Lower-case the audience; blank means unisex. Unknown values pass through."""
    value = (raw or "").strip().lower()
    return value or Audience.UNISEX.value


def build_product(
    record: RawRecord,
    allocate_id: Callable[[], str],
    allocate_unit_id: Callable[[], str],
    max_units: Optional[int] = None,
) -> Optional[Product]:
    """
    Convert one record into a Product.

    Returns:
        The Product, or None when the record has no usable name
    """
    name = record.name.strip()
    if not name:
        return None

    unit_count = parse_unit_count(record.stock, max_units)
    sizes = tuple(
        SizeBucket(
            size=label,
            units=tuple(StockUnit(id=allocate_unit_id()) for _ in range(unit_count)),
        )
        for label in split_sizes(record.sizes)
    )

    try:
        return Product(
            id=record.id.strip() or allocate_id(),
            name=name,
            description=record.description,
            audience=normalize_audience(record.audience),
            image_url=record.image_url,
            price="",
            sizes=sizes,
        )
    except PydanticValidationError as e:
        logger.debug("product_row_invalid", name=name, error=str(e))
        return None


def build_inventory(
    records: Iterable[RawRecord],
    max_units: Optional[int] = None,
) -> list[Product]:
    """
    Build the product list for one ingestion cycle.

    Never raises. Output keeps the input order of the surviving records.
    """
    records = list(records)
    supplied_ids = {r.id.strip() for r in records if r.id.strip()}
    allocate_id = IdAllocator(taken=supplied_ids)
    allocate_unit_id = IdAllocator()

    products = []
    for record in records:
        product = build_product(record, allocate_id, allocate_unit_id, max_units)
        if product is None:
            logger.debug("product_row_skipped", id=record.id, name=record.name)
            continue
        products.append(product)

    logger.info("inventory_built", records=len(records), products=len(products))
    return products
