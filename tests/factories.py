"""
Test data factories.

Builds GViz rows/responses, raw records and products with sensible defaults.
"""

import json
from typing import Any, Optional
from uuid import uuid4

from models.product import Product, SizeBucket, StockUnit, UnitStatus
from parsers.gviz_parser import RawRecord


HEADER_ROW = ["ID", "NOMBRE PRODUCTO", "DESCRIPCION", "GENERO", "URL IMAGEN", "TALLAS", "STOCK"]


class GvizFactory:
    """
    Factory for GViz table rows and full responses.

    Usage:
        row = GvizFactory.row(["p1", "Vestido", "", "niña", "", "S,M", 2])
        text = GvizFactory.response([HEADER_ROW, ["p1", "Vestido", ...]])
    """

    @staticmethod
    def cell(value: Any) -> Optional[dict]:
        if value is None:
            return None
        return {"v": value}

    @classmethod
    def row(cls, values: list[Any]) -> dict:
        return {"c": [cls.cell(v) for v in values]}

    @classmethod
    def payload(cls, rows: list[list[Any]]) -> dict:
        return {
            "version": "0.6",
            "reqId": "0",
            "status": "ok",
            "table": {
                "cols": [{"id": letter, "label": "", "type": "string"} for letter in "ABCDEFG"],
                "rows": [cls.row(r) for r in rows],
            },
        }

    @classmethod
    def response(cls, rows: list[list[Any]]) -> str:
        """Raw text as the GViz endpoint sends it."""
        return (
            "/*O_o*/\ngoogle.visualization.Query.setResponse("
            + json.dumps(cls.payload(rows))
            + ");"
        )


class RecordFactory:
    """Factory for RawRecord with overridable fields."""

    @staticmethod
    def create(
        id: str = "",
        name: str = "Vestido Flores",
        description: str = "Algodón",
        audience: str = "niña",
        image_url: str = "https://example.com/vestido.jpg",
        sizes: str = "2,4",
        stock: str = "2",
    ) -> RawRecord:
        return RawRecord(
            id=id,
            name=name,
            description=description,
            audience=audience,
            image_url=image_url,
            sizes=sizes,
            stock=stock,
        )


class ProductFactory:
    """
    Factory for Product models with predictable unit IDs.

    Unit IDs are "<product_id>-<size_index>-<unit_index>".
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        name: Optional[str] = None,
        audience: str = "unisex",
        sizes: Optional[dict[str, int]] = None,
        description: str = "",
    ) -> Product:
        n = cls._next_counter()
        product_id = id or f"p{n}-{uuid4().hex[:6]}"
        sizes = sizes if sizes is not None else {"S": 2, "M": 1}

        buckets = tuple(
            SizeBucket(
                size=label,
                units=tuple(
                    StockUnit(id=f"{product_id}-{s_idx}-{u_idx}", status=UnitStatus.AVAILABLE)
                    for u_idx in range(count)
                ),
            )
            for s_idx, (label, count) in enumerate(sizes.items())
        )
        return Product(
            id=product_id,
            name=name or f"Producto {n}",
            description=description,
            audience=audience,
            image_url="",
            price="",
            sizes=buckets,
        )

    @classmethod
    def create_batch(cls, count: int, **kwargs) -> list[Product]:
        return [cls.create(**kwargs) for _ in range(count)]
