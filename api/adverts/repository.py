"""
Advert persistence (raw SQL).
This module is the only place that reads or writes the `advert` table.
"""

from __future__ import annotations

from typing import Any

from core import db

from .schemas import Advert


def _row_to_advert(row: dict[str, Any]) -> Advert:
    return Advert(
        id=int(row["id"]),
        title=row["title"] or "",
        description=row["description"] or "",
        price=float(row["price"] or 0.0),
        image=row["image_path"] or "",
    )


async def list_adverts(*, conn: Any = None) -> list[Advert]:
    """
    Return every advert, newest id first. There is no limit/offset.
    """
    rows = await db.fetch_all(
        """
        SELECT id, title, description, price, image_path
        FROM advert
        ORDER BY id DESC
        """,
        conn=conn,
    )
    return [_row_to_advert(row) for row in rows]


async def create_advert(advert: Advert, *, conn: Any = None) -> Advert:
    row = await db.fetch_one(
        """
        INSERT INTO advert (title, description, price, image_path)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        advert.title,
        advert.description,
        advert.price,
        advert.image,
        conn=conn,
    )
    if row is None:
        return advert
    return advert.model_copy(update={"id": int(row["id"])})


async def delete_advert(advert_id: int, *, conn: Any = None) -> None:
    # Deleting a missing id is not an error.
    await db.execute(
        """
        DELETE FROM advert
        WHERE id = $1
        """,
        advert_id,
        conn=conn,
    )
