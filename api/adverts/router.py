"""
FastAPI router for advert endpoints.

Responses always use the envelope from `core.envelope` with HTTP 200;
failures are reported in the `error` field only.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, UploadFile

from core import db, envelope

from . import repository, service
from .schemas import Advert

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/api/ads")
async def list_adverts() -> dict:
    """
    List all adverts, newest first, with `ad_image` turned into a full URL.
    """
    try:
        adverts = await repository.list_adverts()
    except db.DatabaseError as e:
        logger.warning("list_adverts_failed error=%s", e)
        return envelope.fail(e)

    return envelope.ok(
        [
            advert.model_copy(update={"image": service.image_url(advert.image)}).public()
            for advert in adverts
        ]
    )


@router.post("/api/ads")
async def create_advert(
    title: str = Form(default=""),
    description: str = Form(default=""),
    price: str = Form(default=""),
    ad_image: UploadFile | None = File(default=None),
) -> dict:
    """
    Store the uploaded image, then insert one advert row pointing at it.
    """
    try:
        filename = await service.save_upload(ad_image)
    except service.UploadError as e:
        logger.warning("advert_upload_failed error=%s", e)
        return envelope.fail(e)

    advert = Advert(
        title=title,
        description=description,
        price=service.parse_price(price),
        image=filename,
    )
    try:
        await repository.create_advert(advert)
    except db.DatabaseError as e:
        logger.warning("create_advert_failed error=%s", e)
        return envelope.fail(e)

    return envelope.ok("created")


@router.delete("/api/ads/{advert_id}")
async def delete_advert(advert_id: str) -> dict:
    try:
        await repository.delete_advert(service.parse_advert_id(advert_id))
    except db.DatabaseError as e:
        logger.warning("delete_advert_failed advert_id=%s error=%s", advert_id, e)
        return envelope.fail(e)

    return envelope.ok("deleted")
