"""
Label purchase for a chosen rate, recorded as a Shipment.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reefcultures.core.enums import ShipmentStatus
from reefcultures.models.shipping import Shipment
from reefcultures.schemas.shipping import LabelResponse
from reefcultures.services.shipping.base import BaseCarrier
from reefcultures.services.shipping.reducer import to_cents

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def label_cost_cents(label: Dict[str, Any]) -> int:
    """Cost of a purchased label in cents, 0 when the provider omits it."""
    shipment_cost = label.get("shipment_cost")
    if isinstance(shipment_cost, dict):
        amount = shipment_cost.get("amount")
    else:
        amount = shipment_cost
    if amount is None:
        rate = label.get("rate") if isinstance(label.get("rate"), dict) else {}
        amount = (rate.get("shipping_amount") or {}).get("amount")
    return to_cents(amount) or 0


class LabelService:
    def __init__(self, provider: BaseCarrier):
        self.provider = provider

    async def purchase_label(
        self,
        db: AsyncSession,
        rate_id: str,
        order_id: Optional[str] = None,
    ) -> LabelResponse:
        """
        Buy a label for rate_id and record the shipment.

        The label is paid for once the provider call succeeds, so a failed
        database write is logged and returned as a warning instead of an error.

        Raises:
            RateProviderError: If the label purchase fails
        """
        label = await self.provider.create_label(rate_id)
        label_download = label.get("label_download") if isinstance(label.get("label_download"), dict) else {}

        response = LabelResponse(
            tracking_number=_text(label.get("tracking_number")),
            tracking_url=_text(label.get("tracking_url")),
            label_pdf=_text(label_download.get("pdf") or label_download.get("href")),
            label_png=_text(label_download.get("png")),
            label_cost_cents=label_cost_cents(label),
        )

        shipment = Shipment(
            order_id=order_id,
            rate_id=rate_id,
            status=ShipmentStatus.LABEL_PURCHASED,
            carrier=_text(label.get("carrier_id")),
            service=_text(label.get("service_code")) or _text(label.get("service_type")),
            tracking_number=response.tracking_number,
            tracking_url=response.tracking_url,
            label_cost_cents=response.label_cost_cents,
        )

        try:
            db.add(shipment)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception(f"Label purchased for rate {rate_id} but shipment record failed to save")
            response.warning = f"Label purchased, but failed to save shipment record: {str(e)}"

        return response
