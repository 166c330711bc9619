"""Pricing, cart, identifier and stay charge endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from api.base import success_response
from api.middleware import get_request_id
from billing.cart import calculate_totals, resolve_global_discount, apply_global_discount
from billing.config import BillingPolicy
from billing.exceptions import StayChargeNotFoundError
from billing.identifiers import generate_id, parse_id, parse_as
from billing.models import (
    PriceSpec, LineItem, GlobalDiscount, GlobalDiscountMode,
    IdPrefix, TransferCreate,
)
from billing.pricing import calculate_net_price, suggest_tiers


class TiersRequest(BaseModel):
    net_price_paise: int


class CartTotalsRequest(BaseModel):
    items: list[LineItem] = Field(default_factory=list)
    base_charge_paise: int = 0
    global_discount: GlobalDiscount | None = None
    mode: GlobalDiscountMode = GlobalDiscountMode.CORRECTED


class ParseIdentifierRequest(BaseModel):
    text: str
    prefix: IdPrefix | None = None


class GenerateIdentifierRequest(BaseModel):
    prefix: IdPrefix


class BillRequest(BaseModel):
    bill_number: str | None = None


def create_billing_router(services: dict, policy: BillingPolicy) -> APIRouter:
    router = APIRouter()

    stay_charge_svc = services["stay_charge"]

    def respond(request: Request, data):
        return success_response(data, request_id=get_request_id(request)).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    @router.post("/pricing/net-price")
    async def net_price(request: Request, body: PriceSpec):
        return respond(request, calculate_net_price(body).model_dump(mode="json"))

    @router.post("/pricing/tiers")
    async def tiers(request: Request, body: TiersRequest):
        return respond(request, suggest_tiers(body.net_price_paise, policy).model_dump(mode="json"))

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------

    @router.post("/cart/totals")
    async def cart_totals(request: Request, body: CartTotalsRequest):
        base = calculate_totals(body.items, body.base_charge_paise)
        totals = base
        if body.global_discount is not None:
            amount = resolve_global_discount(base, body.global_discount)
            totals = apply_global_discount(base, amount, body.mode)

        return respond(request, {
            "totals": totals.model_dump(mode="json"),
            "before_global_discount": base.model_dump(mode="json"),
        })

    # -------------------------------------------------------------------------
    # Identifiers
    # -------------------------------------------------------------------------

    @router.post("/identifiers/parse")
    async def parse_identifier(request: Request, body: ParseIdentifierRequest):
        parsed = parse_id(body.text)
        if parsed is not None and body.prefix is not None:
            if parse_as(body.text, body.prefix) is None:
                parsed = None

        if parsed is None:
            return respond(request, {"recognized": False, "prefix": None, "sequence": None})

        return respond(request, {
            "recognized": True,
            "prefix": parsed.prefix.value,
            "sequence": parsed.sequence,
        })

    @router.post("/identifiers/generate")
    async def generate_identifier(request: Request, body: GenerateIdentifierRequest):
        return respond(request, {"identifier": generate_id(body.prefix)})

    # -------------------------------------------------------------------------
    # Stay charges
    # -------------------------------------------------------------------------

    @router.post("/stay-charges")
    async def record_transfer(request: Request, body: TransferCreate):
        charge = stay_charge_svc.record_transfer(body)
        return respond(request, charge.model_dump(mode="json"))

    @router.get("/stay-charges")
    async def list_pending(request: Request, patient_id: str = Query(..., min_length=1)):
        charges = stay_charge_svc.list_pending_for_patient(patient_id)
        return respond(request, [c.model_dump(mode="json") for c in charges])

    @router.get("/stay-charges/{charge_id}")
    async def get_charge(request: Request, charge_id: UUID):
        charge = stay_charge_svc.get_by_id(charge_id)
        if charge is None:
            raise StayChargeNotFoundError(charge_id)
        return respond(request, charge.model_dump(mode="json"))

    @router.post("/stay-charges/{charge_id}/bill")
    async def bill_charge(request: Request, charge_id: UUID, body: BillRequest | None = None):
        bill_number = body.bill_number if body else None
        charge = stay_charge_svc.mark_billed(charge_id, bill_number)
        return respond(request, charge.model_dump(mode="json"))

    return router
