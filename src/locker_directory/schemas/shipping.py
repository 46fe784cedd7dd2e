"""Shipping action request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

ServiceType = Literal["D2L", "L2D", "L2L", "D2D"]

# (collection side, delivery side) shape required by each service type
SERVICE_SHAPES: dict[str, tuple[str, str]] = {
    "D2L": ("address", "terminal"),
    "L2D": ("terminal", "address"),
    "L2L": ("terminal", "terminal"),
    "D2D": ("address", "address"),
}


class Address(BaseModel):
    street_address: str
    local_area: Optional[str] = None
    city: str
    zone: str = Field(..., description="Province or region.")
    code: str = Field(..., description="Postal code.")
    country: str = "ZA"
    company: Optional[str] = None
    type: Literal["residential", "business"] = "residential"
    lat: Optional[float] = None
    lng: Optional[float] = None


class Contact(BaseModel):
    name: str
    mobile_number: str
    email: Optional[str] = None


class Parcel(BaseModel):
    submitted_length_cm: float = Field(default=30.0, gt=0)
    submitted_width_cm: float = Field(default=20.0, gt=0)
    submitted_height_cm: float = Field(default=10.0, gt=0)
    submitted_weight_kg: float = Field(default=1.0, gt=0)
    parcel_description: Optional[str] = None


def _side_payload(side: str, address: Optional[Address], terminal_id: Optional[str]) -> dict[str, Any]:
    if terminal_id:
        return {"terminal_id": terminal_id}
    if address is None:
        raise ValueError(f"{side} address missing")
    return address.model_dump(exclude_none=True)


class _EndpointsMixin(BaseModel):
    service_type: ServiceType
    collection_address: Optional[Address] = None
    collection_terminal_id: Optional[str] = None
    delivery_address: Optional[Address] = None
    delivery_terminal_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_service_shape(self):
        collection_shape, delivery_shape = SERVICE_SHAPES[self.service_type]
        for side, shape, address, terminal in (
            ("collection", collection_shape, self.collection_address, self.collection_terminal_id),
            ("delivery", delivery_shape, self.delivery_address, self.delivery_terminal_id),
        ):
            if shape == "terminal" and not terminal:
                raise ValueError(f"{self.service_type} requires {side}_terminal_id")
            if shape == "address" and address is None:
                raise ValueError(f"{self.service_type} requires {side}_address")
            if shape == "address" and terminal:
                raise ValueError(f"{self.service_type} does not accept {side}_terminal_id")
        return self

    def endpoint_payload(self) -> dict[str, Any]:
        collection_shape, delivery_shape = SERVICE_SHAPES[self.service_type]
        return {
            "collection_address": _side_payload(
                "collection",
                self.collection_address,
                self.collection_terminal_id if collection_shape == "terminal" else None,
            ),
            "delivery_address": _side_payload(
                "delivery",
                self.delivery_address,
                self.delivery_terminal_id if delivery_shape == "terminal" else None,
            ),
        }


class RateRequest(_EndpointsMixin):
    parcels: List[Parcel] = Field(default_factory=lambda: [Parcel()])
    declared_value: Optional[float] = Field(default=None, ge=0)
    opt_in_rates: List[int] = Field(default_factory=list)
    opt_in_time_based_rates: List[int] = Field(default_factory=list)

    def to_upstream(self) -> dict[str, Any]:
        payload = self.endpoint_payload()
        payload["parcels"] = [parcel.model_dump(exclude_none=True) for parcel in self.parcels]
        if self.declared_value is not None:
            payload["declared_value"] = self.declared_value
        payload["opt_in_rates"] = list(self.opt_in_rates)
        payload["opt_in_time_based_rates"] = list(self.opt_in_time_based_rates)
        return payload


class ShipmentRequest(_EndpointsMixin):
    collection_contact: Contact
    delivery_contact: Contact
    service_level_code: str
    collection_date: Optional[date] = None
    parcels: List[Parcel] = Field(default_factory=lambda: [Parcel()])
    special_instructions_collection: Optional[str] = None
    special_instructions_delivery: Optional[str] = None
    customer_reference: Optional[str] = None
    declared_value: Optional[float] = Field(default=None, ge=0)

    def to_upstream(self) -> dict[str, Any]:
        payload = self.endpoint_payload()
        payload.update(
            {
                "collection_contact": self.collection_contact.model_dump(exclude_none=True),
                "delivery_contact": self.delivery_contact.model_dump(exclude_none=True),
                "service_level_code": self.service_level_code,
                "parcels": [parcel.model_dump(exclude_none=True) for parcel in self.parcels],
            }
        )
        if self.collection_date is not None:
            payload["collection_min_date"] = self.collection_date.isoformat()
        optional = {
            "special_instructions_collection": self.special_instructions_collection,
            "special_instructions_delivery": self.special_instructions_delivery,
            "customer_reference": self.customer_reference,
            "declared_value": self.declared_value,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


class ReturnRequest(BaseModel):
    shipment_id: str
    reason: Optional[str] = None
    collection_date: Optional[date] = None

    def to_upstream(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.shipment_id}
        if self.reason:
            payload["reason"] = self.reason
        if self.collection_date is not None:
            payload["collection_min_date"] = self.collection_date.isoformat()
        return payload


class CancelRequest(BaseModel):
    shipment_id: str


class ActionResponse(BaseModel):
    success: bool = True
    data: Any = None


class ActionErrorDetail(BaseModel):
    error: str
    kind: str
    status_code: Optional[int] = None
    cors_detected: bool = False
    advisory: Optional[str] = None
    upstream: Optional[Dict[str, Any]] = None
