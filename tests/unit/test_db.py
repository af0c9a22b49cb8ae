"""Tests for Money storage: Decimal <-> BSON Decimal128 and model serialization."""

from decimal import Decimal
from uuid import uuid4

import bson
from bson.binary import UuidRepresentation
from bson.codec_options import CodecOptions
from bson.decimal128 import Decimal128

from ledgerdesk.core.db import TYPE_REGISTRY, DecimalCodec, to_decimal
from ledgerdesk.core.modules.totals.models import PricedLineItem

CODEC_OPTIONS = CodecOptions(type_registry=TYPE_REGISTRY)


class TestDecimalCodec:
    def test_round_trip_keeps_exact_value(self):
        data = bson.encode({"total": Decimal("12.34")}, codec_options=CODEC_OPTIONS)
        decoded = bson.decode(data, codec_options=CODEC_OPTIONS)

        assert decoded["total"] == Decimal("12.34")
        assert isinstance(decoded["total"], Decimal)

    def test_stored_as_decimal128(self):
        data = bson.encode({"total": Decimal("0.10")}, codec_options=CODEC_OPTIONS)
        raw = bson.decode(data)

        assert raw["total"] == Decimal128("0.10")

    def test_nested_document_fields(self):
        item = PricedLineItem(quantity=3, unit_price=Decimal("0.10"), line_total=Decimal("0.30"))
        document = {"_id": uuid4(), "items": [item.model_dump()]}

        options = CodecOptions(type_registry=TYPE_REGISTRY, uuid_representation=UuidRepresentation.STANDARD)
        decoded = bson.decode(bson.encode(document, codec_options=options), codec_options=options)

        assert decoded["items"][0]["line_total"] == Decimal("0.30")
        assert decoded["items"][0]["quantity"] == 3

    def test_codec_transforms(self):
        codec = DecimalCodec()
        assert codec.transform_python(Decimal("-5.5")) == Decimal128("-5.5")
        assert codec.transform_bson(Decimal128("7.25")) == Decimal("7.25")


class TestToDecimal:
    def test_decimal128(self):
        assert to_decimal(Decimal128("125.75")) == Decimal("125.75")

    def test_int_and_float(self):
        assert to_decimal(0) == Decimal(0)
        assert to_decimal(2.5) == Decimal("2.5")

    def test_decimal_passes_through(self):
        value = Decimal("1.01")
        assert to_decimal(value) is value


def test_money_serializes_to_json_number():
    item = PricedLineItem(quantity=2, unit_price=Decimal("10.00"), line_total=Decimal("20.00"))
    assert item.model_dump(mode="json") == {"description": "", "quantity": 2, "unit_price": 10.0, "line_total": 20.0}
