"""Tests for request payload coercion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest

from invo._payload import resolve_payload


class _ModelV2:
    def model_dump(self, by_alias=False, exclude_none=False):
        assert by_alias and exclude_none
        return {"invoiceNumber": "FAC-1"}


class _ModelV1:
    def dict(self, by_alias=False, exclude_none=False):
        return {"invoiceNumber": "FAC-2"}


class _BadModel:
    def model_dump(self, **kwargs):
        return ["not", "a", "dict"]


@dataclass
class _Line:
    taxRate: float
    baseAmount: float
    surchargeRate: Optional[float] = None


class TestResolvePayload:
    def test_dict_is_copied(self):
        data = {"a": 1}
        result = resolve_payload(data)
        assert result == data
        assert result is not data

    def test_pydantic_v2_style(self):
        assert resolve_payload(_ModelV2()) == {"invoiceNumber": "FAC-1"}

    def test_pydantic_v1_style(self):
        assert resolve_payload(_ModelV1()) == {"invoiceNumber": "FAC-2"}

    def test_dataclass_drops_none(self):
        assert resolve_payload(_Line(taxRate=21, baseAmount=100)) == {"taxRate": 21, "baseAmount": 100}

    def test_non_dict_dump_raises(self):
        with pytest.raises(TypeError, match="expected dict"):
            resolve_payload(_BadModel())

    @pytest.mark.parametrize("value", [None, "text", 42, _ModelV2])
    def test_unsupported_values(self, value):
        with pytest.raises(TypeError):
            resolve_payload(value)
