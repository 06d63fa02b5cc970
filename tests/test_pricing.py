"""
Tests for the pickup price calculator and minor-unit conversion.
"""
import pytest

from rapidwaste.models.booking import BagCountEnum, ServiceTypeEnum
from rapidwaste.services.pricing import calculate_price, from_minor_units, to_minor_units


class TestCalculatePrice:
    """Base price + bag surcharge + urgent fee"""

    @pytest.mark.parametrize("service_type, base", [
        ("regular", 45),
        ("emergency", 50),
        ("bulk", 79),
    ])
    @pytest.mark.parametrize("bag_count, surcharge", [
        ("1-5", 0),
        ("6-10", 5),
        ("11+", 10),
    ])
    @pytest.mark.parametrize("urgent, fee", [(False, 0), (True, 15)])
    def test_price_table(self, service_type, base, bag_count, surcharge, urgent, fee):
        assert calculate_price(service_type, bag_count, urgent) == base + surcharge + fee

    def test_documented_examples(self):
        assert calculate_price("regular", "1-5", False) == 45
        assert calculate_price("bulk", "11+", True) == 104
        assert calculate_price("emergency", "6-10", False) == 55

    def test_accepts_enum_members(self):
        assert calculate_price(ServiceTypeEnum.BULK, BagCountEnum.MEDIUM, True) == 99

    def test_unknown_service_type_priced_as_regular(self):
        assert calculate_price("commercial", "1-5") == 45

    def test_unknown_bag_count_adds_nothing(self):
        assert calculate_price("emergency", "50+") == 50

    def test_urgent_defaults_to_false(self):
        assert calculate_price("regular", "6-10") == 50


class TestMinorUnits:

    def test_whole_amount(self):
        assert to_minor_units(45) == 4500

    def test_rounds_half_up(self):
        assert to_minor_units(10.005) == 1001

    def test_from_minor_units(self):
        assert from_minor_units(10400) == 104.0
