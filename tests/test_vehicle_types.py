import pytest

from vinscan.core.vehicle_types import (
    FUEL_TYPES,
    ChatTurn,
    ConversationHistory,
    FuelType,
    ScanMode,
    VehicleAnalysis,
    split_vin,
)


def test_fuel_types_match_enum_values():
    assert FUEL_TYPES == ["Essence", "Diesel", "Hybride", "Électrique", "N/A"]
    assert FuelType("Électrique") is FuelType.ELECTRIQUE


def test_scan_mode_values():
    assert ScanMode("vin") is ScanMode.VIN
    assert ScanMode("carte grise") is ScanMode.REGISTRATION


def test_split_vin_example():
    sections = split_vin("WVWZZZ1KZAW000001")
    assert sections.wmi == "WVW"
    assert sections.vds == "ZZZ1KZ"
    assert sections.vis == "AW000001"


def test_split_vin_ignores_validity():
    assert split_vin("12") == ("12", "", "")
    assert split_vin("ABCDEFGHIJKLMNOPQRSTU").vis == "JKLMNOPQ"


def test_enrich_merges_camel_case_partials_progressively():
    vehicle = VehicleAnalysis()
    vehicle.enrich({"vin": "VF1RFB00123456789", "brand": "RENAULT", "model": "CLIO"})
    vehicle.enrich({"motorization": "1.5 dCi", "fuelType": "Diesel", "model": None})
    vehicle.enrich({"marketValueMin": 80000, "marketValueMax": 95000})

    assert vehicle.model == "CLIO"
    assert vehicle.fuel_type == "Diesel"
    assert vehicle.market_value_min == 80000
    assert vehicle.to_partial() == {
        "vin": "VF1RFB00123456789",
        "brand": "RENAULT",
        "model": "CLIO",
        "motorization": "1.5 dCi",
        "fuelType": "Diesel",
        "marketValueMin": 80000,
        "marketValueMax": 95000,
    }


def test_enrich_keeps_unknown_keys():
    vehicle = VehicleAnalysis().enrich({"brand": "KIA", "trim": "GT Line"})
    assert vehicle.to_partial() == {"brand": "KIA", "trim": "GT Line"}


def test_vehicle_accepts_wire_names_and_attribute_names():
    a = VehicleAnalysis(licensePlate="12345-A-6")
    b = VehicleAnalysis(license_plate="12345-A-6")
    assert a.license_plate == b.license_plate == "12345-A-6"


def test_conversation_history_is_append_only():
    history = ConversationHistory()
    history.record("Bonjour", "Salut")
    snapshot = history.turns

    history.append("user", "Encore une question")

    assert snapshot == (ChatTurn("user", "Bonjour"), ChatTurn("model", "Salut"))
    assert len(history) == 3
    assert [t.role for t in history] == ["user", "model", "user"]
    with pytest.raises(AttributeError):
        snapshot[0].text = "modifié"


def test_conversation_history_from_dicts():
    history = ConversationHistory([{"role": "user", "text": "Salut"}])
    assert history.turns == (ChatTurn("user", "Salut"),)


def test_chat_turn_rejects_unknown_role():
    with pytest.raises(ValueError):
        ChatTurn("assistant", "hi")
