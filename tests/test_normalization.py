import json

import pytest

from vinscan.core.normalization import clean_vin, normalize_image_scan, parse_json_reply, split_data_uri


def test_parse_json_reply_trims_whitespace():
    assert parse_json_reply('\n {"brand": "BMW"} \n') == {"brand": "BMW"}


def test_parse_json_reply_malformed_raises():
    with pytest.raises(json.JSONDecodeError):
        parse_json_reply("```json {}```")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("vf1-rfb 0012", "VF1RFB0012"),
        (None, ""),
        (12345, "12345"),
        ("ÉÀ-ü", ""),
    ],
)
def test_clean_vin(raw, expected):
    assert clean_vin(raw) == expected


def test_normalize_image_scan_missing_optional_fields_become_empty_strings():
    result = normalize_image_scan({"vin": "abc", "brand": "Audi", "model": "a1"})
    assert result["licensePlate"] == ""
    assert result["registrationYear"] == ""
    assert result["brand"] == "AUDI"
    assert result["model"] == "A1"


def test_normalize_image_scan_passes_reasoning_through_unchanged():
    reasoning = "Identifié Audi A1 grâce au code VDS '8X'"
    result = normalize_image_scan({"deductionReasoning": reasoning})
    assert result["deductionReasoning"] == reasoning


def test_normalize_image_scan_drops_undeclared_fields():
    result = normalize_image_scan({"vin": "x", "color": "Rouge"})
    assert "color" not in result
    assert len(result) == 7


def test_normalize_image_scan_coerces_numbers_to_strings():
    result = normalize_image_scan({"registrationYear": 2021, "licensePlate": 123})
    assert result["registrationYear"] == "2021"
    assert result["licensePlate"] == "123"


def test_split_data_uri_with_header():
    image = split_data_uri("data:image/webp;base64,AAAA")
    assert image.mime_type == "image/webp"
    assert image.data == "AAAA"


def test_split_data_uri_empty_payload_falls_back_to_whole_string():
    image = split_data_uri("data:image/png;base64,")
    assert image.data == "data:image/png;base64,"


def test_split_data_uri_bare_payload_defaults_to_jpeg():
    image = split_data_uri("AAAA")
    assert image.mime_type == "image/jpeg"
    assert image.data == "AAAA"
