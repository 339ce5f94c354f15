from vinscan.core.vehicle_types import ScanMode
from vinscan.prompting import prompt_builder, schemas


def test_vin_decode_instruction_mentions_vin_and_fuel_choices():
    text = prompt_builder.build_vin_decode_instruction("VSSZZZ5FZKR000001")
    assert "VSSZZZ5FZKR000001" in text
    assert '"Électrique"' in text
    assert text.endswith("Réponds uniquement en JSON pur.")


def test_image_decode_instruction_varies_by_mode():
    vin_text = prompt_builder.build_image_decode_instruction(ScanMode.VIN)
    card_text = prompt_builder.build_image_decode_instruction(ScanMode.REGISTRATION)
    assert vin_text != card_text
    assert "'Q' -> '0'" in vin_text
    assert "carte grise" in card_text


def test_report_instruction_fixed_sections_in_order():
    text = prompt_builder.build_report_instruction("VF1RFB00123456789")
    positions = [
        text.index("### 1."),
        text.index("### 2."),
        text.index("### 3."),
        text.index("### 4."),
    ]
    assert positions == sorted(positions)
    assert "| **WMI** | VF1 |" in text
    assert "| **VDS** | RFB001 |" in text
    assert "| **VIS** | 23456789 |" in text


def test_valuation_instruction_defaults():
    text = prompt_builder.build_valuation_instruction({"brand": "PEUGEOT", "model": "208"})
    assert "- Marque: PEUGEOT" in text
    assert "- Motorisation: N/A" in text
    assert f"- Notes sur l'état: {prompt_builder.DEFAULT_CONDITION_NOTES}" in text


def test_schema_required_fields():
    assert set(schemas.VIN_DECODE_SCHEMA["required"]) == {
        "brand", "model", "deductionReasoning", "yearOfManufacture", "motorization", "fuelType",
    }
    assert set(schemas.IMAGE_DECODE_SCHEMA["required"]) == {"brand", "vin", "model"}
    assert schemas.REFINE_SCHEMA["required"] == []
    props = schemas.MARKET_VALUE_SCHEMA["properties"]
    assert props["marketValueMin"]["type"] == "INTEGER"
    assert props["marketValueMax"]["type"] == "INTEGER"
    assert props["marketValueJustification"]["type"] == "STRING"
