import json
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from scenebreak.services.errors import BreakdownSchemaError, ParseError
from scenebreak.services.response_parser import extract_json_object, find_balanced_object, parse_breakdown
from scenebreak.services.schemas import BreakdownPayload, validate_breakdown


FULL_BREAKDOWN = {
    "characters": ["John", "Mary"],
    "locations": ["Coffee shop"],
    "themes": ["money", "trust"],
    "tone": "Tense and bitter",
    "structure": "Setup, argument, walkout",
    "technicalNotes": "Handheld close-ups",
    "visualElements": "Spilled coffee, rain on the window",
    "emotionalArc": "Irritation to open hostility",
}


def test_parse_breakdown_tolerates_surrounding_prose():
    raw = "Sure! Here is the breakdown:\n```json\n" + json.dumps(FULL_BREAKDOWN) + "\n```\nLet me know."

    result = parse_breakdown(raw)

    assert result.characters == ["John", "Mary"]
    assert result.locations == ["Coffee shop"]
    assert result.themes == ["money", "trust"]
    assert result.tone == "Tense and bitter"
    assert result.technical_notes == "Handheld close-ups"
    assert result.to_api() == FULL_BREAKDOWN


def test_missing_keys_take_defaults():
    result = parse_breakdown('{"characters": ["Ada"], "tone": "Quiet"}')

    assert result.characters == ["Ada"]
    assert result.locations == []
    assert result.themes == []
    assert result.tone == "Quiet"
    assert result.structure == ""
    assert result.emotional_arc == ""


def test_null_values_take_defaults():
    result = parse_breakdown('{"characters": null, "tone": null, "emotionalArc": "Rises"}')

    assert result.characters == []
    assert result.tone == ""
    assert result.emotional_arc == "Rises"


def test_no_json_object_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_breakdown("Here is my analysis: no JSON provided.")

    assert "valid JSON" in str(excinfo.value)
    assert excinfo.value.raw_text == "Here is my analysis: no JSON provided."


def test_unbalanced_object_raises_parse_error():
    with pytest.raises(ParseError):
        parse_breakdown('Result: {"characters": ["John"], "tone": "tense"')


def test_unclosed_brace_in_prose_is_skipped():
    raw = 'Format { like so\n{"tone": "x"}'

    assert find_balanced_object(raw) == '{"tone": "x"}'
    assert parse_breakdown(raw).tone == "x"


def test_invalid_json_inside_braces_raises_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_breakdown("{characters: [John, Mary]}")

    assert not isinstance(excinfo.value, BreakdownSchemaError)


def test_empty_output_raises_parse_error():
    with pytest.raises(ParseError):
        parse_breakdown("")
    with pytest.raises(ParseError):
        parse_breakdown(None)


def test_braces_inside_strings_do_not_end_the_object():
    raw = 'prefix {"tone": "uses } and { freely", "structure": "say \\"}\\" twice"} trailing }'

    candidate = find_balanced_object(raw)

    assert candidate == '{"tone": "uses } and { freely", "structure": "say \\"}\\" twice"}'
    assert json.loads(candidate)["tone"] == "uses } and { freely"


def test_nested_objects_are_kept_whole():
    raw = 'x {"tone": "calm", "extra": {"nested": {"deep": 1}}} y {"tone": "second"}'

    data = extract_json_object(raw)

    assert data == {"tone": "calm", "extra": {"nested": {"deep": 1}}}
    assert parse_breakdown(raw).tone == "calm"


def test_only_the_leftmost_object_is_used():
    raw = '{"tone": "first"} and later {"tone": "second"}'

    assert parse_breakdown(raw).tone == "first"


def test_wrong_types_raise_structured_schema_error():
    raw = json.dumps({"characters": [1, 2], "tone": ["not", "a", "string"], "themes": "solo"})

    with pytest.raises(BreakdownSchemaError) as excinfo:
        parse_breakdown(raw)

    fields = {error["field"].split(".")[0] for error in excinfo.value.errors}
    assert fields == {"characters", "tone", "themes"}
    assert "characters" in str(excinfo.value)


def test_snake_case_keys_are_accepted():
    payload = validate_breakdown({"technical_notes": "Wide lens", "visual_elements": "Neon"})

    assert payload.technical_notes == "Wide lens"
    assert payload.to_api()["visualElements"] == "Neon"
    assert payload.to_columns()["visual_elements"] == "Neon"


def test_non_object_payload_is_rejected():
    with pytest.raises(BreakdownSchemaError):
        validate_breakdown(["characters"])


def test_payload_defaults_are_independent():
    first = BreakdownPayload()
    second = BreakdownPayload()

    assert first.characters == [] and second.characters == []
    assert first.characters is not second.characters
