# catcare/models/test_models.py
import pytest
from datetime import datetime, timezone
from marshmallow import ValidationError

from catcare.models import Cat, CatGender, CareLog, LogType, parse_weight


@pytest.mark.parametrize("raw, expected", [
    ("Peso", LogType.WEIGHT),
    ("WEIGHT", LogType.WEIGHT),
    ("weight", LogType.WEIGHT),
    (" Alimentazione ", LogType.FEEDING),
    ("grooming", LogType.GROOMING),
    (LogType.LITTER, LogType.LITTER),
])
def test_log_type_from_input_accepts_value_and_name(raw, expected):
    assert LogType.from_input(raw) is expected


@pytest.mark.parametrize("raw", ["Vaccino", "", None, 3])
def test_log_type_from_input_rejects_unknown(raw):
    with pytest.raises(ValidationError) as exc_info:
        LogType.from_input(raw)
    assert 'type' in exc_info.value.messages


def test_log_type_from_stored_falls_back_to_other():
    assert LogType.from_stored("Medico") is LogType.MEDICAL
    assert LogType.from_stored("Vaccino", "log-1") is LogType.OTHER


@pytest.mark.parametrize("raw, expected", [
    ("4.3", 4.3),
    ("4,3", 4.3),
    (" 5 ", 5.0),
    (0, 0.0),
    ("abc", None),
    ("", None),
    (None, None),
    ("-1", None),
    ("nan", None),
    ("inf", None),
    (True, None),
])
def test_parse_weight(raw, expected):
    assert parse_weight(raw) == expected


def test_cat_gender_fallback():
    assert CatGender.from_value("Maschio") is CatGender.MALE
    assert CatGender.from_value("Femmina") is CatGender.FEMALE
    assert CatGender.from_value("Non so") is CatGender.OTHER


def test_cat_from_dict_ignores_unknown_fields_and_keeps_raw_gender():
    cat = Cat.from_dict({
        'cat_id': 'c1', 'name': 'Micio', 'breed': 'Misto', 'age': 2, 'weight': 3,
        'imageUrl': 'x', 'gender': 'Non so', 'legacy_field': True
    })
    assert cat.gender == 'Non so'
    assert cat.gender_kind is CatGender.OTHER
    assert cat.age == 2.0 and isinstance(cat.age, float)
    assert cat.log_sequence == 0


def test_care_log_dict_round_trip():
    log = CareLog(
        log_id='l1', catId='c1', type=LogType.WEIGHT,
        timestamp=datetime(2024, 5, 1, 8, 0, 0, 250, tzinfo=timezone.utc),
        notes='dopo pranzo', value='4.3', sequence=7
    )
    stored = log.to_dict()
    assert stored['type'] == 'Peso'
    assert stored['timestamp'] == '2024-05-01T08:00:00.000250Z'
    assert CareLog.from_dict(stored) == log


def test_care_log_from_dict_tolerates_missing_optional_fields():
    log = CareLog.from_dict({
        'log_id': 'l1', 'catId': 'c1', 'type': 'Lettiera', 'timestamp': '2024-05-01T08:00:00.000Z'
    })
    assert log.notes == ""
    assert log.value is None
    assert log.sequence == 0
