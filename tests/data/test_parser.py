"""Unit tests for the CSV parsers."""

from studio_metrics.data import parser
from studio_metrics.data.layouts import CLIENT_LAYOUT, STUDIO_LAYOUT, TRAINER_LAYOUT
from studio_metrics.data.models import (
    ClientMetricRecord,
    StudioMetricRecord,
    TrainerMetricRecord,
)


def test_parse_studio_records(studio_csv):
    records = parser.parse_records(studio_csv, STUDIO_LAYOUT)
    assert len(records) == 7
    first = records[0]
    assert isinstance(first, StudioMetricRecord)
    assert first.location == "Kwality House"
    assert first.category == "Memberships"
    assert first.product == "Annual Plan"
    assert first.metric == "Gross Sales"
    assert first.total == "2200"
    assert first.value("dec") == "₹1,200"
    assert first.value("nov") == "1000"
    assert first.value("jan") == ""


def test_parse_trainer_records_reads_columns_newest_first(trainer_csv):
    records = parser.parse_records(trainer_csv, TRAINER_LAYOUT)
    assert [type(record) for record in records] == [TrainerMetricRecord] * 3
    asha = records[0]
    assert asha.trainer == "Asha"
    assert asha.is_new == "New"
    assert asha.value("jun-2025") == "120"
    assert asha.value("may-2025") == "90"
    assert asha.value("jun-2024") == "100"
    assert asha.total == "310"
    assert asha.metric == "Sessions"


def test_parse_pads_short_rows():
    text = "First Visit Location,Membership,Is New\nSupreme HQ,Annual\n"
    (record,) = parser.parse_records(text, CLIENT_LAYOUT)
    assert isinstance(record, ClientMetricRecord)
    assert record.first_visit_location == "Supreme HQ"
    assert record.membership == "Annual"
    assert record.is_new == ""
    assert record.metric == ""
    assert all(value == "" for value in record.values.values())


def test_parse_skips_header_and_blank_lines():
    text = "header\n\n , , \n"
    assert parser.parse_records(text, STUDIO_LAYOUT) == []
    assert parser.parse_records("", STUDIO_LAYOUT) == []


def test_quoted_cells_keep_embedded_commas():
    text = 'h\n"Kwality House, Bandra",Memberships,Annual' + "," * 13 + '"1,200",Gross Sales\n'
    (record,) = parser.parse_records(text, STUDIO_LAYOUT)
    assert record.location == "Kwality House, Bandra"
    assert record.total == "1,200"
    assert record.metric == "Gross Sales"
