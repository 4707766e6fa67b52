import pytest

from parceltrack.core.exceptions import ErrorCode
from parceltrack.models.tracking_status import (
    AFTERSHIP_TAG_TO_STATUS,
    CarrierVocabulary,
    TrackingStatus,
)

FINAL = {TrackingStatus.DELIVERED, TrackingStatus.EXPIRED}
ISSUES = {TrackingStatus.FAILED_ATTEMPT, TrackingStatus.EXCEPTION}


@pytest.mark.parametrize("raw", ["delivered", "DELIVERED", "  Delivered  ", "dElIvErEd"])
def test_from_string_is_case_insensitive(raw):
    result = TrackingStatus.from_string(raw)

    assert result.is_success
    assert result.value is TrackingStatus.DELIVERED


@pytest.mark.parametrize("raw", ["", "   ", "shipped", "IN TRANSIT"])
def test_from_string_rejects_unknown_values(raw):
    result = TrackingStatus.from_string(raw)

    assert result.is_failure
    assert result.error_code == ErrorCode.INVALID_STATUS.value
    assert result.error.status_code == 400


@pytest.mark.parametrize("status", list(TrackingStatus))
def test_final_issue_active_law(status):
    assert status.is_final == (status in FINAL)
    assert status.has_issue == (status in ISSUES)
    assert status.is_active == (not status.is_final)


@pytest.mark.parametrize("status", list(TrackingStatus))
def test_every_status_has_label_and_order(status):
    assert status.label
    assert 1 <= status.order <= 6
    assert str(status) == status.value


def test_issue_statuses_rank_with_out_for_delivery():
    assert TrackingStatus.FAILED_ATTEMPT.order == TrackingStatus.OUT_FOR_DELIVERY.order
    assert TrackingStatus.EXCEPTION.order == TrackingStatus.OUT_FOR_DELIVERY.order
    assert TrackingStatus.EXPIRED.order > TrackingStatus.DELIVERED.order


@pytest.mark.parametrize("tag,expected", list(AFTERSHIP_TAG_TO_STATUS.items()))
def test_aftership_tags_map_to_status(tag, expected):
    result = TrackingStatus.from_carrier_tag(tag, CarrierVocabulary.AFTERSHIP)

    assert result.value is expected


def test_available_for_pickup_counts_as_out_for_delivery():
    result = TrackingStatus.from_carrier_tag("AvailableForPickup", "aftership")

    assert result.value is TrackingStatus.OUT_FOR_DELIVERY


@pytest.mark.parametrize("tag", ["Unknown", "delivered", "", None])
def test_unknown_tag_is_explicit_failure(tag):
    result = TrackingStatus.from_carrier_tag(tag, CarrierVocabulary.AFTERSHIP)

    assert result.is_failure
    assert result.error_code == ErrorCode.UNRECOGNIZED_VOCABULARY.value


def test_unknown_vocabulary_is_explicit_failure():
    result = TrackingStatus.from_carrier_tag("Delivered", "shippo")

    assert result.is_failure
    assert result.error_code == ErrorCode.UNRECOGNIZED_VOCABULARY.value
    assert result.error.details == {"vocabulary": "shippo"}


def test_internal_vocabulary_accepts_status_names():
    for status in TrackingStatus:
        assert TrackingStatus.from_carrier_tag(status.value, CarrierVocabulary.INTERNAL).value is status


def test_carrier_vocabulary_has_value():
    assert CarrierVocabulary.has_value("aftership")
    assert not CarrierVocabulary.has_value("shippo")


@pytest.mark.parametrize("tag", [{"tag": "Delivered"}, ["Delivered"], 42])
def test_non_string_tag_is_explicit_failure(tag):
    result = TrackingStatus.from_carrier_tag(tag, CarrierVocabulary.AFTERSHIP)

    assert result.is_failure
    assert result.error_code == ErrorCode.UNRECOGNIZED_VOCABULARY.value
    assert result.error.details["tag"] == repr(tag)


def test_unhashable_vocabulary_is_explicit_failure():
    result = TrackingStatus.from_carrier_tag("Delivered", ["aftership"])

    assert result.error_code == ErrorCode.UNRECOGNIZED_VOCABULARY.value
