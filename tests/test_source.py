import json
from unittest import mock

import pytest
import requests

from yadokari.errors import MalformedResponse, SourceUnavailable
from yadokari.source import ListingSourceClient
from tests.fakes import fake_response

RECORD = {
    "id": 40001,
    "name": "Sunny Heights",
    "detailUrl": "https://example.test/units/40001",
    "imageUrl": "https://example.test/img/40001.jpg",
    "normalRent": 85000,
    "discountedRent": None,
    "normalCommonFee": "2,500円",
    "unitType": "2LDK",
    "floorAreaText": "55&#13217;",
    "accessText": "Line A<br>5 min walk",
    "categoryLabel": "Standard",
    "rowSpan": 2,
    "regionLabel": "Tokyo",
    "somethingElse": "ignored",
}


def _client(resp=None, error=None):
    session = mock.Mock(spec=requests.Session)
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = resp
    return ListingSourceClient("https://listings.example.test/search", timeout=3.0, session=session), session


def test_fetch_posts_region_form_and_parses_records():
    client, session = _client(fake_response(json_data=[RECORD]))

    listings = client.fetch("13")

    session.post.assert_called_once_with(
        "https://listings.example.test/search",
        data={"tdfk": "13", "is_sp": "false"},
        timeout=3.0,
    )
    assert len(listings) == 1
    li = listings[0]
    assert li.identity_key == ("40001", "85000", 2)
    assert li.unit_type == "2LDK"
    assert li.discounted_rent is None


def test_empty_array_is_a_valid_snapshot():
    client, _ = _client(fake_response(json_data=[]))
    assert client.fetch("13") == []


@pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
def test_transport_failures(error):
    client, _ = _client(error=error)
    with pytest.raises(SourceUnavailable):
        client.fetch("13")


def test_http_error_status():
    client, _ = _client(fake_response(status=503))
    with pytest.raises(SourceUnavailable):
        client.fetch("13")


def test_non_json_body():
    client, _ = _client(fake_response(json_error=json.JSONDecodeError("Expecting value", "<html>", 0)))
    with pytest.raises(MalformedResponse):
        client.fetch("13")


def test_object_instead_of_array():
    client, _ = _client(fake_response(json_data={"error": "maintenance"}))
    with pytest.raises(MalformedResponse):
        client.fetch("13")


def test_record_missing_required_field():
    broken = {k: v for k, v in RECORD.items() if k != "rowSpan"}
    client, _ = _client(fake_response(json_data=[broken]))
    with pytest.raises(MalformedResponse):
        client.fetch("13")
