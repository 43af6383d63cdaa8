"""Tests for config validation."""

from __future__ import annotations

from endpoint_collector.config import CollectionConfig
from endpoint_collector.validator import validate


def _config(**overrides) -> CollectionConfig:
    base = {"url": "https://api.example.com/v1/price", "method": "GET"}
    base.update(overrides)
    return CollectionConfig(**base)


class TestValidate:
    """Validation accumulates every violation and never raises."""

    def test_valid_minimal_config(self) -> None:
        result = validate(_config())
        assert result.valid
        assert result.errors == []

    def test_missing_url(self) -> None:
        result = validate(_config(url=None))
        assert not result.valid
        assert result.errors == ["url is required"]

    def test_relative_url_rejected(self) -> None:
        result = validate(_config(url="/v1/price"))
        assert not result.valid
        assert "not a valid absolute URI" in result.errors[0]

    def test_unsupported_method(self) -> None:
        result = validate(_config(method="DELETE"))
        assert not result.valid
        assert "unsupported method" in result.errors[0]

    def test_method_is_case_sensitive(self) -> None:
        assert not validate(_config(method="get")).valid

    def test_missing_method(self) -> None:
        assert not validate(_config(method=None)).valid

    def test_retry_fields_must_be_non_negative_ints(self) -> None:
        for bad in (-1, 1.5, "3", True):
            result = validate(_config(retry_times=bad, retry_interval=bad))
            assert result.errors == [
                "retryTimes must be a non-negative integer",
                "retryInterval must be a non-negative integer",
            ]

    def test_zero_retry_fields_pass_validation(self) -> None:
        assert validate(_config(retry_times=0, retry_interval=0)).valid

    def test_errors_are_accumulated_in_order(self) -> None:
        result = validate(CollectionConfig(url="", method="PUT", retry_times=-2, retry_interval=-5))
        assert not result.valid
        assert len(result.errors) == 4
        assert result.errors[0] == "url is required"
        assert "unsupported method" in result.errors[1]
        assert "retryTimes" in result.errors[2]
        assert "retryInterval" in result.errors[3]

    def test_unknown_response_type(self) -> None:
        result = validate(_config(response_type="xml"))
        assert not result.valid
        assert "responseType" in result.errors[0]

    def test_output_mapping_shapes(self) -> None:
        assert validate(_config(output_mapping={"price": "data.price"})).valid
        assert validate(_config(output_mapping=[["price", "data.price"]])).valid
        assert not validate(_config(output_mapping="data.price")).valid
        assert not validate(_config(output_mapping=[["price"]])).valid

    def test_headers_must_be_a_mapping(self) -> None:
        result = validate(_config(headers=["Accept: text/plain"]))
        assert result.errors == ["headers must be a mapping of strings"]


class TestHeaderValidation:
    """Header names and values must be strings the HTTP layer can encode."""

    def test_non_latin1_value_rejected(self) -> None:
        result = validate(_config(headers={"X-Name": "€"}))
        assert not result.valid
        assert result.errors == ["headers must be Latin-1 strings: 'X-Name'"]

    def test_non_string_value_rejected(self) -> None:
        result = validate(_config(headers={"X-Id": 1, "Accept": "application/json"}))
        assert result.errors == ["headers must be Latin-1 strings: 'X-Id'"]

    def test_non_string_name_rejected(self) -> None:
        assert not validate(_config(headers={1: "a"})).valid

    def test_latin1_values_accepted(self) -> None:
        assert validate(_config(headers={"X-City": "Zürich", "Authorization": "Bearer abc"})).valid

    def test_defaulted_retry_fields_are_valid(self) -> None:
        assert validate(_config(retry_times=None, retry_interval=None)).valid
