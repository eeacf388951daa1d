"""Tests for the citation link allow-list validator."""

import pytest

from health_links.links.validator import (
    DomainNotAllowedError,
    InsecureSchemeError,
    LinkValidationError,
    MalformedLinkError,
    TrackingParameterError,
    check_link,
    filter_valid_links,
    is_allowed_host,
    is_valid_link,
    validate_links,
)


class TestIsAllowedHost:
    """Test host matching against the allow-list."""

    def test_exact_domain(self):
        assert is_allowed_host("kdca.go.kr") is True

    def test_subdomain(self):
        assert is_allowed_host("health.kdca.go.kr") is True
        assert is_allowed_host("nedrug.mfds.go.kr") is True

    def test_www_prefix_is_stripped(self):
        assert is_allowed_host("www.who.int") is True

    def test_case_and_trailing_dot(self):
        assert is_allowed_host("WWW.CDC.GOV.") is True

    def test_suffix_without_dot_boundary_is_rejected(self):
        """A domain that merely ends with an allowed name is not a subdomain."""
        assert is_allowed_host("evilkdca.go.kr") is False
        assert is_allowed_host("notwho.int") is False

    def test_allowed_name_as_subdomain_of_other_domain(self):
        assert is_allowed_host("kdca.go.kr.evil.com") is False


class TestCheckLink:
    """Test the strict single-link check and its error classes."""

    def test_valid_link_passes(self):
        check_link("https://www.kdca.go.kr/page?q=1")

    def test_http_is_rejected(self):
        with pytest.raises(InsecureSchemeError) as exc_info:
            check_link("http://www.kdca.go.kr/")
        assert exc_info.value.rule == "scheme"

    def test_unknown_domain_is_rejected(self):
        with pytest.raises(DomainNotAllowedError) as exc_info:
            check_link("https://example.com/")
        assert "example.com" in str(exc_info.value)

    @pytest.mark.parametrize("param", ["utm_source", "utm_medium", "utm_campaign"])
    def test_tracking_parameters_are_rejected(self, param):
        with pytest.raises(TrackingParameterError):
            check_link(f"https://www.who.int/news?{param}=x")

    def test_blank_tracking_parameter_is_still_rejected(self):
        with pytest.raises(TrackingParameterError):
            check_link("https://www.who.int/news?utm_source=")

    def test_other_utm_parameters_pass(self):
        check_link("https://www.who.int/news?utm_term=x")

    @pytest.mark.parametrize("raw", ["", "   ", "not a url", "https://", None, 42])
    def test_malformed(self, raw):
        with pytest.raises(MalformedLinkError):
            check_link(raw)

    def test_invalid_port_is_malformed(self):
        with pytest.raises(MalformedLinkError):
            check_link("https://kdca.go.kr:notaport/")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            check_link("ftp://kdca.go.kr/")


class TestBatchValidation:
    """Test the lenient filter and the strict batch check."""

    def test_filter_keeps_order_and_drops_invalid(self):
        urls = [
            "https://pubmed.ncbi.nlm.nih.gov/?term=x",
            "http://kdca.go.kr/",
            "https://evilkdca.go.kr/",
            "https://www.google.com/search?q=site%3Akdca.go.kr+x",
        ]

        assert filter_valid_links(urls) == [urls[0], urls[3]]

    def test_filter_never_raises_on_non_list(self):
        assert filter_valid_links(None) == []
        assert filter_valid_links("https://kdca.go.kr/") == []

    def test_filter_skips_non_string_entries(self):
        assert filter_valid_links([None, 1, "https://cdc.gov/"]) == ["https://cdc.gov/"]

    def test_validate_links_rejects_empty_list(self):
        with pytest.raises(LinkValidationError):
            validate_links([])

    def test_validate_links_raises_first_violation(self):
        with pytest.raises(InsecureSchemeError):
            validate_links(["https://cdc.gov/", "http://cdc.gov/", "https://example.com/"])

    def test_validate_links_accepts_all_valid(self):
        validate_links(["https://cdc.gov/", "https://www.nice.org.uk/guidance"])

    def test_is_valid_link(self):
        assert is_valid_link("https://medlineplus.gov/") is True
        assert is_valid_link("https://medlineplus.gov.evil.com/") is False
