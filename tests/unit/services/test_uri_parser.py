"""Unit tests for parsing URLs and intent URIs into launch descriptors."""

import pytest

from applinks.enums import SchemeClass
from applinks.errors import ParseError
from applinks.models.domain import ACTION_VIEW, LaunchDescriptor
from applinks.services.uri_parser import market_descriptor, parse_uri


class TestPlainUris:
    def test_https_url(self):
        descriptor = parse_uri("https://example.com/a")

        assert descriptor.uri == "https://example.com/a"
        assert descriptor.action == ACTION_VIEW
        assert descriptor.package is None
        assert descriptor.fallback_url is None
        assert descriptor.browsable is False
        assert descriptor.scheme_class is SchemeClass.WEB

    def test_scheme_is_case_insensitive(self):
        assert parse_uri("HTTPS://example.com/").is_web

    def test_custom_scheme_with_query_fallback(self):
        descriptor = parse_uri("myapp://open?browser_fallback_url=https://example.com/x")

        assert descriptor.uri == "myapp://open?browser_fallback_url=https://example.com/x"
        assert descriptor.fallback_url == "https://example.com/x"
        assert descriptor.scheme_class is SchemeClass.APP

    def test_encoded_query_fallback_is_decoded(self):
        descriptor = parse_uri(
            "myapp://open?id=7&browser_fallback_url=https%3A%2F%2Fexample.com%2Fx%3Fa%3D1"
        )
        assert descriptor.fallback_url == "https://example.com/x?a=1"

    def test_web_url_query_is_not_a_fallback(self):
        descriptor = parse_uri("https://example.com/?browser_fallback_url=https://other.com")
        assert descriptor.fallback_url is None

    def test_custom_scheme_without_query(self):
        descriptor = parse_uri("geo:37.78,-122.41")
        assert descriptor.scheme == "geo"
        assert descriptor.fallback_url is None

    @pytest.mark.parametrize("url", ["", "example", "/relative/path", "example.com/page"])
    def test_input_without_scheme_has_no_uri_data(self, url):
        descriptor = parse_uri(url)
        assert descriptor.uri is None
        assert descriptor.scheme_class is SchemeClass.NONE

    @pytest.mark.parametrize("url", ["http://[::1", "https://example.com:notaport/"])
    def test_malformed_uri_raises(self, url):
        with pytest.raises(ParseError):
            parse_uri(url)


class TestIntentUris:
    def test_full_intent_uri(self):
        descriptor = parse_uri(
            "intent://scan/#Intent;scheme=zxing;package=com.example.scan;"
            "S.browser_fallback_url=https%3A%2F%2Fexample.com%2Fscan;end"
        )

        assert descriptor.uri == "zxing://scan/"
        assert descriptor.package == "com.example.scan"
        assert descriptor.fallback_url == "https://example.com/scan"
        assert descriptor.action == ACTION_VIEW

    def test_intent_with_web_scheme(self):
        descriptor = parse_uri("intent://example.com/page#Intent;scheme=https;end")
        assert descriptor.uri == "https://example.com/page"
        assert descriptor.is_web

    def test_action_field(self):
        descriptor = parse_uri(
            "intent://share#Intent;scheme=myapp;action=android.intent.action.SEND;end"
        )
        assert descriptor.action == "android.intent.action.SEND"

    def test_intent_without_data_has_no_uri(self):
        descriptor = parse_uri("intent:#Intent;package=com.example.app;end")
        assert descriptor.uri is None
        assert descriptor.package == "com.example.app"

    def test_ignored_fields_and_typed_extras_are_accepted(self):
        descriptor = parse_uri(
            "intent://x#Intent;scheme=myapp;category=android.intent.category.DEFAULT;"
            "launchFlags=0x10000000;i.count=3;f.ratio=0.5;B.flag=true;SEL;end"
        )
        assert descriptor.uri == "myapp://x"

    def test_non_string_fallback_extra_is_ignored(self):
        descriptor = parse_uri("intent://x#Intent;scheme=myapp;i.browser_fallback_url=1;end")
        assert descriptor.fallback_url is None

    def test_fragment_on_custom_scheme(self):
        descriptor = parse_uri("myapp://x#Intent;package=com.example.app;end")
        assert descriptor.uri == "myapp://x"
        assert descriptor.package == "com.example.app"

    @pytest.mark.parametrize(
        "url",
        [
            "intent://x#Intent;scheme=myapp",
            "intent://x#Intent;package;end",
            "intent://x#Intent;unknown=1;end",
            "intent://x#Intent;X.extra=1;end",
            "intent://x#Intent;i.count=many;end",
            "intent://x#Intent;f.ratio=big;end",
            "intent://x",
        ],
    )
    def test_malformed_intent_raises(self, url):
        with pytest.raises(ParseError) as exc_info:
            parse_uri(url)
        assert exc_info.value.url == url

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_uri("intent://x#Intent;package;end")


class TestLaunchDescriptor:
    def test_browsable_flag_does_not_affect_identity(self):
        plain = LaunchDescriptor(uri="https://example.com")
        browsable = plain.as_browsable()

        assert browsable.browsable is True
        assert plain == browsable
        assert hash(plain) == hash(browsable)

    def test_categories(self):
        assert LaunchDescriptor(uri="https://example.com").categories == frozenset()
        assert LaunchDescriptor(uri="https://example.com", browsable=True).categories == {
            "android.intent.category.BROWSABLE"
        }


def test_market_descriptor():
    descriptor = market_descriptor("com.example.app")

    assert descriptor.uri == "market://details?id=com.example.app"
    assert descriptor.package is None
    assert descriptor.scheme == "market"
