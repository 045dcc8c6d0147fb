from datetime import datetime, timedelta, timezone

from attribution_core.package import (
    ActivityKind, AttributionPackage, build_params, build_url, format_sent_at,
)


def test_create_keeps_order_and_drops_none():
    package = AttributionPackage.create([
        ("app_token", "abc"),
        ("environment", None),
        ("needs_response_details", 1),
    ])
    assert package.parameters == (("app_token", "abc"), ("needs_response_details", "1"))
    assert package.path == "/attribution"
    assert package.activity_kind is ActivityKind.ATTRIBUTION


def test_sent_at_format():
    now = datetime(2014, 11, 7, 10, 15, 30, 123456, tzinfo=timezone(timedelta(hours=1)))
    assert format_sent_at(now) == "2014-11-07T10:15:30.123Z+0100"


def test_sent_at_appended_last():
    package = AttributionPackage.create({"app_token": "abc", "environment": "production"})
    now = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    params = build_params(package, now)

    assert params == [
        ("app_token", "abc"),
        ("environment", "production"),
        ("sent_at", "2020-01-02T03:04:05.000Z+0000"),
    ]
    assert len(package.parameters) == 2


def test_build_url_joins_single_slash():
    assert build_url("https://app.example.com/", "/attribution") == "https://app.example.com/attribution"
    assert build_url("https://app.example.com", "attribution") == "https://app.example.com/attribution"


def test_extended_string_lists_parameters():
    package = AttributionPackage.create({"environment": "sandbox", "app_token": "abc"},
                                        client_sdk="python4.0.0")
    text = package.extended_string()

    assert "Path:      /attribution" in text
    assert "ClientSdk: python4.0.0" in text
    assert text.index("app_token") < text.index("environment")
