import pytest

from verifylink.services.errors import ValidationError
from verifylink.services.validation import require_text, validate_email, validate_http_url


@pytest.mark.parametrize("value", ["bad@scammer.test", " user.name+tag@mail.example.org "])
def test_validate_email_accepts(value: str):
    assert validate_email(value) == value.strip()


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "no-at-sign",
        "a@b",
        "two@@ats.test",
        "spa ce@x.test",
        "bad@scammer..test",
        ".lead@dot.test",
        "a..b@x.test",
        "x@-dash.test",
    ],
)
def test_validate_email_rejects(value):
    with pytest.raises(ValidationError) as exc:
        validate_email(value, "reported_email")
    assert exc.value.detail["field"] == "reported_email"


@pytest.mark.parametrize("value", ["javascript:alert(1)", "data:text/html,x", "ftp://acme.test", "https://", "acme.test"])
def test_validate_http_url_rejects(value: str):
    with pytest.raises(ValidationError):
        validate_http_url(value)


def test_validate_http_url_accepts_https():
    assert validate_http_url(" https://acme.test/shop ") == "https://acme.test/shop"


def test_require_text_min_and_max_length():
    assert require_text("  hello  ", "name") == "hello"
    with pytest.raises(ValidationError) as exc:
        require_text("short", "description", min_length=10)
    assert "at least 10 characters" in exc.value.message
    with pytest.raises(ValidationError):
        require_text("x" * 11, "name", max_length=10)


def test_validate_email_normalizes_domain_case():
    assert validate_email("Bad@Scammer.TEST") == "Bad@scammer.test"
