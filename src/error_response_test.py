import pytest

from declarest.exceptions import ApplicationException, ErrorResponse, HttpApiException


def test_can_be_created_without_initializer():
    error = ErrorResponse()

    assert error.status == 0
    assert error.headers.values == {}
    assert error.status_text == ""
    assert error.url is None
    assert error.message == "Http failure response for (unknown url): 0 "
    assert error.error is None


def test_from_empty_initializer():
    error = ErrorResponse.from_init(None)

    assert error.message == "Http failure response for (unknown url): 0 "


def test_is_correctly_initialized():
    error = ErrorResponse(
        error={"message": "Oh no"},
        headers={"MyHeader": "My value"},
        status=400,
        status_text="Bummer",
        url="http://errors.net/oh-snap",
    )

    assert error.status == 400
    assert error.headers.values == {"MyHeader": "My value"}
    assert error.status_text == "Bummer"
    assert error.url == "http://errors.net/oh-snap"
    assert error.message == "Http failure response for http://errors.net/oh-snap: 400 Bummer"
    assert str(error) == error.message
    assert error.error == {"message": "Oh no"}
    assert error.ok is False


def test_from_init_accepts_camel_case_keys():
    error = ErrorResponse.from_init(
        {"status": 404, "statusText": "Not Found", "url": "http://x.org/a"}
    )

    assert error.status_text == "Not Found"
    assert error.message == "Http failure response for http://x.org/a: 404 Not Found"


@pytest.mark.parametrize("status", [200, 204, 299])
def test_success_status_indicates_parsing_error(status):
    error = ErrorResponse(
        error=ValueError("bad json"),
        headers={"MyHeader": "My value"},
        status=status,
        url="http://errors.net/oh-snap",
    )

    assert error.status == status
    assert error.headers.values == {"MyHeader": "My value"}
    assert error.message == "Http failure during parsing for http://errors.net/oh-snap"
    assert error.error is None


def test_parsing_error_without_url():
    error = ErrorResponse(headers={"MyHeader": "My value"}, status=200)

    assert error.message == "Http failure during parsing for (unknown url)"
    assert error.error is None


def test_status_300_is_a_failure_response():
    error = ErrorResponse(error="moved", status=300, status_text="Multiple Choices")

    assert error.error == "moved"
    assert error.message.startswith("Http failure response for ")


def test_headers_are_copied():
    headers = {"MyHeader": "My value"}
    error = ErrorResponse(headers=headers, status=500)

    headers["Other"] = "x"

    assert error.headers.values == {"MyHeader": "My value"}


def test_is_an_application_exception():
    error = ErrorResponse(status=503, status_text="Service Unavailable")

    assert isinstance(error, HttpApiException)
    assert isinstance(error, ApplicationException)
    with pytest.raises(ErrorResponse) as exc_info:
        raise error
    assert exc_info.value is error
