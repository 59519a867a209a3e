from dataclasses import dataclass

from pydantic import BaseModel

from declarest.http import NamedValues, RequestDescriptor
from declarest.http.request_options import media_type


params = NamedValues(
    {
        "MyValue": "1+5=6",
        "Names": "Jeremy Bishop & Jane Lawrence",
    }
)
serialized = "MyValue=1%2B5%3D6&Names=Jeremy%20Bishop%20%26%20Jane%20Lawrence"


def test_appends_query_string_to_url():
    url = "http://test.com/page"
    options = RequestDescriptor(url, "GET", None, None, params)

    assert options.get_url() == f"{url}?{serialized}"


def test_url_ending_with_question_mark_gets_no_separator():
    url = "http://test.com/page?"
    options = RequestDescriptor(url, "GET", None, None, params)

    assert options.get_url() == f"{url}{serialized}"


def test_url_with_existing_query_is_joined_with_ampersand():
    url = "http://test.com/page?MyParam=MyValue"
    options = RequestDescriptor(url, "GET", None, None, params)

    assert options.get_url() == f"{url}&{serialized}"


def test_url_without_params_is_returned_unchanged():
    url = "http://test.com/page?MyParam=MyValue"

    assert RequestDescriptor(url, "GET").get_url() == url


def test_readable_characters_are_kept_in_query():
    options = RequestDescriptor(
        "http://test.com",
        "GET",
        params={"q": "a@b:c$d,e;f?g/h", "list": ["x", "y"]},
    )

    assert options.get_url() == "http://test.com?q=a@b:c$d,e;f?g/h&list=x,y"


def test_unicode_is_utf8_percent_encoded():
    options = RequestDescriptor("http://test.com", "GET", params={"name": "Žluťoučký"})

    assert options.get_url() == "http://test.com?name=%C5%BDlu%C5%A5ou%C4%8Dk%C3%BD"


def test_content_type_detection():
    assert RequestDescriptor("", "POST", {"name": "value"}).get_content_type() == "application/json"
    assert RequestDescriptor("", "POST").get_content_type() == "application/json"
    assert RequestDescriptor("", "POST", "Text body").get_content_type() == "text/plain"
    assert RequestDescriptor("", "POST", 42).get_content_type() == "text/plain"
    assert RequestDescriptor("", "POST", []).get_content_type() == "application/json"


def test_explicit_content_type_wins():
    options = RequestDescriptor(
        "", "POST", {"name": "value"}, NamedValues({"Content-Type": "custom"})
    )

    assert options.get_content_type() == "custom"
    assert options.headers.get("Content-Type") == "custom"


def test_default_headers_are_added():
    options = RequestDescriptor("", "GET")

    assert options.headers.values == {
        "Content-Type": "application/json",
        "Accepts": "application/json, text/plain, */*",
    }


def test_explicit_accepts_is_kept():
    options = RequestDescriptor("", "GET", headers={"Accepts": "application/json"})

    assert options.headers.get("Accepts") == "application/json"


def test_headers_and_params_are_copied():
    headers = NamedValues({"X-One": "1"})
    options = RequestDescriptor("", "GET", headers=headers, params=params)

    headers.set("X-Two", "2")
    options.params.set("extra", "1")

    assert not options.headers.contains("X-Two")
    assert not params.contains("extra")


def test_serializes_body_according_to_content_type():
    assert RequestDescriptor("", "POST", {"name": "value"}).get_serialized_body() == '{"name":"value"}'
    assert RequestDescriptor("", "POST", "Text body").get_serialized_body() == "Text body"
    assert RequestDescriptor("", "POST", 42).get_serialized_body() == "42"
    assert RequestDescriptor("", "POST", True).get_serialized_body() == "true"
    assert RequestDescriptor("", "POST").get_serialized_body() is None


def test_falsy_body_is_not_sent_but_empty_containers_are():
    assert RequestDescriptor("", "POST", 0).get_serialized_body() is None
    assert RequestDescriptor("", "POST", "").get_serialized_body() is None
    assert RequestDescriptor("", "POST", {}).get_serialized_body() == "{}"
    assert RequestDescriptor("", "POST", []).get_serialized_body() == "[]"


def test_serializes_models_and_dataclasses_as_json():
    class Message(BaseModel):
        text: str
        count: int

    @dataclass
    class Point:
        x: int
        y: int

    assert RequestDescriptor("", "POST", Message(text="hi", count=2)).get_serialized_body() == '{"text":"hi","count":2}'
    assert RequestDescriptor("", "POST", Point(1, 2)).get_serialized_body() == '{"x":1,"y":2}'


def test_json_content_type_with_parameters_is_serialized_as_json():
    options = RequestDescriptor(
        "", "POST", {"a": 1}, {"Content-Type": "application/json; charset=utf-8"}
    )

    assert options.get_serialized_body() == '{"a":1}'
    assert options.headers.get("Content-Type") == "application/json; charset=utf-8"


def test_media_type_ignores_parameters_and_case():
    assert media_type("Application/JSON ; charset=utf-8") == "application/json"
    assert media_type("text/plain") == "text/plain"


def test_text_content_type_sends_string_form():
    options = RequestDescriptor(
        "", "POST", {"name": "value"}, {"Content-Type": "text/plain"}
    )

    assert options.get_serialized_body() == "{'name': 'value'}"


def test_bytes_body_is_sent_unchanged_for_non_json_content():
    options = RequestDescriptor(
        "", "PUT", b"\x00\x01", {"Content-Type": "application/octet-stream"}
    )

    assert options.get_serialized_body() == b"\x00\x01"
