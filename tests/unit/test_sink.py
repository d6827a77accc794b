"""
Unit tests for HTTP sinks.
"""

import io

import pytest

from webcore import WebConfig
from webcore.http.cookies import Cookie
from webcore.http.response import ResponseBuilder
from webcore.http.sink import BufferedSink, StreamSink, format_header_line
from webcore.http.status_codes import HTTPStatus, reason_phrase


class TestHeaderLine:
    """Tests for header line formatting."""

    def test_with_value(self):
        assert format_header_line("X-A", "1") == "X-A: 1"

    def test_bare(self):
        """Test that empty values render a bare name."""
        assert format_header_line("X-A", None) == "X-A"
        assert format_header_line("X-A", "") == "X-A"


class TestBufferedSink:
    """Tests for the in-memory sink."""

    def test_case_insensitive_overwrite(self):
        """Test that header names match case-insensitively."""
        sink = BufferedSink()
        sink.write_header("Content-Type", "text/plain")
        sink.write_header("X-Other", "1")
        sink.write_header("content-type", "text/html")

        assert sink.headers == {"content-type": "text/html", "X-Other": "1"}
        assert sink.header("CONTENT-TYPE") == "text/html"
        assert sink.has_header("x-other")

    def test_render(self):
        """Test serializing a recorded response."""
        sink = BufferedSink()
        sink.write_status(201)
        sink.write_header("X-A", "1")
        sink.write_cookie(Cookie(name="c", value="v"))
        sink.write_body("done")

        assert sink.render() == (
            b"HTTP/1.1 201 Created\r\n"
            b"X-A: 1\r\n"
            b"Set-Cookie: c=v; Path=/; HttpOnly\r\n"
            b"\r\n"
            b"done"
        )

    def test_not_sent_until_marked(self):
        """Test the already-sent flag."""
        sink = BufferedSink()
        sink.write_body("x")
        assert not sink.already_sent()

        sink.mark_sent()
        assert sink.already_sent()


class TestStreamSink:
    """Tests for the stream-writing sink."""

    def test_full_message(self):
        """Test a complete response written to a stream."""
        stream = io.BytesIO()
        response = ResponseBuilder(StreamSink(stream))
        response.set_content_type("text/plain")
        response.set_cookie({"name": "a", "value": "1"})
        response.set_content("hello")
        response.send()

        assert stream.getvalue() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain; charset=UTF-8\r\n"
            b"Content-Length: 5\r\n"
            b"Server: webcore\r\n"
            b"Set-Cookie: a=1; Path=/; HttpOnly\r\n"
            b"\r\n"
            b"hello"
        )

    def test_empty_body_flushed_on_finish(self):
        """Test that finish() sends the head when there is no body."""
        stream = io.BytesIO()
        sink = StreamSink(stream, config=WebConfig(server_name=""))
        response = ResponseBuilder(sink)
        response.set_header("Location", "/login").send()

        assert stream.getvalue() == (
            b"HTTP/1.1 302 Found\r\n"
            b"Location: /login\r\n"
            b"Content-Length: 0\r\n"
            b"\r\n"
        )
        assert sink.already_sent()

    def test_caller_content_length_kept(self):
        """Test that an explicit Content-Length is not replaced."""
        stream = io.BytesIO()
        sink = StreamSink(stream, config=WebConfig(server_name=""))
        sink.write_header("Content-Length", "99")
        sink.write_body("abc")

        assert stream.getvalue().count(b"Content-Length") == 1
        assert b"Content-Length: 99\r\n" in stream.getvalue()

    def test_utf8_length(self):
        """Test that Content-Length counts bytes, not characters."""
        stream = io.BytesIO()
        StreamSink(stream).write_body("héllo")
        assert b"Content-Length: 6\r\n" in stream.getvalue()

    def test_writes_after_head_dropped(self):
        """Test that late status/header/cookie writes are ignored."""
        stream = io.BytesIO()
        sink = StreamSink(stream, config=WebConfig(server_name=""))
        sink.write_body("x")
        sink.write_status(500)
        sink.write_header("X-Late", "1")
        sink.write_cookie(Cookie(name="late"))

        assert b"500" not in stream.getvalue()
        assert b"X-Late" not in stream.getvalue()
        assert b"late=" not in stream.getvalue()

    def test_second_send_skips_headers(self):
        """Test that a builder reusing a flushed sink only writes the body."""
        stream = io.BytesIO()
        sink = StreamSink(stream, config=WebConfig(server_name=""))
        response = ResponseBuilder(sink)
        response.set_content("one").send()

        response.set_status_code(404).set_content("two").send()

        assert stream.getvalue().endswith(b"onetwo")
        assert b"404" not in stream.getvalue()

    def test_broken_stream(self):
        """Test that a closed client does not raise."""

        class BrokenStream(io.BytesIO):
            def write(self, data):
                raise BrokenPipeError("client went away")

        sink = StreamSink(BrokenStream())
        sink.write_body("x")
        sink.finish()

        assert sink.already_sent()


class TestUnsafeHeaders:
    """Tests for headers that can't go on the wire as one line."""

    def test_crlf_value_cannot_forge_headers(self):
        """Test that CR/LF in a value does not split the response."""
        stream = io.BytesIO()
        response = ResponseBuilder(StreamSink(stream, config=WebConfig(server_name="")))
        response.set_header("X-A", "1\r\nSet-Cookie: admin=1").send()

        assert stream.getvalue() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Length: 0\r\n"
            b"\r\n"
        )

    @pytest.mark.parametrize("name,value", [
        ("X-A", "1\nX-B: 2"),
        ("X-A", "1\r2"),
        ("X-A\r\nX-B", "1"),
        ("X-Name", "日本"),
    ])
    def test_buffered_sink_drops(self, name, value):
        sink = BufferedSink()
        sink.write_header(name, value)

        assert sink.headers == {}

    def test_non_latin1_value_does_not_raise(self):
        """Test that a non-latin-1 value is dropped and the rest is sent."""
        stream = io.BytesIO()
        response = ResponseBuilder(StreamSink(stream, config=WebConfig(server_name="")))
        response.set_header("X-Name", "日本").set_header("X-Ok", "1").set_content("hi")

        response.send()

        assert b"X-Name" not in stream.getvalue()
        assert b"X-Ok: 1\r\n" in stream.getvalue()
        assert stream.getvalue().endswith(b"hi")
        assert response.get_headers() == {}

    def test_unsafe_cookie_dropped(self):
        """Test that a cookie with CR/LF in its attributes is not written."""
        sink = BufferedSink()
        sink.write_cookie(Cookie(name="a", path="/\r\nX-Evil: 1"))
        sink.write_cookie(Cookie(name="b", value="line\r\nbreak"))

        assert [c.name for c in sink.cookies] == ["b"]
        assert b"X-Evil" not in sink.render()

    def test_unsafe_status_message(self):
        """Test that an unsafe reason phrase falls back to the standard one."""
        sink = BufferedSink()
        sink.write_status(404, "Nope\r\nX-Evil: 1")

        assert sink.status_message is None
        assert sink.render().startswith(b"HTTP/1.1 404 Not Found\r\n\r\n")


class TestServerHeader:
    """Tests for the configured Server header."""

    def test_configured_name(self):
        stream = io.BytesIO()
        StreamSink(stream, config=WebConfig(server_name="edge/2.1")).write_body("x")
        assert b"Server: edge/2.1\r\n" in stream.getvalue()

    def test_empty_name_omits_header(self):
        stream = io.BytesIO()
        StreamSink(stream, config=WebConfig(server_name="")).write_body("x")
        assert b"Server" not in stream.getvalue()


class TestStatusPhrases:
    """Tests for reason phrases."""

    def test_known(self):
        assert reason_phrase(404) == "Not Found"
        assert HTTPStatus.FOUND.phrase == "Found"

    def test_unknown(self):
        assert reason_phrase(799) == "Unknown"

    def test_categories(self):
        assert HTTPStatus.FOUND.is_redirect
        assert HTTPStatus.NOT_FOUND.is_error
        assert not HTTPStatus.OK.is_error
