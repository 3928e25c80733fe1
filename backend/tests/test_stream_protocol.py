"""Tests for the data-stream part encoding."""

from language_ai.utils import stream_protocol


def test_text_part_is_json_string():
    assert stream_protocol.text_part('Il a dit "oui"\n') == '0:"Il a dit \\"oui\\"\\n"\n'


def test_text_part_keeps_unicode():
    assert stream_protocol.text_part("こんにちは") == '0:"こんにちは"\n'


def test_finish_and_error_parts():
    assert stream_protocol.finish_part() == 'd:{"finishReason":"stop"}\n'
    assert stream_protocol.error_part("boom") == '3:"boom"\n'


def test_collect_text_ignores_other_parts():
    body = (
        stream_protocol.start_part("abc")
        + stream_protocol.text_part("Très ")
        + stream_protocol.text_part("bien")
        + stream_protocol.finish_part("stop")
    )
    assert stream_protocol.collect_text(body) == "Très bien"
    assert [code for code, _ in stream_protocol.decode_parts(body)] == ["f", "0", "0", "d"]
