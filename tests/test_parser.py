"""Unit tests for subconvert.ass.parser (section scanning, column mapping)."""

import logging

import pytest

from subconvert.ass.parser import parse_ass, parse_format_line
from subconvert.errors import MalformedEventError, MalformedTimestampError, MissingFormatHeaderError
from subconvert.models import TargetFormat
from subconvert.options import ConversionOptions

EVENTS_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"

DOCUMENT = "\r\n".join([
    "[Script Info]",
    "Title: Sample",
    "ScriptType: v4.00+",
    "PlayResY: 720",
    "",
    "[V4+ Styles]",
    "Format: Name, Fontname, Fontsize, PrimaryColour",
    "Style: Default,Arial,36,&H00FFFFFF",
    "",
    "[Events]",
    EVENTS_FORMAT,
    "Dialogue: 0,0:00:01.00,0:00:03.00,Default,,0,0,0,,Hello, world",
    "Comment: 0,0:00:02.00,0:00:04.00,Default,,0,0,0,,not shown",
    "Dialogue: 0,0:00:05.00,0:00:06.50,Default,,0,0,0,,{\\i1}Bye",
    "",
])


class TestParseFormatLine:
    def test_positions(self):
        assert parse_format_line("Format: Start, End, Text") == {"Start": 0, "End": 1, "Text": 2}

    def test_first_duplicate_wins(self):
        assert parse_format_line("Format: Text, Start, Text")["Text"] == 0


class TestEvents:
    def test_dialogue_lines_parsed(self):
        doc = parse_ass(DOCUMENT)
        assert [(iv.start_ms, iv.end_ms) for iv in doc.intervals] == [(1000, 3000), (5000, 6500)]
        assert doc.intervals[0].start_str == "0:00:01.00"
        assert doc.intervals[0].style_name == "Default"

    def test_commas_in_text_preserved(self):
        assert parse_ass(DOCUMENT).intervals[0].text == "Hello, world"

    def test_comment_lines_ignored(self):
        texts = [iv.text for iv in parse_ass(DOCUMENT).intervals]
        assert "not shown" not in texts

    def test_reordered_columns(self):
        source = "\n".join([
            "[Events]",
            "Format: End, Start, Text",
            "Dialogue: 0:00:02.00,0:00:01.00,Hi there, again",
        ])
        (interval,) = parse_ass(source).intervals
        assert (interval.start_ms, interval.end_ms, interval.text) == (1000, 2000, "Hi there, again")
        assert interval.style_name == ""

    def test_override_codes_processed(self):
        assert parse_ass(DOCUMENT).intervals[1].text == "<i>Bye</i>"

    def test_invisible_dialogue_skipped(self):
        source = DOCUMENT + "Dialogue: 0,0:00:07.00,0:00:08.00,Default,,0,0,0,,{\\pos(1,1)}\r\n"
        assert len(parse_ass(source).intervals) == 2

    def test_parsing_stops_after_events(self):
        source = DOCUMENT + "[Fonts]\r\nDialogue: 0,0:00:09.00,0:00:10.00,Default,,0,0,0,,late\r\n"
        assert len(parse_ass(source).intervals) == 2

    def test_bom_and_lf_endings(self):
        source = "\ufeff" + DOCUMENT.replace("\r\n", "\n")
        assert len(parse_ass(source).intervals) == 2

    def test_unrecognized_section_skipped_and_logged(self, caplog):
        source = "[Aegisub Project Garbage]\nDialogue: 0,0:00:01.00,0:00:02.00,,x\n" + DOCUMENT
        with caplog.at_level(logging.DEBUG, logger="subconvert.ass.parser"):
            doc = parse_ass(source)
        assert len(doc.intervals) == 2
        assert "Skipping unrecognized section [Aegisub Project Garbage]" in caplog.text

    def test_empty_document(self):
        doc = parse_ass("")
        assert doc.intervals == []
        assert not doc.has_script_info


class TestErrors:
    def test_dialogue_before_format(self):
        source = "[Events]\nDialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,x"
        with pytest.raises(MissingFormatHeaderError) as exc_info:
            parse_ass(source)
        assert exc_info.value.line_no == 2

    def test_format_lacks_text(self):
        with pytest.raises(MissingFormatHeaderError) as exc_info:
            parse_ass("[Events]\nFormat: Layer, Start, End")
        assert "Text" in exc_info.value.detail

    def test_style_before_format_in_vtt(self):
        source = "[V4+ Styles]\nStyle: Default,Arial,20\n[Events]\n" + EVENTS_FORMAT
        with pytest.raises(MissingFormatHeaderError):
            parse_ass(source, TargetFormat.VTT)

    def test_style_before_format_ignored_for_srt(self):
        source = "[V4+ Styles]\nStyle: Default,Arial,20\n[Events]\n" + EVENTS_FORMAT
        assert parse_ass(source, TargetFormat.SRT).intervals == []

    def test_too_few_fields(self):
        source = "[Events]\n" + EVENTS_FORMAT + "\nDialogue: 0,0:00:01.00,0:00:02.00"
        with pytest.raises(MalformedEventError) as exc_info:
            parse_ass(source)
        assert exc_info.value.line_no == 3

    def test_malformed_timestamp_carries_line(self):
        source = "[Events]\n" + EVENTS_FORMAT + "\nDialogue: 0,soon,0:00:02.00,Default,,0,0,0,,x"
        with pytest.raises(MalformedTimestampError) as exc_info:
            parse_ass(source)
        assert exc_info.value.value == "soon"
        assert exc_info.value.line_no == 3


class TestVttHeaders:
    def test_metadata_collected(self):
        doc = parse_ass(DOCUMENT, "vtt")
        assert doc.has_script_info
        assert doc.metadata == "Title: Sample\r\nScriptType: v4.00+\r\nPlayResY: 720\r\n"

    def test_play_res_y_sets_video_height(self):
        doc = parse_ass(DOCUMENT, "vtt")
        assert doc.video_height == 720
        assert "font-size: clamp(14px, 1.8em, 20vmin);" in doc.header_css

    def test_style_rules_collected(self):
        doc = parse_ass(DOCUMENT, "vtt")
        assert doc.has_styles
        assert doc.header_css.startswith('::cue(v[voice="Default"]) {\r\n')

    def test_srt_ignores_headers(self):
        doc = parse_ass(DOCUMENT, "srt")
        assert not doc.has_script_info
        assert not doc.has_styles
        assert doc.metadata == ""
        assert doc.header_css == ""

    def test_non_numeric_play_res_y_ignored(self):
        doc = parse_ass("[Script Info]\nPlayResY: tall\n", "vtt")
        assert doc.video_height == 1080

    def test_leading_block_css_for_vtt(self):
        doc = parse_ass(DOCUMENT, "vtt")
        assert "font-style: italic;" in doc.intervals[1].inline_style_css
        assert parse_ass(DOCUMENT, "srt").intervals[1].inline_style_css == ""

    def test_options_respected(self):
        doc = parse_ass(DOCUMENT, "srt", ConversionOptions(strip_control_codes=False))
        assert doc.intervals[1].text == "{\\i1}Bye"
