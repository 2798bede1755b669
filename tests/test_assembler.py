"""Unit tests for DFXP document assembly and resync.

WHY: The assembler produces the file the player actually loads. Wrong
tick values desynchronize every subtitle, unstable xml:ids break
resyncs, and a malformed document is rejected outright.

HOW: Tests cover:
  - Millisecond → tick conversion and rounding
  - Header/footer boilerplate and well-formedness (parsed with ElementTree)
  - Skipping empty cues while keeping original indices in xml:id
  - Resync shifting without clamping, and idempotence

RULES:
- Documents are parsed with xml.etree to prove they are well-formed XML.
"""

import xml.etree.ElementTree as ET

import pytest

from dfxp_converter.core.assembler import (
    DFXP_FOOTER,
    DFXP_HEADER,
    assemble_dfxp,
    ms_to_ticks,
    resync_cues,
    resync_dfxp,
    seconds_to_offset_ms,
)
from dfxp_converter.core.ir import Cue

TT_NS = "{http://www.w3.org/ns/ttml}"
XML_ID = "{http://www.w3.org/XML/1998/namespace}id"


def _paragraphs(document):
    root = ET.fromstring(document.encode("utf-8"))
    return root.findall(".//{}p".format(TT_NS))


class TestMsToTicks:

    def test_zero(self):
        assert ms_to_ticks(0) == "0t"

    def test_one_second(self):
        assert ms_to_ticks(1000) == "10000000t"

    def test_milliseconds(self):
        assert ms_to_ticks(1500) == "15000000t"

    def test_fractional_milliseconds(self):
        assert ms_to_ticks(0.25) == "2500t"
        assert ms_to_ticks(100.00000000000001) == "1000000t"

    def test_negative_passthrough(self):
        assert ms_to_ticks(-500) == "-5000000t"


class TestAssembleDfxp:

    def test_empty_list_is_valid_captionless_document(self):
        document = assemble_dfxp([])
        assert document == DFXP_HEADER + DFXP_FOOTER
        assert _paragraphs(document) == []

    def test_header_declares_tick_rate_and_profile(self):
        document = assemble_dfxp([])
        assert 'ttp:tickRate="10000000"' in document
        assert "http://netflix.com/ttml/profile/dfxp-ls-sdh" in document
        assert 'xml:id="region0"' in document
        assert 'xml:id="region1"' in document
        assert 'xml:id="style0"' in document

    def test_one_paragraph_per_non_empty_cue(self, sample_cues):
        paragraphs = _paragraphs(assemble_dfxp(sample_cues))
        assert len(paragraphs) == 3

    def test_ids_use_original_index(self):
        cues = [
            Cue(start=0, end=1000, text="A"),
            Cue(start=1000, end=2000, text=""),
            Cue(start=2000, end=3000, text="B"),
        ]
        paragraphs = _paragraphs(assemble_dfxp(cues))
        assert [p.get(XML_ID) for p in paragraphs] == ["subtitle0", "subtitle2"]

    def test_paragraph_attributes(self):
        document = assemble_dfxp([Cue(start=1000, end=2500, text="Hi")])
        assert (
            '<p begin="10000000t" end="25000000t" region="region0" style="style0" '
            'tts:extent="80.00% 80.00%" tts:origin="10.00% 10.00%" '
            'xml:id="subtitle0">&#x202a;Hi&#x202c;</p>'
        ) in document

    def test_styled_content_is_well_formed(self, sample_cues):
        document = assemble_dfxp(sample_cues)
        paragraphs = _paragraphs(document)
        spans = paragraphs[1].findall("{}span".format(TT_NS))
        assert len(spans) == 2
        assert "&amp;" in document

    def test_cues_emitted_in_input_order(self):
        cues = [
            Cue(start=5000, end=6000, text="later"),
            Cue(start=0, end=1000, text="earlier"),
        ]
        paragraphs = _paragraphs(assemble_dfxp(cues))
        assert [p.get("begin") for p in paragraphs] == ["50000000t", "0t"]

    def test_idempotent(self, sample_cues):
        assert assemble_dfxp(sample_cues) == assemble_dfxp(sample_cues)


class TestResync:

    def test_shifts_start_and_end(self):
        shifted = resync_cues([Cue(start=1000, end=2000, text="x")], 500)
        assert shifted == [Cue(start=1500, end=2500, text="x")]

    def test_original_cues_untouched(self, sample_cues):
        before = list(sample_cues)
        resync_cues(sample_cues, 1000)
        assert sample_cues == before

    def test_negative_results_not_clamped(self):
        shifted = resync_cues([Cue(start=200, end=900, text="x")], -500)
        assert shifted[0].start == -300
        assert shifted[0].end == 400

    def test_resync_document_ticks(self):
        document = resync_dfxp([Cue(start=1000, end=2000, text="x")], 500)
        paragraph = _paragraphs(document)[0]
        assert paragraph.get("begin") == "{}t".format(1500 * 10000)
        assert paragraph.get("end") == "{}t".format(2500 * 10000)

    def test_resync_keeps_ids(self, sample_cues):
        original = [p.get(XML_ID) for p in _paragraphs(assemble_dfxp(sample_cues))]
        shifted = [p.get(XML_ID) for p in _paragraphs(resync_dfxp(sample_cues, -250))]
        assert original == shifted

    def test_zero_offset_matches_assemble(self, sample_cues):
        assert resync_dfxp(sample_cues, 0) == assemble_dfxp(sample_cues)


class TestSecondsToOffsetMs:

    @pytest.mark.parametrize("seconds, expected", [
        (0.0, 0),
        (0.1, 100),
        (-1.5, -1500),
        (0.0004, 0),
        (0.0006, 1),
    ])
    def test_conversion(self, seconds, expected):
        assert seconds_to_offset_ms(seconds) == expected
