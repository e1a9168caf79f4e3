"""Tests for the in-memory bundle."""

from creative_audit.bundle import Bundle
from creative_audit.bundle.models import normalize_entry_path


class TestNormalizeEntryPath:
    def test_backslashes_and_leading_slash(self):
        assert normalize_entry_path("\\img\\a.png") == "img/a.png"
        assert normalize_entry_path("./index.html") == "index.html"


class TestBundle:
    def test_case_insensitive_lookup(self, make_bundle):
        bundle = make_bundle({"Images/Logo.PNG": b"x"})
        assert bundle.lookup("images/logo.png") == "Images/Logo.PNG"
        assert "IMAGES/LOGO.png" in bundle
        assert bundle.lookup("images/other.png") is None

    def test_case_collision_first_sorted_wins(self, make_bundle):
        bundle = make_bundle({"b/A.png": b"1", "b/a.png": b"2"})
        assert bundle.lookup("B/A.PNG") == "b/A.png"

    def test_directory_entries_skipped(self, make_bundle):
        bundle = make_bundle({"img/": b"", "img/a.png": b"x"})
        assert bundle.paths == ("img/a.png",)

    def test_declared_name(self, make_bundle):
        assert make_bundle({}, name="uploads/Summer_300x250.ZIP").declared_name == "Summer_300x250"

    def test_read_text_drops_bom(self, make_bundle):
        bundle = make_bundle({"a.css": b"\xef\xbb\xbfbody{}"})
        assert bundle.read_text("a.css") == "body{}"

    def test_content_id_is_stable(self):
        a = Bundle.from_files("a.zip", {"index.html": b"<html>"})
        b = Bundle.from_files("b.zip", {"index.html": b"<html>"})
        assert a.id == b.id
        assert len(a.id) == 16

    def test_byte_length_defaults_to_content(self, make_bundle):
        bundle = make_bundle({"a": b"123", "b": b"45"})
        assert bundle.byte_length == 5

    def test_holds_no_mutable_state(self, make_bundle):
        from dataclasses import fields

        bundle = make_bundle({"a.css": b"body{}"})
        bundle.read_text("a.css")
        assert [f.name for f in fields(bundle)] == [
            "id",
            "name",
            "byte_length",
            "files",
            "lower_case_index",
            "mode",
        ]
        assert bundle == make_bundle({"a.css": b"body{}"})
