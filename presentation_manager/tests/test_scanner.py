"""
Tests for the metadata scanner and slide-title inference.
"""

import json
import logging
import os
from pathlib import Path

import pytest

from presentation_manager.md_parse_utils import infer_title, split_lines
from presentation_manager.models import PresentationMetadata
from presentation_manager.scanner import (
    folder_sort_key,
    load_presentation_metadata,
    read_manifest,
    slides_exist,
)


# ---------------------------------------------------------------------------
# Title inference
# ---------------------------------------------------------------------------

class TestInferTitle:

    def test_title_line(self):
        assert infer_title("title: Foo Bar\n# Slide 1") == "Foo Bar"

    def test_heading(self):
        assert infer_title("\n\n# Heading\n\nBody") == "Heading"

    def test_first_match_wins(self):
        assert infer_title("# First\ntitle: Second") == "First"

    def test_front_matter(self):
        text = "---\ntheme: seriph\ntitle: Quarterly Review\n---\n\n# Welcome\n"
        assert infer_title(text) == "Quarterly Review"

    def test_empty_title_stops_scan(self):
        assert infer_title("title:   \n# Heading") is None

    def test_level_two_heading_ignored(self):
        assert infer_title("## Sub\n# Main") == "Main"

    def test_hash_without_space_ignored(self):
        assert infer_title("#hashtag\n# Real") == "Real"

    def test_indented_and_crlf(self):
        assert infer_title("\r\n   # Indented Title  \r\nmore") == "Indented Title"

    def test_no_title(self):
        assert infer_title("Just text\n- bullet\n") is None
        assert infer_title("") is None

    def test_split_lines(self):
        assert split_lines("a\r\nb\nc") == ["a", "b", "c"]


# ---------------------------------------------------------------------------
# Manifest extraction
# ---------------------------------------------------------------------------

class TestReadManifest:

    def test_missing_is_silent(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            assert read_manifest(tmp_path / "package.json") is None
        assert caplog.records == []

    def test_invalid_json_warns(self, tmp_path, caplog):
        path = tmp_path / "package.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert read_manifest(path) is None
        assert any(
            r.getMessage().startswith(f"[selector] Failed to read {path}")
            for r in caplog.records
        )

    def test_non_object_warns(self, tmp_path, caplog):
        path = tmp_path / "package.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert read_manifest(path) is None
        assert "expected a JSON object" in caplog.text

    def test_fields_extracted_individually(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({
            "name": "@talks/intro",
            "title": 42,
            "displayName": "Intro Talk",
            "scripts": {"dev": "slidev", "export": "slidev export", "bad": 1},
            "version": "1.0.0",
        }), encoding="utf-8")
        info = read_manifest(path)
        assert info.name == "@talks/intro"
        assert info.title is None
        assert info.display_name == "Intro Talk"
        assert info.scripts == {"dev": "slidev", "export": "slidev export"}


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------

class TestLoadPresentationMetadata:

    def test_missing_directory_returns_empty(self, workspace_root):
        assert load_presentation_metadata(workspace_root) == []

    def test_manifest_and_slides_folders(self, workspace_root, make_deck):
        make_deck("pres1", manifest={"name": "pres1-workspace", "title": "Presentation 1"})
        make_deck("pres2", slides="title: Presentation 2\n# Slide 1")
        (workspace_root / "presentations" / "file.txt").write_text("stray", encoding="utf-8")

        metadata = load_presentation_metadata(workspace_root)

        assert len(metadata) == 2
        assert metadata[0] == PresentationMetadata(
            folder="pres1",
            workspace="pres1-workspace",
            scripts={},
            slides_path=None,
            relative_slides_path=None,
            title="Presentation 1",
        )
        slides = workspace_root.resolve() / "presentations" / "pres2" / "slides.md"
        assert metadata[1] == PresentationMetadata(
            folder="pres2",
            workspace=None,
            scripts={},
            slides_path=str(slides),
            relative_slides_path=os.path.join("presentations", "pres2", "slides.md"),
            title="Presentation 2",
        )

    def test_custom_presentations_directory(self, workspace_root, make_deck):
        make_deck(
            "custom-pres",
            manifest={"name": "custom-workspace", "title": "Custom Presentation"},
            base="custom-presentations",
        )
        make_deck("ignored", slides="# Ignored")

        metadata = load_presentation_metadata(
            workspace_root, workspace_root / "custom-presentations"
        )
        assert [m.folder for m in metadata] == ["custom-pres"]
        assert metadata[0].workspace == "custom-workspace"
        assert metadata[0].title == "Custom Presentation"

    def test_relative_presentations_directory(self, workspace_root, make_deck):
        make_deck("talk", slides="# Talk", base="decks")
        metadata = load_presentation_metadata(workspace_root, "decks")
        assert metadata[0].relative_slides_path == os.path.join("decks", "talk", "slides.md")

    def test_empty_folder_excluded(self, workspace_root, make_deck):
        make_deck("empty")
        make_deck("deck", slides="# Deck")
        assert [m.folder for m in load_presentation_metadata(workspace_root)] == ["deck"]

    def test_sorted_by_folder(self, workspace_root, make_deck):
        for name in ("beta", "Alpha", "alpha2", "gamma"):
            make_deck(name, slides=f"# {name}")
        folders = [m.folder for m in load_presentation_metadata(workspace_root)]
        assert folders == ["Alpha", "alpha2", "beta", "gamma"]

    def test_idempotent(self, workspace_root, make_deck):
        make_deck("b", manifest={"name": "b"})
        make_deck("a", slides="# A")
        assert load_presentation_metadata(workspace_root) == load_presentation_metadata(workspace_root)

    def test_manifest_title_takes_precedence(self, workspace_root, make_deck):
        make_deck("deck", manifest={"name": "deck", "title": "From Manifest"}, slides="title: From Slides")
        assert load_presentation_metadata(workspace_root)[0].title == "From Manifest"

    def test_display_name_fallback(self, workspace_root, make_deck):
        make_deck("deck", manifest={"name": "deck", "displayName": "Display"}, slides="# Heading")
        assert load_presentation_metadata(workspace_root)[0].title == "Display"

    def test_blank_title_falls_through(self, workspace_root, make_deck):
        make_deck("a", manifest={"name": "a", "title": "", "displayName": "Display"})
        make_deck("b", manifest={"name": "b", "title": ""}, slides="# Heading")
        titles = [m.title for m in load_presentation_metadata(workspace_root)]
        assert titles == ["Display", "Heading"]

    def test_title_inferred_when_manifest_has_none(self, workspace_root, make_deck):
        make_deck("deck", manifest={"name": "deck", "scripts": {"dev": "slidev"}}, slides="# Heading")
        meta = load_presentation_metadata(workspace_root)[0]
        assert meta.title == "Heading"
        assert meta.scripts == {"dev": "slidev"}

    def test_no_title_anywhere(self, workspace_root, make_deck):
        make_deck("deck", manifest={"name": "deck"})
        assert load_presentation_metadata(workspace_root)[0].title is None

    def test_broken_manifest_keeps_slides(self, workspace_root, make_deck, caplog):
        make_deck("deck", raw_manifest="{oops", slides="# Still Here")
        with caplog.at_level(logging.WARNING):
            metadata = load_presentation_metadata(workspace_root)
        assert len(metadata) == 1
        assert metadata[0].workspace is None
        assert metadata[0].title == "Still Here"
        assert "[selector] Failed to read" in caplog.text

    def test_broken_manifest_without_slides_excluded(self, workspace_root, make_deck):
        make_deck("broken", raw_manifest="not json at all")
        make_deck("ok", slides="# OK")
        assert [m.folder for m in load_presentation_metadata(workspace_root)] == ["ok"]

    def test_title_read_failure_warns(self, workspace_root, make_deck, caplog):
        deck = make_deck("deck", manifest={"name": "deck"})
        (deck / "slides.md").mkdir()
        with caplog.at_level(logging.WARNING):
            metadata = load_presentation_metadata(workspace_root)
        assert metadata[0].title is None
        assert metadata[0].slides_path is not None
        assert "[selector] Failed to read title from" in caplog.text

    def test_unlistable_root_propagates(self, workspace_root):
        (workspace_root / "presentations").write_text("not a directory", encoding="utf-8")
        with pytest.raises(OSError):
            load_presentation_metadata(workspace_root)


class TestFolderSortKey:

    def test_case_insensitive_with_exact_tiebreak(self):
        names = ["b", "B", "a", "A"]
        assert sorted(names, key=folder_sort_key) == ["A", "a", "B", "b"]

    def test_accented_names_sort_by_base_letter(self):
        names = ["zebra", "éclair", "Apple"]
        assert sorted(names, key=folder_sort_key) == ["Apple", "éclair", "zebra"]

    def test_accented_variant_after_plain(self):
        assert sorted(["été", "ete"], key=folder_sort_key) == ["ete", "été"]

    def test_scan_orders_non_ascii_folders(self, workspace_root, make_deck):
        for folder in ("zebra", "éclair", "Apple"):
            make_deck(folder, slides=f"# {folder}")
        result = load_presentation_metadata(workspace_root)
        assert [m.folder for m in result] == ["Apple", "éclair", "zebra"]


class TestSlidesProbe:

    @pytest.fixture
    def unreadable_slides(self, monkeypatch):
        real_stat = Path.stat

        def stat(self, *args, **kwargs):
            if self.name == "slides.md":
                raise PermissionError(13, "Permission denied", str(self))
            return real_stat(self, *args, **kwargs)

        monkeypatch.setattr(Path, "stat", stat)

    def test_present_and_missing(self, tmp_path):
        (tmp_path / "slides.md").write_text("# A", encoding="utf-8")
        assert slides_exist(tmp_path / "slides.md") is True
        assert slides_exist(tmp_path / "other.md") is False

    def test_check_failure_counts_as_absent(self, tmp_path, unreadable_slides, caplog):
        with caplog.at_level(logging.WARNING):
            assert slides_exist(tmp_path / "slides.md") is False
        assert "[selector] Failed to check" in caplog.text
        assert "Permission denied" in caplog.text

    def test_manifest_folder_kept_without_slides(
        self, workspace_root, make_deck, unreadable_slides, caplog
    ):
        make_deck("deck", manifest={"name": "deck", "title": "Deck"}, slides="# Deck")
        with caplog.at_level(logging.WARNING):
            result = load_presentation_metadata(workspace_root)
        assert len(result) == 1
        assert result[0].workspace == "deck"
        assert result[0].slides_path is None
        assert result[0].relative_slides_path is None
        assert "Failed to check" in caplog.text

    def test_slides_only_folder_dropped(self, workspace_root, make_deck, unreadable_slides):
        make_deck("deck", slides="# Deck")
        assert load_presentation_metadata(workspace_root) == []
