"""Tests for the host-side NotebookSession."""

from __future__ import annotations

import threading
import uuid
from pathlib import Path

import pytest

from nexia.core import NoteNotFound
from nexia.session import InvalidNoteId, NoFilePath, NotebookSession, parse_note_id
from nexia.storage import StorageFormatError, StorageNotFound


@pytest.fixture()
def session() -> NotebookSession:
    return NotebookSession()


class TestIds:
    def test_parse_valid(self) -> None:
        nid = uuid.uuid4()
        assert parse_note_id(str(nid)) == nid
        assert parse_note_id(nid) == nid

    def test_parse_invalid(self) -> None:
        with pytest.raises(InvalidNoteId):
            parse_note_id("not-a-uuid")

    def test_invalid_id_at_boundary(self, session: NotebookSession) -> None:
        with pytest.raises(InvalidNoteId):
            session.get_note("garbage")


class TestNotes:
    def test_create_and_get(self, session: NotebookSession) -> None:
        note = session.create_note("Hello", content="World")
        fetched = session.get_note(str(note.id))
        assert fetched.title == "Hello"
        assert fetched.content == "World"

    def test_returned_notes_are_copies(self, session: NotebookSession) -> None:
        note = session.create_note("Original")
        note.title = "Changed outside"
        assert session.get_note(note.id).title == "Original"

    def test_get_missing(self, session: NotebookSession) -> None:
        with pytest.raises(NoteNotFound):
            session.get_note(str(uuid.uuid4()))

    def test_update_title_and_content(self, session: NotebookSession) -> None:
        note = session.create_note("Old")
        session.update_note_title(str(note.id), "New")
        updated = session.update_note_content(str(note.id), "Body")
        assert (updated.title, updated.content) == ("New", "Body")
        assert updated.modified_at >= note.modified_at

    def test_delete(self, session: NotebookSession) -> None:
        note = session.create_note("Doomed")
        session.delete_note(str(note.id))
        assert session.get_all_notes() == []
        with pytest.raises(NoteNotFound):
            session.delete_note(str(note.id))

    def test_set_attribute(self, session: NotebookSession) -> None:
        note = session.create_note("A")
        updated = session.set_note_attribute(note.id, "tags", ["x", "y"])
        assert updated.get_attribute("tags") == ["x", "y"]


class TestLinksAndSearch:
    def test_link_and_backlinks(self, session: NotebookSession) -> None:
        a = session.create_note("A")
        b = session.create_note("B")
        session.link_notes(str(a.id), str(b.id))
        assert session.get_backlinks(str(b.id)) == [a.id]
        session.unlink_notes(str(a.id), str(b.id))
        assert session.get_backlinks(str(b.id)) == []

    def test_link_to_missing(self, session: NotebookSession) -> None:
        a = session.create_note("A")
        missing = uuid.uuid4()
        with pytest.raises(NoteNotFound) as excinfo:
            session.link_notes(str(a.id), str(missing))
        assert excinfo.value.note_id == missing

    def test_search_fields(self, session: NotebookSession) -> None:
        session.create_note("Meeting Notes", content="budget")
        session.create_note("Budget Plan")
        assert len(session.search_notes("budget")) == 2
        assert len(session.search_notes("budget", field="title")) == 1
        assert len(session.search_notes("budget", field="content")) == 1
        with pytest.raises(ValueError):
            session.search_notes("x", field="tags")


class TestFiles:
    def test_save_requires_path(self, session: NotebookSession) -> None:
        with pytest.raises(NoFilePath):
            session.save_notebook()

    def test_save_remembers_path(self, session: NotebookSession, tmp_path: Path) -> None:
        path = tmp_path / "nb.nexia.json"
        session.create_note("A")
        assert session.save_notebook(path) == path
        session.create_note("B")
        assert session.save_notebook() == path
        assert session.file_path == path

        other = NotebookSession()
        other.load_notebook(path)
        assert len(other.get_all_notes()) == 2

    def test_failed_load_keeps_state(self, session: NotebookSession, tmp_path: Path) -> None:
        session.create_note("Keep me")
        bad = tmp_path / "bad.nexia.json"
        bad.write_text("[]", encoding="utf-8")

        with pytest.raises(StorageFormatError):
            session.load_notebook(bad)
        with pytest.raises(StorageNotFound):
            session.load_notebook(tmp_path / "missing.nexia.json")

        assert [n.title for n in session.get_all_notes()] == ["Keep me"]
        assert session.file_path is None

    def test_new_notebook_forgets_path(self, session: NotebookSession, tmp_path: Path) -> None:
        session.save_notebook(tmp_path / "nb.nexia.json")
        session.new_notebook("Fresh")
        assert session.file_path is None
        assert session.info()["name"] == "Fresh"
        assert session.info()["note_count"] == 0


class TestConcurrency:
    def test_parallel_links_keep_index_consistent(self, session: NotebookSession) -> None:
        hub = session.create_note("Hub")
        spokes = [session.create_note(f"S{i}") for i in range(40)]

        def _work(note_id: uuid.UUID) -> None:
            session.link_notes(note_id, hub.id)
            session.link_notes(hub.id, note_id)

        threads = [threading.Thread(target=_work, args=(s.id,)) for s in spokes]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(session.get_backlinks(hub.id)) == sorted(s.id for s in spokes)
        assert len(session.get_note(hub.id).links) == len(spokes)
