"""
Contract tests run against both storage backends, plus backend specifics.
"""
import time

from sqlmodel import select

from heatmap.config import Settings
from heatmap.database import _mask_url, engine_kwargs_for
from heatmap.models.dataset_models import CsvFile
from heatmap.storage.local_backend import document_name


def test_upsert_keeps_one_entry_with_latest_content(backend):
    backend.save("report.csv", "first")
    backend.save("report.csv", "second")

    assert backend.get_content("report.csv") == "second"
    assert backend.list_files() == ["report.csv"]
    assert backend.list_sheets("report.csv") == []


def test_sheets_are_independent_entries(backend):
    backend.save("report.csv", "q1 data", "Q1")
    backend.save("report.csv", "q2 data", "Q2")

    assert backend.get_content("report.csv", "Q1") == "q1 data"
    assert backend.get_content("report.csv", "Q2") == "q2 data"
    assert backend.get_content("report.csv") is None
    assert backend.list_files() == ["report.csv"]


def test_delete_removes_every_sheet(backend):
    backend.save("report.csv", "q1 data", "Q1")
    backend.save("report.csv", "q2 data", "Q2")
    backend.save("other.csv", "keep")

    removed = backend.delete("report.csv")

    assert removed == 2
    assert backend.get_content("report.csv", "Q1") is None
    assert backend.get_content("report.csv", "Q2") is None
    assert backend.list_files() == ["other.csv"]


def test_list_files_most_recent_first(backend):
    backend.save("old.csv", "a")
    time.sleep(0.01)
    backend.save("book.xlsx", "b", "Sheet1")
    time.sleep(0.01)
    backend.save("new.csv", "c")
    time.sleep(0.01)
    # Re-uploading a sheet refreshes the whole file's position
    backend.save("book.xlsx", "b2", "Sheet2")

    assert backend.list_files() == ["book.xlsx", "new.csv", "old.csv"]


def test_list_sheets_sorted_without_null_sheet(backend):
    backend.save("book.xlsx", "z", "Zeta")
    backend.save("book.xlsx", "a", "Alpha")
    backend.save("book.xlsx", "none")

    assert backend.list_sheets("book.xlsx") == ["Alpha", "Zeta"]
    assert backend.list_sheets("unknown.xlsx") == []


def test_missing_entry_is_none(backend):
    assert backend.get_content("nothing.csv") is None
    assert backend.delete("nothing.csv") == 0
    assert backend.list_files() == []


def test_database_upsert_never_duplicates_rows(database, database_backend):
    database_backend.save("report.csv", "v1")
    database_backend.save("report.csv", "v2")
    database_backend.save("report.csv", "s1", "Q1")
    database_backend.save("report.csv", "s2", "Q1")

    with database.session() as session:
        rows = session.exec(select(CsvFile).where(CsvFile.filename == "report.csv")).all()

    assert len(rows) == 2
    assert sorted((r.sheet_name or "", r.content) for r in rows) == [("", "v2"), ("Q1", "s2")]


def test_local_backend_one_document_per_key(local_backend):
    local_backend.save("report.csv", "v1")
    local_backend.save("report.csv", "v2")
    local_backend.save("report.csv", "s1", "Q1")

    documents = sorted(p.name for p in local_backend.storage_dir.glob("*.json"))

    assert len(documents) == 2
    assert not list(local_backend.storage_dir.glob("*.tmp"))


def test_local_document_names_do_not_collide():
    assert document_name("a b.csv") != document_name("a_b.csv")
    assert document_name("a.csv", "Q1") != document_name("a.csv")
    assert document_name("a.csv", "Q1").startswith("a.csv_Q1-")


def test_local_backend_skips_unreadable_documents(local_backend):
    local_backend.save("good.csv", "ok")
    (local_backend.storage_dir / "broken.json").write_text("{not json", encoding="utf-8")

    assert local_backend.list_files() == ["good.csv"]


def test_postgres_engine_uses_bounded_pool_and_statement_timeout():
    kwargs = engine_kwargs_for("postgresql://user:secret@db:5432/heatmap", Settings())

    assert kwargs["pool_size"] == 20
    assert kwargs["max_overflow"] == 0
    assert kwargs["pool_timeout"] == 10
    assert kwargs["pool_recycle"] == 30
    assert kwargs["connect_args"] == {"options": "-c statement_timeout=5000"}


def test_mask_url_hides_password():
    assert _mask_url("postgresql://user:secret@db:5432/heatmap") == "postgresql://user:****@db:5432/heatmap"
    assert _mask_url("sqlite:///./heatmap.db") == "sqlite:///./heatmap.db"
