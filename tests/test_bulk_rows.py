# File: /tests/test_bulk_rows.py | Version: 1.0 | Title: Bulk row generation (counter reservation + set-based insert)
import threading

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from gridbase.core.config import settings
from gridbase.crud import grid as crud_grid
from gridbase.crud import rows as crud_rows
from gridbase.db.base_class import Base
from gridbase.models.grid import DataTable, TableRow


def test_bulk_generate_appends_empty_rows(client, headers, grid, db_session):
    url = f"/tables/{grid.table.id}/rows/bulk"
    r1 = client.post(url, json={"count": 3}, headers=headers)
    assert r1.status_code == 200, r1.text
    assert r1.json() == {"start_row_index": 1, "count": 3}

    r2 = client.post(url, json={"count": 2}, headers=headers)
    assert r2.json() == {"start_row_index": 4, "count": 2}

    table = db_session.get(DataTable, grid.table.id)
    assert table.row_count == 5
    assert table.next_row_index == 6

    page = client.post(f"/tables/{grid.table.id}/rows/query", json={}, headers=headers).json()
    assert [row["row_index"] for row in page["items"]] == [1, 2, 3, 4, 5]
    assert all(row["cells"] == {} for row in page["items"])
    assert page["total_count"] == 5


def test_bulk_rows_are_searchable_and_editable(client, headers, grid, db_session):
    client.post(f"/tables/{grid.table.id}/rows/bulk", json={"count": 2}, headers=headers)
    row_id = db_session.execute(
        select(TableRow.id).where(TableRow.table_id == grid.table.id, TableRow.row_index == 2)
    ).scalar_one()
    r = client.put(
        f"/tables/{grid.table.id}/rows/{row_id}/cells/{grid.name.id}",
        json={"value": "filled"},
        headers=headers,
    )
    assert r.status_code == 200
    page = client.post(
        f"/tables/{grid.table.id}/rows/query", json={"search": "fill"}, headers=headers
    ).json()
    assert [row["row_index"] for row in page["items"]] == [2]


def test_bulk_count_bounds(client, headers, grid):
    url = f"/tables/{grid.table.id}/rows/bulk"
    assert client.post(url, json={"count": 0}, headers=headers).status_code == 422
    assert (
        client.post(url, json={"count": settings.BULK_ROWS_MAX + 1}, headers=headers).status_code
        == 422
    )


def test_bulk_requires_owner(client, grid):
    url = f"/tables/{grid.table.id}/rows/bulk"
    assert client.post(url, json={"count": 1}, headers={"X-Owner-Id": "other"}).status_code == 404


def test_concurrent_bulk_generation_never_shares_row_index(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bulk.db'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with Session() as db:
        base = crud_grid.create_base(db, owner_id="o", name="B")
        table_id = crud_grid.create_table(db, base_id=base.id, name="T").id

    barrier = threading.Barrier(2)
    results, errors = [], []

    def worker():
        try:
            with Session() as db:
                table = db.get(DataTable, table_id)
                barrier.wait()
                results.append(crud_rows.bulk_generate_rows(db, table, 100))
        except Exception as e:  # surfaced by the asserts below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(r.start_row_index for r in results) == [1, 101]

    with Session() as db:
        table = db.get(DataTable, table_id)
        assert table.row_count == 200
        assert table.next_row_index == 201
        indexes = db.execute(
            select(TableRow.row_index).where(TableRow.table_id == table_id)
        ).scalars().all()
        assert sorted(indexes) == list(range(1, 201))
        assert db.execute(select(func.count(func.distinct(TableRow.id)))).scalar_one() == 200

    engine.dispose()
