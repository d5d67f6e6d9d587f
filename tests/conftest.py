# ruff: noqa: E402
# File: /tests/conftest.py
import contextlib
import pathlib
import sys
from types import SimpleNamespace

# Make repo root importable as "gridbase"
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from gridbase.crud import grid as crud_grid
from gridbase.crud import rows as crud_rows
from gridbase.crud.indexes import IndexAdvisor
from gridbase.db.base_class import Base
from gridbase.main import app
from gridbase.models.grid import ColumnType, TableRow

TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_ID = "owner-1"


@pytest.fixture(scope="session", autouse=True)
def _create_schema():
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    connection = engine.connect()
    trans = connection.begin()
    try:
        session = TestingSessionLocal(bind=connection)
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def index_advisor(db_session):
    # background index creation runs on the test's own session
    return IndexAdvisor(lambda: contextlib.nullcontext(db_session))


@pytest.fixture()
def client(db_session, index_advisor):
    from gridbase.db.session import get_db  # late import to avoid circulars
    from gridbase.dependencies import get_index_advisor

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_index_advisor] = lambda: index_advisor
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def headers():
    return {"X-Owner-Id": OWNER_ID}


@pytest.fixture()
def grid(db_session):
    """A base + table with a TEXT "name" column and a NUMBER "amount" column."""
    base = crud_grid.create_base(db_session, owner_id=OWNER_ID, name="Base")
    table = crud_grid.create_table(db_session, base_id=base.id, name="Table")
    name = crud_grid.create_column(db_session, table_id=table.id, name="Name", type=ColumnType.TEXT)
    amount = crud_grid.create_column(
        db_session, table_id=table.id, name="Amount", type=ColumnType.NUMBER
    )
    return SimpleNamespace(base=base, table=table, name=name, amount=amount)


@pytest.fixture()
def add_rows(db_session):
    """
    add_rows(table, [{column_id: value, ...}, ...]) -> rows in row_index order.
    Rows are generated empty and filled cell by cell through the edit path.
    """

    def _add(table, cell_maps):
        out = crud_rows.bulk_generate_rows(db_session, table, len(cell_maps))
        rows = (
            db_session.execute(
                select(TableRow)
                .where(TableRow.table_id == table.id, TableRow.row_index >= out.start_row_index)
                .order_by(TableRow.row_index)
            )
            .scalars()
            .all()
        )
        for row, cells in zip(rows, cell_maps):
            for column_id, value in cells.items():
                crud_rows.update_cell(db_session, table, row_id=row.id, column_id=column_id, value=value)
        return rows

    return _add


