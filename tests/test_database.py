"""Tests for engine construction and table creation."""

from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from storefront.models.database import build_engine, build_session_factory, create_tables, session_scope
from storefront.models.product import Product


def test_create_tables_on_given_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)

    create_tables(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"categories", "products"} <= tables
    columns = {c["name"] for c in inspect(engine).get_columns("products")}
    assert {"categories", "customization_schema"} <= columns


def test_session_scope_yields_working_session():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)

    with session_scope(build_session_factory(engine)) as db:
        assert db.query(Product).count() == 0
