from __future__ import annotations

import logging
from typing import Iterable

from flask import Flask, current_app
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from extensions import db


logger = logging.getLogger(__name__)


class SchemaCapabilities:
    """
    Snapshot of the columns the live database actually has.

    Some tables (clubs) were extended by hand-run SQL scripts, so a deployed
    database can lag behind the models. The snapshot is taken once per
    application and cached in `app.extensions`; call `refresh()` after running
    migrations on a live process.
    """

    EXTENSION_KEY = "schema_capabilities"

    def __init__(self, tables: dict[str, frozenset[str]]):
        self._tables = tables

    @classmethod
    def discover(cls) -> "SchemaCapabilities":
        inspector = inspect(db.engine)
        existing = set(inspector.get_table_names())
        tables: dict[str, frozenset[str]] = {}
        for name in db.metadata.tables:
            if name not in existing:
                tables[name] = frozenset()
                continue
            tables[name] = frozenset(col["name"] for col in inspector.get_columns(name))
        return cls(tables)

    @classmethod
    def for_app(cls, app: Flask | None = None) -> "SchemaCapabilities":
        app = app or current_app._get_current_object()
        snapshot = app.extensions.get(cls.EXTENSION_KEY)
        if snapshot is None:
            snapshot = cls.refresh(app)
        return snapshot

    @classmethod
    def refresh(cls, app: Flask | None = None) -> "SchemaCapabilities":
        app = app or current_app._get_current_object()
        try:
            snapshot = cls.discover()
        except OperationalError as exc:
            # Do not cache: assume the declared schema until the database answers.
            logger.warning("Could not inspect database schema: %s", exc)
            return cls.from_models()

        missing = {}
        for table, cols in snapshot._tables.items():
            absent = snapshot.missing_columns(table, db.metadata.tables[table].columns.keys())
            if cols and absent:
                missing[table] = absent
        if missing:
            logger.info("Database schema is missing optional columns: %s", missing)
        app.extensions[cls.EXTENSION_KEY] = snapshot
        return snapshot

    @classmethod
    def from_models(cls) -> "SchemaCapabilities":
        return cls({
            name: frozenset(table.columns.keys())
            for name, table in db.metadata.tables.items()
        })

    def columns(self, table: str) -> frozenset[str]:
        return self._tables.get(table, frozenset())

    def missing_columns(self, table: str, columns: Iterable[str]) -> list[str]:
        available = self.columns(table)
        return [col for col in columns if col not in available]
