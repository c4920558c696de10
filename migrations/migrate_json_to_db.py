"""
Migration Script: JSON file store to database
Copies every record from a memory-backend data file into the relational
database, keeping ids and timestamps. Records whose id already exists are
skipped, so the import can be re-run safely.

Usage:
    flask import-json data.json
    python -m migrations.migrate_json_to_db data.json
"""

import sys

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from extensions import db
from schemas import COLLECTION_KINDS, SINGLETON_KINDS, EntityKind
from storage.database import MODELS, DatabaseStorage
from storage.memory import MemoryStorage

IMPORT_ORDER = COLLECTION_KINDS + SINGLETON_KINDS + (EntityKind.ANALYTICS_EVENT,)


def _columns(model, record):
    columns = model.__table__.columns.keys()
    return {key: value for key, value in record.items() if key in columns}


def migrate_collection(kind, records):
    """Insert one collection's records; returns (imported, skipped)"""
    model = MODELS[kind]
    imported = skipped = 0

    for record in records:
        if model.query.filter_by(id=record['id']).first():
            skipped += 1
            continue
        db.session.add(model(**_columns(model, record)))
        try:
            db.session.commit()
            imported += 1
        except IntegrityError as e:
            db.session.rollback()
            skipped += 1
            current_app.logger.warning(f"Skipped {kind.value} record {record['id']}: {str(e.orig)}")

    return imported, skipped


def migrate_singleton(kind, records):
    """Upsert the singleton row, if the file has one"""
    if not records:
        return 0, 0
    fields = {
        key: value for key, value in _columns(MODELS[kind], records[0]).items()
        if key not in ('id', 'slot', 'updated_at')
    }
    DatabaseStorage().singleton(kind).upsert(fields)
    return 1, 0


def import_json_file(path):
    """
    Import a JSON data file into the database. Requires an app context.

    Args:
        path (str): Data file written by the memory storage backend

    Returns:
        dict: {table_name: (imported, skipped)}
    """
    data = MemoryStorage(data_file=path).export()
    results = {}

    for kind in IMPORT_ORDER:
        records = data.get(kind.value, [])
        if kind in SINGLETON_KINDS:
            results[kind.value] = migrate_singleton(kind, records)
        else:
            results[kind.value] = migrate_collection(kind, records)
        current_app.logger.info(
            f"Imported {results[kind.value][0]} {kind.value} records "
            f"({results[kind.value][1]} skipped)")

    return results


@click.command('import-json')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_json_command(path):
    """Import a JSON data file into the configured database."""
    results = import_json_file(path)
    for table, (imported, skipped) in results.items():
        click.echo(f"  [OK] {table}: {imported} imported, {skipped} skipped")


if __name__ == '__main__':
    from app import create_app

    if len(sys.argv) != 2:
        print("Usage: python -m migrations.migrate_json_to_db <data.json>")
        sys.exit(1)

    with create_app().app_context():
        for table, (imported, skipped) in import_json_file(sys.argv[1]).items():
            print(f"  [OK] {table}: {imported} imported, {skipped} skipped")
