# tests/test_init_db.py
from pawprint.db import session as db_session_module
from pawprint.init_db import init_db


def test_init_db_creates_tables(mocker) -> None:
    create_tables = mocker.patch("pawprint.init_db.create_tables")

    init_db()

    create_tables.assert_called_once_with()


def test_drop_tables_drops_all_metadata(mocker) -> None:
    drop_all = mocker.patch.object(db_session_module.Base.metadata, "drop_all")

    db_session_module.drop_tables()

    drop_all.assert_called_once_with(bind=db_session_module.engine)
