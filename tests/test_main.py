"""Tests for the gedgraph command line."""

from database import create_database
from main import main, parse_args


def test_import_creates_database(gedcom_file, tmp_path):
    db_path = tmp_path / "out.db"

    assert main([str(gedcom_file), "--database", str(db_path)]) == 0

    with create_database(db_path) as store:
        assert store.count_nodes("Person") == 3
        assert store.count_nodes("Family") == 1


def test_fresh_replaces_existing_database(gedcom_file, tmp_path):
    db_path = tmp_path / "out.db"
    main([str(gedcom_file), "--database", str(db_path)])
    main([str(gedcom_file), "--database", str(db_path), "--fresh"])

    with create_database(db_path) as store:
        assert store.count_nodes("Family") == 1


def test_rerun_without_fresh_adds_families(gedcom_file, tmp_path):
    db_path = tmp_path / "out.db"
    main([str(gedcom_file), "--database", str(db_path)])
    main([str(gedcom_file), "--database", str(db_path)])

    with create_database(db_path) as store:
        assert store.count_nodes("Family") == 2
        assert store.count_nodes("Person") == 3


def test_norwegian_vocabulary(gedcom_file, tmp_path):
    db_path = tmp_path / "out.db"

    assert main([str(gedcom_file), "--database", str(db_path), "--language", "no", "--validate"]) == 0

    with create_database(db_path) as store:
        assert store.count_nodes("Familie") == 1
        assert store.count_relationships("BARN") == 1


def test_missing_gedcom_file(tmp_path):
    assert main([str(tmp_path / "missing.ged"), "--database", str(tmp_path / "out.db")]) == 1
    assert not (tmp_path / "out.db").exists()


def test_defaults_come_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("GEDGRAPH_DATABASE", str(tmp_path / "env.db"))
    monkeypatch.setenv("GEDGRAPH_LANGUAGE", "no")
    monkeypatch.setenv("GEDGRAPH_LOG_LEVEL", "debug")

    args = parse_args(["family.ged"])

    assert args.database == tmp_path / "env.db"
    assert args.language == "no"
    assert args.log_level == "DEBUG"
