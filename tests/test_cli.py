from pathlib import Path

import yaml
from typer.testing import CliRunner

from ministore import MiniStore, StoreOptions, save_options
from ministore.cli import app

runner = CliRunner()


def test_put_get_delete(tmp_path: Path) -> None:
    db = str(tmp_path / "cli.db")

    result = runner.invoke(app, ["put", "greeting", "hello", "--db", db])
    assert result.exit_code == 0

    result = runner.invoke(app, ["get", "greeting", "--db", db])
    assert result.exit_code == 0
    assert "hello" in result.output

    result = runner.invoke(app, ["delete", "greeting", "--db", db])
    assert result.exit_code == 0
    assert MiniStore(db).exists("greeting") is False


def test_get_missing_key_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["get", "nope", "--db", str(tmp_path / "cli.db")])
    assert result.exit_code == 1


def test_exists_exit_codes(tmp_path: Path) -> None:
    db = str(tmp_path / "cli.db")
    MiniStore(db).put("present", "1")

    result = runner.invoke(app, ["exists", "present", "--db", db])
    assert result.exit_code == 0
    assert "true" in result.output

    result = runner.invoke(app, ["exists", "absent", "--db", db])
    assert result.exit_code == 1
    assert "false" in result.output


def test_keys_with_pattern(tmp_path: Path) -> None:
    db = str(tmp_path / "cli.db")
    _ = MiniStore(db).batch_put([("user:1", "a"), ("user:2", "b"), ("order:1", "c")])

    result = runner.invoke(app, ["keys", "--db", db])
    assert result.exit_code == 0
    assert sorted(result.output.split()) == ["order:1", "user:1", "user:2"]

    result = runner.invoke(app, ["keys", "--like", "user:%", "--db", db])
    assert result.exit_code == 0
    assert sorted(result.output.split()) == ["user:1", "user:2"]


def test_batch_from_yaml(tmp_path: Path) -> None:
    db = str(tmp_path / "cli.db")
    items_file = tmp_path / "items.yaml"
    with open(items_file, "w") as f:
        yaml.dump({"a": "1", "b": "2"}, f)

    result = runner.invoke(app, ["batch", str(items_file), "--db", db])
    assert result.exit_code == 0
    store = MiniStore(db)
    assert store.get("a") == "1"
    assert store.get("b") == "2"


def test_batch_rejects_non_string_values(tmp_path: Path) -> None:
    db = str(tmp_path / "cli.db")
    items_file = tmp_path / "items.yaml"
    with open(items_file, "w") as f:
        yaml.dump({"a": "1", "b": 2}, f)

    result = runner.invoke(app, ["batch", str(items_file), "--db", db])
    assert result.exit_code == 1
    assert MiniStore(db).keys() == []


def test_config_file_overrides_db(tmp_path: Path) -> None:
    db_path = tmp_path / "from_config.db"
    config_path = tmp_path / "store.yaml"
    save_options(StoreOptions.from_path(db_path, journal_mode_wal=True), config_path)

    result = runner.invoke(app, ["put", "k", "v", "--config", str(config_path)])
    assert result.exit_code == 0
    assert MiniStore(db_path).get("k") == "v"


def test_missing_config_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["keys", "--config", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1


def test_bench_and_drop(tmp_path: Path) -> None:
    db = str(tmp_path / "perf.db")

    result = runner.invoke(app, ["bench", "--batch", "20", "--puts", "5", "--db", db])
    assert result.exit_code == 0
    assert "Batch Inserts" in result.output
    assert "to get 25 items" in result.output

    result = runner.invoke(app, ["drop", "--db", db])
    assert result.exit_code == 0
    assert not Path(db).exists()


def test_malformed_config_file_fails(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("database: [unclosed\n", encoding="utf-8")

    result = runner.invoke(app, ["keys", "--config", str(config_path)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, yaml.YAMLError)


def test_batch_malformed_yaml_fails(tmp_path: Path) -> None:
    db = str(tmp_path / "cli.db")
    items_file = tmp_path / "items.yaml"
    items_file.write_text("a: [unclosed\n", encoding="utf-8")

    result = runner.invoke(app, ["batch", str(items_file), "--db", db])
    assert result.exit_code == 1
    assert not isinstance(result.exception, yaml.YAMLError)
