from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path

import pytest

from flashcard_tools.cli.args import parse_cli_args
from flashcard_tools.cli.main import main
from flashcard_tools.cli.orchestrator import run_command
from flashcard_tools.config_manager import FlashcardToolsSettings
from flashcard_tools.lookup import RemoteResult, build_resolver
from flashcard_tools.storage import InMemoryStore

from tests.helpers.jisho_stubs import NOW_MS, SAMPLE_DICTIONARY, FakeClock, JishoStub, jisho_payload

API_BASE = "https://jisho.test/api/v1/search/words"


@pytest.fixture
def storage_file(tmp_path: Path) -> Path:
    path = tmp_path / "flashcards.json"
    path.write_text(json.dumps({"dictionary": SAMPLE_DICTIONARY}, ensure_ascii=False), encoding="utf-8")
    return path


def _cli(storage_file: Path, *argv: str) -> int:
    return main(["--storage", str(storage_file), *argv])


def _run_with_stub(argv, store, stub: JishoStub, clock: FakeClock):
    args = parse_cli_args(argv)
    settings = FlashcardToolsSettings(jisho_api_base=API_BASE)
    out = io.StringIO()

    async def scenario():
        async with stub.client() as http:
            resolver = build_resolver(settings, store, http_client=http, clock=clock)
            return await run_command(args, settings, store=store, resolver=resolver, out=out)

    return asyncio.run(scenario()), out.getvalue()


def test_lookup_prints_local_resolution(storage_file: Path, capsys) -> None:
    assert _cli(storage_file, "lookup", "勉強する") == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["勉強 [local]", "Reading: べんきょう", "study ; diligence"]


def test_lookup_json_output(storage_file: Path, capsys) -> None:
    assert _cli(storage_file, "lookup", "食べる", "--json") == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "source": "local",
        "found_for": "食べる",
        "reading": "たべる",
        "definition": "to eat",
    }


def test_inspect_dict_reports_keys(storage_file: Path, capsys) -> None:
    assert _cli(storage_file, "inspect-dict") == 0

    assert capsys.readouterr().out.splitlines() == ["Dictionary keys: 4", "Sample key: 食べる"]


def test_inspect_dict_without_store(tmp_path: Path, capsys) -> None:
    assert _cli(tmp_path / "absent.json", "inspect-dict") == 0

    assert "No dictionary keys present." in capsys.readouterr().out


def test_flashcard_commands_round_trip(storage_file: Path, capsys) -> None:
    assert _cli(storage_file, "add", "食べる", "--example", "ご飯を食べる。") == 0
    assert _cli(storage_file, "add", "勉強する") == 0
    assert "Saved flashcard: 勉強する - study ; diligence" in capsys.readouterr().out

    assert _cli(storage_file, "add-example", "1", "毎日勉強する。") == 0
    assert _cli(storage_file, "delete", "0") == 0
    capsys.readouterr()

    assert _cli(storage_file, "list") == 0
    listing = capsys.readouterr().out
    assert "[0] 勉強する  (source: local)" in listing
    assert "Examples: 毎日勉強する。" in listing
    assert "食べる" not in listing

    stored = json.loads(storage_file.read_text(encoding="utf-8"))
    assert [card["term"] for card in stored["flashcards"]] == ["勉強する"]
    assert stored["dictionary"] == SAMPLE_DICTIONARY


def test_list_without_cards(storage_file: Path, capsys) -> None:
    assert _cli(storage_file, "list") == 0

    assert "No flashcards yet" in capsys.readouterr().out


def test_out_of_range_positions_exit_with_one(storage_file: Path, capsys) -> None:
    assert _cli(storage_file, "delete", "3") == 1
    assert _cli(storage_file, "add-example", "0", "文") == 1

    out = capsys.readouterr().out
    assert out.count("No flashcard at position") == 2


def test_corrupt_store_exits_with_storage_error(tmp_path: Path, capsys) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    assert _cli(path, "list") == 4
    assert "Storage error" in capsys.readouterr().err


def test_undecodable_store_exits_with_storage_error(tmp_path: Path, capsys) -> None:
    path = tmp_path / "broken.json"
    path.write_bytes(b'{"flashcards": "\xff"}')

    assert _cli(path, "list") == 4
    assert "Storage error" in capsys.readouterr().err


def test_invalid_configuration_exits_with_config_error(tmp_path: Path, capsys) -> None:
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"cache_ttl_ms": -5}), encoding="utf-8")

    assert main(["--config", str(config), "list"]) == 3
    assert "Configuration error" in capsys.readouterr().err


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args([])
    assert excinfo.value.code == 2


def test_global_options_are_parsed() -> None:
    args = parse_cli_args(
        ["--storage", "s.json", "--jisho-url", API_BASE, "--debug", "add", "犬", "--example", "a", "--example", "b"]
    )

    assert args.storage_path == "s.json"
    assert args.jisho_api_base == API_BASE
    assert args.debug is True
    assert args.command == "add"
    assert args.examples == ["a", "b"]


def test_lookup_uses_remote_when_dictionary_misses(store, clock: FakeClock) -> None:
    stub = JishoStub({"犬": jisho_payload("犬", "いぬ", ["dog"])})

    code, out = _run_with_stub(["lookup", "犬"], store, stub, clock)

    assert code == 0
    assert out.splitlines() == ["犬 [remote]", "Reading: いぬ", "dog"]


def test_lookup_reports_unresolved_terms(store, clock: FakeClock) -> None:
    code, out = _run_with_stub(["lookup", "zzzz"], store, JishoStub(), clock)

    assert code == 1
    assert out.strip() == "No definition found for 'zzzz'."


def test_cache_clean_removes_expired_entries(clock: FakeClock) -> None:
    fresh = RemoteResult(word="犬", reading="いぬ", definition="dog", fetched_at_ms=NOW_MS)
    expired = RemoteResult(word="猫", reading="ねこ", definition="cat", fetched_at_ms=0)
    store = InMemoryStore({"jisho_cache": {"犬": fresh.to_dict(), "猫": expired.to_dict()}})

    code, out = _run_with_stub(["cache-clean"], store, JishoStub(), clock)

    assert code == 0
    assert out.strip() == "Removed 1 expired cache entries."
    assert set(store.snapshot()["jisho_cache"]) == {"犬"}
