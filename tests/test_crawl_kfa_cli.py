from __future__ import annotations

import asyncio
import json

import pytest

from kfa_crawler.cli import crawl_kfa
from kfa_crawler.config import CrawlConfig

KFA_ENV_VARS = (
    "KFA_YEARS",
    "KFA_GRADES",
    "KFA_OUTPUT_DIR",
    "KFA_REQUEST_DELAY_MS",
    "KFA_MAX_CONCURRENCY",
    "KFA_LIMIT",
    "KFA_BASE_URL",
    "KFA_REQUEST_TIMEOUT",
    "KFA_NEXACRO_USER",
    "KFA_NEXACRO_SECRET",
    "KFA_JSESSIONID",
    "KFA_LOG_LEVEL",
    "KFA_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in KFA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class SingleCompetitionApi:
    """Stands in for KfaApiClient in --test mode."""

    def __init__(self, has_auth=True, info=None):
        self.has_nexacro_auth = has_auth
        self.info = {"TITLE": "전국 고등리그"} if info is None else info
        self.info_calls = []
        self.requested_months = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def get_match_info(self, match_idx):
        self.info_calls.append(match_idx)
        return self.info or None

    async def get_match_single_list(self, match_idx, year_month=""):
        self.requested_months.append(year_month)
        return {
            "singleList": [
                {"IDX": "ABCDEF1234", "TEAM_HOME": "서울FC", "TEAM_AWAY": "수원FC"},
                {"IDX": "FEDCBA9876", "TEAM_HOME": "부산FC", "TEAM_AWAY": "대전FC", "TH_SCORE_FINAL": "1"},
            ]
        }

    async def get_match_detail(self, match_idx, single_idx):
        return {"dsCommonInfo": [{"TEAM_HOME": "부산FC"}], "dsTimelineInfo": []}


def _args(tmp_path, *extra):
    return ["--env-file", str(tmp_path / "missing.env"), *extra]


def test_build_config_applies_cli_overrides(tmp_path):
    parser = crawl_kfa.build_arg_parser()
    args = parser.parse_args(
        _args(tmp_path, "-y", "2025, 2026", "-g", "고등", "-o", str(tmp_path), "-d", "0", "-p", "8", "-l", "3")
    )

    config = crawl_kfa.build_config(args)

    assert config.years == ("2025", "2026")
    assert config.grades == ("고등",)
    assert config.output_dir == str(tmp_path)
    assert config.delay_ms == 0
    assert config.max_concurrency == 8
    assert config.limit == 3
    assert config.year_tag == "2025_2026"
    assert config.has_detail_auth is False


def test_environment_supplies_defaults_and_flags_win(tmp_path, monkeypatch):
    monkeypatch.setenv("KFA_YEARS", "2024")
    monkeypatch.setenv("KFA_REQUEST_DELAY_MS", "250")
    monkeypatch.setenv("KFA_NEXACRO_USER", "user01")
    monkeypatch.setenv("KFA_NEXACRO_SECRET", "abc123")
    args = crawl_kfa.build_arg_parser().parse_args(_args(tmp_path, "-d", "100"))

    config = crawl_kfa.build_config(args)

    assert config.years == ("2024",)
    assert config.delay_ms == 100
    assert config.delay_seconds == pytest.approx(0.1)
    assert config.has_detail_auth is True


def test_invalid_numeric_environment_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("KFA_MAX_CONCURRENCY", "many")
    args = crawl_kfa.build_arg_parser().parse_args(_args(tmp_path))

    with pytest.raises(ValueError):
        crawl_kfa.build_config(args)


def test_config_rejects_non_positive_concurrency():
    with pytest.raises(ValueError):
        CrawlConfig(max_concurrency=0)
    with pytest.raises(ValueError):
        CrawlConfig(delay_ms=-1)


def test_main_runs_crawl_and_returns_zero(tmp_path, monkeypatch):
    seen = {}

    async def fake_crawl(config):
        seen["config"] = config

    monkeypatch.setattr(crawl_kfa, "crawl_kfa", fake_crawl)

    exit_code = crawl_kfa.main(_args(tmp_path, "-y", "2026", "-o", str(tmp_path)))

    assert exit_code == 0
    assert seen["config"].years == ("2026",)


def test_main_reports_fatal_error_with_exit_code_one(tmp_path, monkeypatch, capsys):
    async def failing_crawl(config):
        raise RuntimeError("portal unreachable")

    monkeypatch.setattr(crawl_kfa, "crawl_kfa", failing_crawl)

    exit_code = crawl_kfa.main(_args(tmp_path, "-y", "2026"))

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "[FATAL] portal unreachable" in err
    assert "Traceback" in err


def test_test_mode_dumps_first_finished_game(tmp_path, monkeypatch):
    api = SingleCompetitionApi()
    monkeypatch.setattr(crawl_kfa, "build_api_client", lambda config: api)

    exit_code = crawl_kfa.main(_args(tmp_path, "-t", "C1", "--month", "2026-03", "-o", str(tmp_path)))

    assert exit_code == 0
    assert api.info_calls == ["C1"]
    assert api.requested_months == ["2026-03"]
    dump = tmp_path / "debug_matchDetail_FEDCBA98.json"
    assert json.loads(dump.read_text(encoding="utf-8")) == {
        "dsCommonInfo": [{"TEAM_HOME": "부산FC"}],
        "dsTimelineInfo": [],
    }


def test_single_competition_without_auth_skips_detail(tmp_path, monkeypatch):
    api = SingleCompetitionApi(has_auth=False)
    monkeypatch.setattr(crawl_kfa, "build_api_client", lambda config: api)
    config = CrawlConfig(output_dir=str(tmp_path))

    path = asyncio.run(crawl_kfa.probe_competition(config, "C1"))

    assert path is None
    assert api.requested_months == ["2026-02"]
    assert list(tmp_path.iterdir()) == []


def test_single_competition_continues_when_info_is_missing(tmp_path, monkeypatch):
    api = SingleCompetitionApi(info={})
    monkeypatch.setattr(crawl_kfa, "build_api_client", lambda config: api)
    config = CrawlConfig(output_dir=str(tmp_path))

    path = asyncio.run(crawl_kfa.probe_competition(config, "C7"))

    assert api.info_calls == ["C7"]
    assert path == str(tmp_path / "debug_matchDetail_FEDCBA98.json")
