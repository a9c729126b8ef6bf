"""
JSON file output for crawl results (one file per entity kind per run).
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Iterable, List, Union

from kfa_crawler.models.crawl import CrawlResult

logger = logging.getLogger(__name__)


def _to_jsonable(item: Any) -> Any:
    if is_dataclass(item) and not isinstance(item, type):
        return asdict(item)
    return item


class JsonRepository:
    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def save(self, filename: str, items: Iterable[Any]) -> int:
        """Write items as indented UTF-8 JSON; returns bytes written."""
        return self.save_raw(filename, [_to_jsonable(item) for item in items])

    def save_raw(self, filename: str, document: Any) -> int:
        """Write any JSON document, e.g. raw probe tables."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        data = json.dumps(document, ensure_ascii=False, indent=2).encode("utf-8")
        path.write_bytes(data)
        logger.info("  Saved: %s (%s bytes)", path, f"{len(data):,}")
        return len(data)

    def save_crawl_result(self, result: CrawlResult, year_tag: str) -> List[Path]:
        written: List[Path] = []

        def _write(name: str, items: List[Any]) -> None:
            filename = f"{name}_{year_tag}.json"
            self.save(filename, items)
            written.append(self.output_dir / filename)

        _write("Matches", result.competitions)
        _write("Match_Results", result.results)
        if result.details:
            _write("Match_Details", result.details)
        _write("Teams", result.teams)
        _write("Players", result.players)
        return written
