"""Scrape companion gift tables into ``companions.json``.

Usage::

    python -m influence_calculator.harvester --output influence_calculator/data/companions.json

The scrape is sequential: the companion index is read first, then each
companion page in turn, with a short pause between requests.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from .config import (
    COMPANIONS_URL,
    DATA_DIR,
    DATA_FILES,
    FLEET_VENDOR,
    HARVEST_DELAY,
    RARITIES,
    RARITY_LABELS,
    REQUEST_TIMEOUT,
)
from .errors import HarvestError

logger = logging.getLogger(__name__)

ROW_CLASSES = {f"gift-quality-{rarity}": rarity for rarity in RARITIES}


@dataclass(slots=True)
class ScrapedGift:
    rarity: str
    name: Optional[str]
    image_url: Optional[str]


@dataclass(slots=True)
class ScrapedCompanion:
    name: Optional[str]
    href: Optional[str]
    image_url: Optional[str]
    gifts: List[ScrapedGift] = field(default_factory=list)


def _text(tag: Optional[Tag]) -> Optional[str]:
    if tag is None:
        return None
    return tag.get_text(strip=True) or None


def _attr_url(tag: Optional[Tag], attr: str, base_url: str) -> Optional[str]:
    if tag is None or not tag.get(attr):
        return None
    return urljoin(base_url, str(tag[attr]))


def parse_companion_index(html: str, base_url: str = COMPANIONS_URL) -> List[ScrapedCompanion]:
    """Return the non-spoiler companions listed on the index page."""

    soup = BeautifulSoup(html, "html.parser")
    companions: List[ScrapedCompanion] = []
    for entry in soup.select(".armorcategory"):
        if "spoiler-companion" in (entry.get("class") or []):
            continue
        companions.append(
            ScrapedCompanion(
                name=_text(entry.find("b")),
                href=_attr_url(entry.find("a"), "href", base_url),
                image_url=_attr_url(entry.find("img"), "src", base_url),
            )
        )
    return companions


def _select_row(rows: Sequence[Tag]) -> Tag:
    for row in rows:
        cells = row.find_all("td")
        if cells and FLEET_VENDOR in cells[-1].get_text():
            return row
    return rows[0]


def parse_companion_gifts(html: str, base_url: str = COMPANIONS_URL) -> List[ScrapedGift]:
    """Pick one gift per rarity from a companion page's gift table.

    The row sold by the fleet gift vendor wins; otherwise the first row of
    that rarity is used.
    """

    soup = BeautifulSoup(html, "html.parser")
    table = soup.select_one(".table-individual-gifts")
    if table is None:
        return []
    body = table.find("tbody")
    if body is None:
        return []

    gifts: List[ScrapedGift] = []
    for row_class, rarity in ROW_CLASSES.items():
        rows = body.select(f"tr.{row_class}")
        if not rows:
            continue
        cells = _select_row(rows).find_all("td")
        image = cells[0].find("img") if len(cells) > 0 else None
        name = cells[1].find("b") if len(cells) > 1 else None
        gifts.append(
            ScrapedGift(
                rarity=rarity,
                name=_text(name),
                image_url=_attr_url(image, "src", base_url),
            )
        )
    return gifts


def to_template(companions: Sequence[ScrapedCompanion]) -> Dict[str, List[Dict[str, object]]]:
    """Reshape scraped companions into the ``companions.json`` layout."""

    result: List[Dict[str, object]] = []
    for index, companion in enumerate(companions, start=1):
        by_rarity = {gift.rarity: gift for gift in companion.gifts}
        gifts: Dict[str, Dict[str, str]] = {}
        for rarity in RARITIES:
            gift = by_rarity.get(rarity)
            gifts[rarity] = {
                "name": (gift.name if gift else None) or "",
                "type": RARITY_LABELS[rarity],
                "imageUrl": (gift.image_url if gift else None) or "",
            }
        result.append(
            {
                "id": str(index),
                "name": companion.name or "",
                "imageUrl": companion.image_url or "",
                "gifts": gifts,
            }
        )
    return {"companions": result}


class CompanionHarvester:
    """Fetches the companion index and each companion page in sequence."""

    def __init__(
        self,
        index_url: str = COMPANIONS_URL,
        session: requests.Session | None = None,
        delay: float = HARVEST_DELAY,
        sleep=time.sleep,
    ) -> None:
        self.index_url = index_url
        self._session = session or requests.Session()
        self._delay = delay
        self._sleep = sleep

    def _get(self, url: str) -> str:
        response = self._session.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.text

    def harvest(self) -> List[ScrapedCompanion]:
        logger.info("Fetching companion index %s", self.index_url)
        try:
            index_html = self._get(self.index_url)
        except requests.RequestException as exc:
            raise HarvestError(f"Unable to fetch {self.index_url}: {exc}") from exc

        companions = parse_companion_index(index_html, self.index_url)
        logger.info("Found %d companions (excluding spoilers)", len(companions))

        for position, companion in enumerate(companions, start=1):
            logger.info("[%d/%d] Processing companion: %s", position, len(companions), companion.name)
            if not companion.href:
                logger.warning("No link for %s, skipping", companion.name)
                continue
            try:
                page_html = self._get(companion.href)
            except requests.RequestException as exc:
                logger.warning("Failed to fetch %s: %s", companion.href, exc)
                continue
            companion.gifts = parse_companion_gifts(page_html, companion.href)
            if companion.gifts:
                logger.info("Found %d gifts for %s", len(companion.gifts), companion.name)
            else:
                logger.warning("No gifts found for %s", companion.name)
            if self._delay > 0:
                self._sleep(self._delay)
        return companions


def write_companions(companions: Sequence[ScrapedCompanion], output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(to_template(companions), indent=2) + "\n", encoding="utf-8")
    logger.info("Results written to %s", output)
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape companion gifts into companions.json")
    parser.add_argument("--url", default=COMPANIONS_URL, help="Companion index page")
    parser.add_argument(
        "--output",
        type=Path,
        default=DATA_DIR / DATA_FILES["companions"],
        help="Where to write the JSON file",
    )
    parser.add_argument("--delay", type=float, default=HARVEST_DELAY, help="Seconds between pages")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        companions = CompanionHarvester(args.url, delay=args.delay).harvest()
    except HarvestError as exc:
        logger.error("%s", exc)
        return 1
    write_companions(companions, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
