"""Export/import market snapshots as JSON documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from lmsrmarket.market.lmsr import LmsrMarket
from lmsrmarket.market.outcomes import OutcomeSet
from lmsrmarket.market.snapshot import restore_market, snapshot_market
from lmsrmarket.models import MarketDocument


def export_market_json(market: LmsrMarket[Any], output_path: str | Path) -> Path:
    """Write the market's snapshot and outcome labels to a JSON file. Returns the resolved path."""
    path = Path(output_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = MarketDocument(outcomes=market.outcomes.labels, snapshot=snapshot_market(market))
    path.write_text(doc.model_dump_json(indent=2), encoding="utf-8")
    return path


def import_market_json(input_path: str | Path) -> LmsrMarket[str]:
    """Read a JSON document written by export_market_json.

    Raises pydantic.ValidationError for malformed fields and ValueError when
    the snapshot does not fit its outcome list.
    """
    doc = MarketDocument.model_validate_json(Path(input_path).read_text(encoding="utf-8"))
    return restore_market(doc.snapshot, OutcomeSet(doc.outcomes))
