"""Import of the asset spreadsheet export (French number format)."""

import csv
import io
import logging
import re
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Tuple

from app.models.asset import AssetType, Geography

logger = logging.getLogger(__name__)

_IR_PATTERN = re.compile(r"(\d+%?\s*IR)", re.IGNORECASE)

# Spreadsheet header -> asset field
COLUMNS = {
    "name": "Name / Ticker",
    "who": "Who",
    "asset_type": "Asset Type",
    "auto_refresh": "Auto Refresh",
    "geo": "Geo",
    "quantity": "Qty",
    "buying_value": "Buying value",
    "buying_amount": "Buying Amount",
    "current_value": "Current Value",
    "current_amount": "Amount (€)",
    "dividend_per_share": "Dividende/action",
    "notes": "Notes",
    "isin": "ISIN",
    "ticker": "Ticker",
    "startup_rating": "Etat start-up",
}


@dataclass
class ParsedAsset:
    """One spreadsheet row, ready to become an Asset."""

    name: str
    who: str
    asset_type: AssetType
    geo: Optional[Geography] = None
    quantity: float = 0.0
    buying_value: float = 0.0
    buying_amount: float = 0.0
    current_value: float = 0.0
    current_amount: float = 0.0
    auto_refresh: bool = False
    dividend_per_share: float = 0.0
    notes: Optional[str] = None
    isin: Optional[str] = None
    ticker: Optional[str] = None
    startup_rating: Optional[str] = None
    ir_reduction: Optional[str] = None

    def as_dict(self) -> Dict:
        return asdict(self)


def parse_french_number(value: Optional[str]) -> float:
    """Parse "28 268,43 €" -> 28268.43. Blank, "-" and garbage give 0."""
    if not value or value.strip() in ("", "-"):
        return 0.0
    cleaned = re.sub(r"[€%\s  ]", "", value).replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().upper() == "TRUE"


def parse_geo(value: Optional[str]) -> Optional[Geography]:
    value = (value or "").strip()
    try:
        return Geography(value)
    except ValueError:
        return None


def extract_ir_reduction(notes: Optional[str]) -> Optional[str]:
    """Pull an income-tax reduction mention like "25% IR" out of the notes."""
    if not notes:
        return None
    match = _IR_PATTERN.search(notes)
    return match.group(1) if match else None


class AssetCSVImporter:
    """Parses the spreadsheet export into ParsedAsset rows."""

    def __init__(self, default_owner: str):
        self.default_owner = default_owner

    def parse_row(self, row: Dict[str, str]) -> Optional[ParsedAsset]:
        def col(field_name: str) -> str:
            return (row.get(COLUMNS[field_name]) or "").strip()

        name = col("name")
        if not name:
            return None

        asset_type = AssetType(col("asset_type") or AssetType.STOCK.value)
        notes = col("notes") or None

        return ParsedAsset(
            name=name,
            who=col("who") or self.default_owner,
            asset_type=asset_type,
            geo=parse_geo(col("geo")),
            quantity=parse_french_number(col("quantity")),
            buying_value=parse_french_number(col("buying_value")),
            buying_amount=parse_french_number(col("buying_amount")),
            current_value=parse_french_number(col("current_value")),
            current_amount=parse_french_number(col("current_amount")),
            auto_refresh=parse_bool(col("auto_refresh")),
            dividend_per_share=parse_french_number(col("dividend_per_share")),
            notes=notes,
            isin=col("isin") or None,
            ticker=col("ticker") or None,
            startup_rating=col("startup_rating") or None,
            ir_reduction=extract_ir_reduction(notes) if asset_type == AssetType.STARTUP else None,
        )

    def parse_csv(self, content: str) -> Tuple[List[ParsedAsset], List[str]]:
        """Parse entire CSV content and return assets and errors."""
        assets: List[ParsedAsset] = []
        errors: List[str] = []

        # Amounts use a decimal comma, so try ";" before ","
        sample = content.splitlines()[0] if content else ""
        delimiter = ";" if sample.count(";") > sample.count(",") else ","
        reader = csv.DictReader(io.StringIO(content), delimiter=delimiter)

        if not reader.fieldnames:
            errors.append("Could not parse CSV headers")
            return assets, errors
        reader.fieldnames = [f.strip() for f in reader.fieldnames]

        for row_num, row in enumerate(reader, start=2):
            try:
                parsed = self.parse_row(row)
            except ValueError as e:
                errors.append(f"Row {row_num}: {e}")
                continue
            if parsed:
                assets.append(parsed)

        logger.info(f"Parsed {len(assets)} assets from CSV ({len(errors)} errors)")
        return assets, errors
