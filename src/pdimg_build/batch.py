"""Batch manufacturing: one image per manifest row plus a parquet ledger."""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from pdimg_core.errors import ManifestError

from .request import BuildRequest, build_image

_logger = logging.getLogger(__name__)

IDENTITY_COLUMNS = ("serial_number", "wifi_mac", "bt_mac", "zb_mac")
LEDGER_NAME = "ledger.parquet"

LEDGER_SCHEMA = pa.schema(
    [
        ("output", pa.string()),
        ("serial_number", pa.string()),
        ("size", pa.int64()),
        ("checksum", pa.int64()),
        ("content_hash", pa.string()),
    ]
)


def load_manifest(manifest_path: Path) -> pd.DataFrame:
    """Read a CSV manifest. Empty cells mean "no record of this kind"."""
    df = pd.read_csv(manifest_path, dtype=str, keep_default_na=False)
    if "output" not in df.columns:
        raise ManifestError(f"{manifest_path}: missing 'output' column")
    unknown = set(df.columns) - {"output", *IDENTITY_COLUMNS}
    if unknown:
        raise ManifestError(f"{manifest_path}: unknown columns {sorted(unknown)}")
    for col in IDENTITY_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    names = df["output"].str.strip()
    if (names == "").any():
        raise ManifestError(f"{manifest_path}: row {int((names == '').idxmax()) + 1} has no output name")
    nested = names[names.map(lambda n: Path(n).name != n)]
    if not nested.empty:
        raise ManifestError(f"{manifest_path}: output {nested.iloc[0]!r} must be a plain file name")
    dupes = names[names.duplicated()]
    if not dupes.empty:
        raise ManifestError(f"{manifest_path}: duplicate output {dupes.iloc[0]!r}")
    df["output"] = names
    return df


def _cell(value: str) -> str | None:
    return value if value != "" else None


def build_batch(manifest_path: Path, out_dir: Path, strict: bool = True) -> pd.DataFrame:
    """Build every image listed in the manifest into ``out_dir``.

    Stops at the first failing row. The ledger is only written once every
    image has been built.
    """
    df = load_manifest(Path(manifest_path))
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    ledger: list[dict] = []
    for row_no, row in enumerate(df.itertuples(index=False), start=1):
        request = BuildRequest(
            output=out_dir / row.output,
            serial_number=_cell(row.serial_number),
            wifi_mac=_cell(row.wifi_mac),
            wifi_mac_strict=strict,
            bt_mac=_cell(row.bt_mac),
            bt_mac_strict=strict,
            zb_mac=_cell(row.zb_mac),
        )
        _logger.debug("row %d -> %s", row_no, request.output)
        result = build_image(request)
        ledger.append(
            {
                "output": row.output,
                "serial_number": request.serial_number,
                "size": result.size,
                "checksum": result.checksum,
                "content_hash": hashlib.sha256(result.output.read_bytes()).hexdigest(),
            }
        )

    table_df = pd.DataFrame(ledger, columns=LEDGER_SCHEMA.names)
    table = pa.Table.from_pandas(table_df, schema=LEDGER_SCHEMA, preserve_index=False)
    pq.write_table(table, out_dir / LEDGER_NAME)
    _logger.info("wrote %d images and %s", len(ledger), out_dir / LEDGER_NAME)
    return table_df
