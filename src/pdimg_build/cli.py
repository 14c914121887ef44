"""pdimg - Create a persistent data image for a device's factory partition."""
from __future__ import annotations

import logging
from pathlib import Path

import click

from pdimg_core.errors import PdImageError

from . import __version__
from .batch import LEDGER_NAME, build_batch
from .request import BuildRequest, build_image

CONTEXT_SETTINGS = {"help_option_names": ["-help", "--help", "-h"]}


def _setup_logging(verbose: int) -> None:
    logging.basicConfig(
        format="%(name)s: %(levelname)s: %(message)s",
        level={0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG),
    )


def _pick_mac(checked: str | None, unchecked: str | None, what: str) -> tuple[str | None, bool]:
    if checked is not None and unchecked is not None:
        raise click.UsageError(f"give the {what} mac address once, with or without format checking")
    if unchecked is not None:
        return unchecked, False
    return checked, True


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("-sn", "--serial-number", "serial_number", metavar="SN", help="The board serial number.")
@click.option(
    "-wifi_mac", "--wifi-mac", "wifi_mac", metavar="xx:xx:xx:xx:xx:xx",
    help="The board wifi mac address. The format must be 00:50:43:xx:xx:xx.",
)
@click.option(
    "-wifi_mac_no_check", "--wifi-mac-no-check", "wifi_mac_no_check", metavar="xx:xx:xx:xx:xx:xx",
    help="The board wifi mac address without format checking.",
)
@click.option(
    "-bt_mac", "--bt-mac", "bt_mac", metavar="xx:xx:xx:xx:xx:xx",
    help="The board bluetooth mac address. The format must be 00:50:43:xx:xx:xx.",
)
@click.option(
    "-bt_mac_no_check", "--bt-mac-no-check", "bt_mac_no_check", metavar="xx:xx:xx:xx:xx:xx",
    help="The board bluetooth mac address without format checking.",
)
@click.option("-zb_mac", "--zb-mac", "zb_mac", metavar="MAC", help="The board zigbee mac address.")
@click.option(
    "-o", "--output", "output", required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="The path of the generated persistent data image file.",
)
@click.option(
    "-test_checksum", "--test-checksum", "test_checksum", type=int, default=0, show_default=True,
    help="Add this offset to the checksum to produce a deliberately wrong image. Testing only.",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
@click.version_option(__version__, "--version", prog_name="pdimg")
def main(
    serial_number: str | None,
    wifi_mac: str | None,
    wifi_mac_no_check: str | None,
    bt_mac: str | None,
    bt_mac_no_check: str | None,
    zb_mac: str | None,
    output: Path,
    test_checksum: int,
    verbose: int,
) -> None:
    """Create a persistent data image holding the board identity records."""
    _setup_logging(verbose)
    wifi, wifi_strict = _pick_mac(wifi_mac, wifi_mac_no_check, "wifi")
    bt, bt_strict = _pick_mac(bt_mac, bt_mac_no_check, "bluetooth")
    request = BuildRequest(
        output=output,
        serial_number=serial_number,
        wifi_mac=wifi,
        wifi_mac_strict=wifi_strict,
        bt_mac=bt,
        bt_mac_strict=bt_strict,
        zb_mac=zb_mac,
        test_offset=test_checksum,
    )
    try:
        result = build_image(request)
    except PdImageError as e:
        # Fail closed with a single-line reason.
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"PASS: image generated at {result.output}")
    click.echo(f"  Records: {result.record_count}")
    click.echo(f"  Size: {result.size} bytes")
    click.echo(f"  Checksum: 0x{result.checksum:08x}")


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(file_okay=False, path_type=Path))
@click.option("--no-check", is_flag=True, help="Do not enforce the 00:50:43 vendor prefix on mac addresses.")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
@click.version_option(__version__, "--version", prog_name="pdimg-batch")
def batch_main(manifest: Path, out: Path, no_check: bool, verbose: int) -> None:
    """Build one image per MANIFEST row into OUT and record them in a ledger."""
    _setup_logging(verbose)
    try:
        ledger = build_batch(manifest, out, strict=not no_check)
    except PdImageError as e:
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"PASS: {len(ledger)} images generated in {out}")
    click.echo(f"  Ledger: {out / LEDGER_NAME}")


if __name__ == "__main__":
    main()
