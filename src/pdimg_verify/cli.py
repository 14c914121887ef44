import json
import logging
from pathlib import Path
import click
from .logic import verify_image

@click.group()
@click.option("-v", "--verbose", count=True, help="Increase log verbosity.")
def main(verbose: int):
    logging.basicConfig(
        format="%(name)s: %(levelname)s: %(message)s",
        level={0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG),
    )

@main.command("image")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def image_cmd(path: Path):
    result = verify_image(path)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

if __name__ == "__main__":
    main()
