from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from .config import ParseOptions, load_options
from .elements import ElementCategory
from .parse import ParseResult, parse_filename
from .scanner import list_media_files

app = typer.Typer(add_completion=False)

SUMMARY_COLUMNS = {
    "episode": ElementCategory.EPISODE_NUMBER,
    "episode_alt": ElementCategory.EPISODE_NUMBER_ALT,
    "volume": ElementCategory.VOLUME_NUMBER,
    "season": ElementCategory.ANIME_SEASON,
    "version": ElementCategory.RELEASE_VERSION,
    "type": ElementCategory.ANIME_TYPE,
}


def _load(config: Optional[Path]) -> ParseOptions:
    if config is None:
        return ParseOptions()
    try:
        return load_options(config)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        typer.echo(f"Invalid config {config}: {exc}", err=True)
        raise typer.Exit(code=2)


def summarize(name: str, result: ParseResult) -> dict:
    row = {"file": name}
    for column, category in SUMMARY_COLUMNS.items():
        row[column] = ",".join(result.get_all(category))
    return row


def _write_status_files(base: Path, rows: list[dict]) -> None:
    base.parent.mkdir(parents=True, exist_ok=True)

    # JSON
    base.with_suffix(".json").write_text(
        json.dumps(rows, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )

    # CSV
    csv_path = base.with_suffix(".csv")
    fieldnames = ["file", *SUMMARY_COLUMNS]
    with csv_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in fieldnames})


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every number decision")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def parse(
    names: List[str] = typer.Argument(..., help="Filenames to parse"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False),
    as_json: bool = typer.Option(False, "--json", help="Print every element as JSON"),
) -> None:
    options = _load(config)

    if as_json:
        out = [{"file": n, "elements": parse_filename(n, options).to_dict()} for n in names]
        typer.echo(json.dumps(out, ensure_ascii=False, indent=2))
        return

    for n in names:
        row = summarize(n, parse_filename(n, options))
        fields = " ".join(f"{k}={v}" for k, v in row.items() if k != "file" and v)
        typer.echo(f"{n} -> {fields or '(no numbers)'}")


@app.command()
def scan(
    directory: Path = typer.Argument(..., exists=True, file_okay=False),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False),
    status: Path = typer.Option(Path("numbers"), help="Base path for numbers.json/numbers.csv"),
) -> None:
    options = _load(config)
    media = list_media_files(directory)

    typer.echo(f"Found {len(media)} media files.")
    if not media:
        typer.echo("No media files found. Check the directory and file extensions.")
        return

    rows = [summarize(m.path.name, parse_filename(m.path.name, options)) for m in media]
    _write_status_files(status, rows)

    missing = [r["file"] for r in rows if not r["episode"] and not r["volume"]]
    typer.echo(f"Wrote status: {status.with_suffix('.json')} and {status.with_suffix('.csv')}")
    if missing:
        typer.echo("Files without an episode or volume number:")
        for name in missing:
            typer.echo(f"- {name}")


if __name__ == "__main__":
    app()
