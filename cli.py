from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional
import tomllib

import typer

from dwc import (
    COUNTRY_NAMES,
    DatasetMetadata,
    DistributionRecord,
    TaxonRecord,
    assign_taxon_ids,
    derive_distribution,
    derive_taxa,
    validate,
)
from dwc.archive import build_manifest, create_archive
from errors import ConversionError
from io_utils.logs import setup_logging
from io_utils.read import read_checklist
from io_utils.write import write_distribution_csv, write_manifest, write_taxon_csv
from qc import NameParser, ParsedName, distinct_names, flag_for_review, parse_checklist_names


def load_config(config_path: Optional[Path]) -> Dict[str, Any]:
    cfg_path = resources.files("config").joinpath("config.default.toml")
    with cfg_path.open("rb") as f:
        config = tomllib.load(f)
    if config_path:
        with config_path.open("rb") as f:
            try:
                user_cfg = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConversionError("invalid_config", f"{config_path}: {exc}") from exc
        _deep_update(config, user_cfg)
    return config


def _deep_update(d: Dict[str, Any], u: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict) and isinstance(d.get(k), dict):
            _deep_update(d[k], v)
        else:
            d[k] = v
    return d


def setup_run(output: Optional[Path], config: Optional[Path]) -> tuple[Dict[str, Any], Path]:
    """Prepare configuration and logging for a run."""
    cfg = load_config(config)
    output_cfg = cfg.setdefault("output", {})
    if output is None:
        output = Path(output_cfg.get("dir", "data/processed"))
    output_cfg["dir"] = str(output)
    setup_logging(output, output_cfg.get("log_level", "INFO"))
    return cfg, output


def _input_path(cfg: Dict[str, Any], input_path: Optional[Path]) -> Path:
    if input_path is not None:
        return input_path
    return Path(cfg.get("input", {}).get("path", "data/raw/checklist.xlsx"))


def _read_rows(cfg: Dict[str, Any], input_path: Path):
    input_cfg = cfg.get("input", {})
    return read_checklist(
        input_path,
        sheet_name=input_cfg.get("sheet") or None,
        column_map=input_cfg.get("column_map") or None,
    )


def write_outputs(
    output: Path,
    taxa: tuple[TaxonRecord, ...],
    distribution: tuple[DistributionRecord, ...],
    meta: Dict[str, Any],
) -> None:
    """Write all output artifacts for a run."""
    write_taxon_csv(output, taxa)
    write_distribution_csv(output, distribution)
    write_manifest(output, meta)


def process_cli(
    input_path: Optional[Path] = None,
    output: Optional[Path] = None,
    config: Optional[Path] = None,
    archive: bool = False,
    compress: bool = False,
) -> Dict[str, Any]:
    """Core conversion logic used by the command line interface.

    Returns a summary with row counts and the names flagged for review.
    """
    cfg, output = setup_run(output, config)
    dataset = DatasetMetadata.from_config(cfg)
    country_names = {**COUNTRY_NAMES, **cfg.get("distribution", {}).get("country_names", {})}

    rows = _read_rows(cfg, _input_path(cfg, input_path))
    parser = NameParser.from_config(cfg)
    enriched, flagged = parse_checklist_names(rows, parser, cfg.get("corrections", {}))
    identified = assign_taxon_ids(enriched, dataset.shortname)

    taxa = derive_taxa(identified, dataset)
    distribution = derive_distribution(identified, country_names)
    validate(taxa, distribution)

    counts = {"source_rows": len(rows), "taxa": len(taxa), "distribution": len(distribution)}
    meta = build_manifest(dataset.model_dump(), counts)
    meta["review_names"] = [name.scientificname for name in flagged]
    write_outputs(output, taxa, distribution, meta)

    if archive or compress:
        create_archive(output, compress=compress)

    logging.info(
        "Converted %d rows into %d taxa and %d distribution records. Output written to %s",
        counts["source_rows"],
        counts["taxa"],
        counts["distribution"],
        output,
    )
    return {**counts, "review_names": meta["review_names"], "output": str(output)}


def check_names_cli(
    input_path: Optional[Path] = None, config: Optional[Path] = None
) -> List[ParsedName]:
    """Parse checklist names once and return those needing review."""
    cfg = load_config(config)
    setup_logging(None, cfg.get("output", {}).get("log_level", "INFO"))
    rows = _read_rows(cfg, _input_path(cfg, input_path))
    parsed = NameParser.from_config(cfg).parse_names(distinct_names(rows))
    return flag_for_review(parsed)


app = typer.Typer(help="Species checklist to Darwin Core converter")


@app.command()
def convert(
    input: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        dir_okay=False,
        file_okay=True,
        help="Checklist spreadsheet (defaults to [input].path)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Output directory (defaults to [output].dir)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        file_okay=True,
        help="Optional config file",
    ),
    archive: bool = typer.Option(False, "--archive", help="Write meta.xml next to the CSV files"),
    compress: bool = typer.Option(False, "--compress", help="Bundle the archive into dwca.zip"),
) -> None:
    """Convert a checklist into taxon.csv and distribution.csv."""
    try:
        summary = process_cli(input, output, config, archive=archive, compress=compress)
    except (ConversionError, OSError) as e:
        logging.error("Conversion failed: %s", e)
        typer.echo(f"❌ Conversion failed: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✅ Taxa: {summary['taxa']}")
    typer.echo(f"✅ Distribution records: {summary['distribution']}")
    if summary["review_names"]:
        typer.echo(f"⚠️  Names to review: {len(summary['review_names'])}")
    typer.echo(f"📄 Output: {summary['output']}")


@app.command("check-names")
def check_names(
    input: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        dir_okay=False,
        file_okay=True,
        help="Checklist spreadsheet (defaults to [input].path)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        file_okay=True,
        help="Optional config file",
    ),
) -> None:
    """List scientific names that the GBIF parser could not parse cleanly."""
    try:
        flagged = check_names_cli(input, config)
    except (ConversionError, OSError) as e:
        typer.echo(f"❌ Name check failed: {e}", err=True)
        raise typer.Exit(1)

    if not flagged:
        typer.echo("✅ All names parsed cleanly")
        return
    for result in flagged:
        typer.echo(
            f"{result.scientificname}\ttype={result.type or '-'}\t"
            f"parsed={result.parsed}\tparsedpartially={result.parsedpartially}"
        )


if __name__ == "__main__":
    app()
