from __future__ import annotations

import json
import logging
import tomllib
from datetime import datetime, timezone
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from interpret.occurrence import build_interpreter
from interpret.taxonomy import TaxonomyInterpreter
from io_utils.logs import setup_logging
from io_utils.read import iter_verbatim_records
from io_utils.write import summarize_issues, write_jsonl, write_manifest
from qc.cache import CachedTaxonomyMatcher
from qc.gbif import build_taxonomy_matcher

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[Path]) -> Dict[str, Any]:
    cfg_path = resources.files("config").joinpath("config.default.toml")
    with cfg_path.open("rb") as f:
        config = tomllib.load(f)
    if config_path:
        with config_path.open("rb") as f:
            user_cfg = tomllib.load(f)
        _deep_update(config, user_cfg)
    return config


def _deep_update(d: Dict[str, Any], u: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict) and isinstance(d.get(k), dict):
            _deep_update(d[k], v)
        else:
            d[k] = v
    return d


def setup_run(
    output: Optional[Path], config: Optional[Path], json_logs: Optional[bool] = None
) -> Dict[str, Any]:
    """Prepare configuration and logging for a run."""
    cfg = load_config(config)
    log_cfg = cfg.get("logging", {})
    setup_logging(
        output,
        level=log_cfg.get("level", "INFO"),
        json_format=log_cfg.get("json", False) if json_logs is None else json_logs,
    )
    return cfg


def interpret_cli(
    input_path: Path,
    output: Path,
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    json_logs: Optional[bool] = None,
    interpreter=None,
) -> Dict[str, Any]:
    """Interpret every record of a JSON Lines file and write the results.

    Writes ``interpreted.jsonl`` and ``manifest.json`` into ``output`` and
    returns the manifest.
    """
    cfg = setup_run(output, config, json_logs)
    if interpreter is None:
        interpreter = build_interpreter(cfg)

    run_id = datetime.now(timezone.utc).isoformat()
    verbatim = list(iter_verbatim_records(input_path))
    logger.info(f"Read {len(verbatim)} verbatim records from {input_path}")

    records = interpreter.interpret_all(verbatim, workers)
    count = write_jsonl(output, records)

    meta: Dict[str, Any] = {
        "run_id": run_id,
        "started_at": run_id,
        "completed_at": datetime.now(timezone.utc).isoformat(),
        "input": str(input_path),
        "records": count,
        "issues": summarize_issues(records),
        "config": cfg,
    }
    matcher = interpreter.taxonomy.matcher
    if isinstance(matcher, CachedTaxonomyMatcher):
        meta["taxonomy_cache"] = matcher.cache.get_stats()
    write_manifest(output, meta)

    logger.info(f"Interpreted {count} records. Output written to {output}")
    return meta


def match_cli(
    name: str,
    rank: Optional[str] = None,
    kingdom: Optional[str] = None,
    config: Optional[Path] = None,
    matcher=None,
) -> Dict[str, Any]:
    """Match a single name against the reference taxonomy."""
    cfg = setup_run(None, config)
    interpreter = TaxonomyInterpreter(matcher if matcher is not None else build_taxonomy_matcher(cfg))
    outcome = interpreter.match(kingdom=kingdom, scientific_name=name, rank=rank)

    result: Dict[str, Any] = {
        "name": name,
        "status": outcome.status.value,
        "issues": sorted(issue.value for issue in outcome.issues),
    }
    if outcome.is_successful:
        match = outcome.payload
        result.update(
            {
                "matchType": match.match_type.value,
                "usageKey": match.usage_key,
                "scientificName": match.scientific_name,
                "rank": match.rank.value if match.rank else None,
                "classification": {r.value: value for r, value in match.classification.items()},
            }
        )
    return result


app = typer.Typer(help="Biodiversity occurrence record interpreter")


@app.command()
def interpret(
    input: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="JSON Lines file of verbatim records",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Output directory",
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
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Worker threads"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log as JSON lines"),
) -> None:
    try:
        meta = interpret_cli(input, output, config, workers, json_logs or None)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Interpreted {meta['records']} records into {output}")


@app.command()
def match(
    name: str = typer.Argument(..., help="Scientific name to match"),
    rank: Optional[str] = typer.Option(None, "--rank", "-r", help="Rank of the name"),
    kingdom: Optional[str] = typer.Option(None, "--kingdom", "-k", help="Kingdom hint"),
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
    try:
        result = match_cli(name, rank, kingdom, config)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(result, indent=2))
    if result["status"] != "success":
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
