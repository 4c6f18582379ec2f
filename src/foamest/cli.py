import argparse
import json
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .api import evaluate
from .config import Config
from .config import load_config as load_runtime_config
from .crm import build_quote_payload
from .document import load_document, save_document
from .errors import EstimateError
from .reporting import breakdown_frame, comparison_frame, make_summary_text

BASE_DIR = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)


def run(document: Path, runtime_config: Config, args: Optional[argparse.Namespace] = None) -> int:
    """Load ``document``, evaluate it and write any requested artifacts."""

    stage_counter = 0

    def log_stage(message: str) -> None:
        nonlocal stage_counter
        stage_counter += 1
        logger.info("[stage:%02d] %s", stage_counter, message)

    def log_detail(message: str) -> None:
        logger.info("           %s", message)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    log_stage(f"Loading estimate document {document}")
    state = load_document(document)
    log_detail(f"areas={len(state.areas)} | applications={sum(len(a.foam_applications) for a in state.areas)}")

    if args is not None and getattr(args, "migrate", False):
        target = save_document(state, document)
        log_detail(f"document rewritten at current version => {target}")

    log_stage("Pricing areas and foam applications")
    report = evaluate(state, runtime_config.business)
    for area in report.estimate.areas:
        if area.error:
            log_detail(f"{area.name} :: excluded ({area.error})")
            continue
        for app in area.applications:
            log_detail(
                f"{area.name} :: {app.foam_type} {app.foam_thickness:g}in :: sqft={app.sqft:,.2f} | "
                f"gallons={app.gallons:,.2f} | ${app.price_per_sqft:,.2f}/sqft | total=${app.total_cost:,.2f}"
            )

    log_stage("Comparing estimate against recorded actuals")
    for line in report.comparison.lines:
        logger.debug("           %s: estimate=%.2f actual=%.2f delta=%+.2f", line.metric, line.estimate, line.actual, line.delta)

    breakdown_csv = getattr(args, "breakdown_csv", None) if args is not None else None
    if breakdown_csv:
        log_stage("Writing application breakdown")
        out_csv = Path(breakdown_csv).expanduser().resolve()
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        breakdown_frame(report.estimate).to_csv(out_csv, index=False)
        comparison_path = out_csv.with_name(f"{out_csv.stem}_comparison.csv")
        comparison_frame(report.comparison).to_csv(comparison_path, index=False)
        log_detail(f"outputs_written => {out_csv}, {comparison_path}")

    line_items = getattr(args, "line_items", None) if args is not None else None
    if line_items:
        log_stage("Building CRM quote payload")
        out_json = Path(line_items).expanduser().resolve()
        out_json.parent.mkdir(parents=True, exist_ok=True)
        with open(out_json, "w", encoding="utf-8") as fh:
            json.dump(build_quote_payload(state, runtime_config.business), fh, indent=2)
        log_detail(f"quote_payload_written => {out_json}")

    logger.info("\n=== SUMMARY ===\n")
    logger.info("%s", make_summary_text(report))
    logger.info("Inputs used:")
    logger.info(" - Estimate document: %s", Path(document).resolve())
    if runtime_config.settings_path:
        logger.info(" - Business settings: %s", runtime_config.settings_path)
    else:
        logger.info(" - Business settings: (defaults and environment)")
    return 0


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Price a spray foam insulation job and compare it against actuals")
    parser.add_argument("document", help="Saved estimate JSON document")
    parser.add_argument("--settings", help="Business settings YAML/JSON (monthly overhead, expected hours, target margin)")
    parser.add_argument("--output-dir", help="Directory for generated outputs")
    parser.add_argument("--breakdown-csv", help="Write the per-application breakdown to this CSV")
    parser.add_argument("--line-items", help="Write the CRM quote payload to this JSON file")
    parser.add_argument("--migrate", action="store_true", help="Rewrite the document at the current schema version")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(BASE_DIR / ".env")
    args = parse_args(argv)
    runtime_cfg = load_runtime_config(os.environ, args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    if args.breakdown_csv is None and (args.output_dir or os.environ.get("FOAMEST_OUTPUT_DIR")):
        args.breakdown_csv = str(runtime_cfg.output_dir / "Foam_Breakdown.csv")
    try:
        return run(Path(args.document), runtime_cfg, args)
    except EstimateError as exc:
        logger.error("Estimate rejected: %s", exc)
        return 2
    except FileNotFoundError as exc:
        logger.error("File not found: %s", exc.filename or exc)
        return 2
    except Exception:  # pragma: no cover - defensive
        logger.exception("Fatal error during estimate evaluation")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
