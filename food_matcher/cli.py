"""
foodmatch - match recipe ingredients against a food catalog.

Usage:
    foodmatch --request request.json --output result.json
    foodmatch --request request.json --catalog catalog.json --review-queue review.jsonl
    foodmatch --request request.json --configs configs/ --max-candidates 3 --split-details

Request JSON:
    {"ingredients": [{"raw": "2 ribs celery", "name": "celery"}, ...],
     "catalog": [{"id": "f1", "name": "Celery", "aliases": []}, ...]}

A --catalog file may be a JSON list of entries or {"catalog": [...]}.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .adapters.embedding_gateway import create_embedding_gateway
from .config.feature_flags import FLAGS, verbose_enabled
from .config_loader import get_code_git_sha, load_matcher_config
from .intake.intake_service import MAX_CANDIDATES, match_ingredients
from .intake.review_queue import JsonlReviewQueueGateway, ReviewQueue
from .schemas import CatalogEntryIn, MatchRequest, build_response

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"


def _load_json(path: Path) -> Any:
    with open(path) as f:
        return json.load(f)


def load_catalog_file(path: Path) -> List[CatalogEntryIn]:
    """Load catalog entries from a JSON list or {"catalog": [...]} file."""
    data = _load_json(path)
    if isinstance(data, dict):
        data = data.get("catalog", [])
    if not isinstance(data, list):
        raise ValueError(f"Catalog file must contain a list of entries: {path}")
    return [CatalogEntryIn(**entry) for entry in data]


def run_match(
    request: MatchRequest,
    config_dir: Optional[Path] = None,
    review_queue_path: Optional[Path] = None,
    max_candidates: Optional[int] = None,
    split_details: bool = False
) -> Dict[str, Any]:
    """
    Run one match request end to end.

    Returns:
        MatchResponse as a JSON-ready dict
    """
    config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR

    veto_tables = None
    thresholds = None
    config_version = "configs@builtin"
    if (config_dir / "match_gotchas.yml").exists() or config_dir != DEFAULT_CONFIG_DIR:
        config = load_matcher_config(str(config_dir))
        veto_tables = config.veto_tables
        thresholds = config.match_thresholds()
        config_version = config.config_version
        if verbose_enabled():
            print(f"[CFG] config_version={config_version}")
    elif verbose_enabled():
        print(f"[WARNING] No configs at {config_dir}; using built-in gotcha tables")

    review_queue = None
    if review_queue_path:
        review_queue = ReviewQueue(JsonlReviewQueueGateway(review_queue_path))

    if max_candidates is None:
        max_candidates = request.max_candidates or MAX_CANDIDATES

    parsed = [item.to_parsed() for item in request.ingredients]
    catalog = [entry.to_entry(split_details=split_details) for entry in request.catalog]

    outcome = match_ingredients(
        parsed,
        catalog,
        embedding_gateway=create_embedding_gateway(),
        review_queue=review_queue,
        thresholds=thresholds,
        veto_tables=veto_tables,
        max_candidates=max_candidates,
    )

    response = build_response(outcome, config_version, get_code_git_sha())
    return response.model_dump()


def print_summary(result: Dict[str, Any]):
    summary = result["summary"]
    print("\n" + "=" * 60)
    print("MATCH SUMMARY")
    print("=" * 60)
    print(f"Ingredients:     {summary['total']}")
    print(f"Auto-matched:    {summary['auto_matched']}")
    print(f"Probable:        {summary['probable']}")
    print(f"Pending review:  {summary['pending_review']}")
    print(f"Config version:  {result['config_version']}")
    print(f"Code SHA:        {result['code_git_sha']}")
    print("=" * 60)

    for item in result["ingredients"]:
        match = item["match"]
        target = f"{match['food_name']} ({match['confidence']})" if match else "-"
        print(f"  [{item['tier']:>14}] {item['name']} → {target}")


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Match recipe ingredients against a food catalog"
    )
    parser.add_argument("--request", type=Path, required=True,
                        help="Request JSON with ingredients (and optionally catalog)")
    parser.add_argument("--catalog", type=Path,
                        help="Catalog JSON; replaces the request's catalog")
    parser.add_argument("--configs", type=Path,
                        help=f"Config directory (default: {DEFAULT_CONFIG_DIR})")
    parser.add_argument("--output", type=Path,
                        help="Write response JSON here (default: stdout)")
    parser.add_argument("--review-queue", type=Path,
                        help="Append pending-review items to this JSONL file")
    parser.add_argument("--max-candidates", type=int,
                        help=f"Candidates kept per ingredient (default: {MAX_CANDIDATES})")
    parser.add_argument("--split-details", action="store_true",
                        help="Split comma-separated catalog names into name + details")
    parser.add_argument("--flags", action="store_true",
                        help="Print feature flag status before running")

    args = parser.parse_args(argv)

    if args.flags:
        FLAGS.print_status()

    try:
        request = MatchRequest(**_load_json(args.request))
        if args.catalog:
            request.catalog = load_catalog_file(args.catalog)
    except (OSError, json.JSONDecodeError, ValidationError, ValueError, TypeError) as e:
        print(f"ERROR: Could not read input: {e}", file=sys.stderr)
        return 1

    try:
        result = run_match(
            request,
            config_dir=args.configs,
            review_queue_path=args.review_queue,
            max_candidates=args.max_candidates,
            split_details=args.split_details,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump(result, f, indent=2)
        print_summary(result)
        print(f"\n✓ Results written to {args.output}")
    else:
        print(json.dumps(result, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
