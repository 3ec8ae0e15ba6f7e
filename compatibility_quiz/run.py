"""
Command-line runner for the compatibility scorer.

Usage:
    python -m compatibility_quiz.run --pair pair.json
    python -m compatibility_quiz.run --pairs pairs.csv --output scored.csv --report report.json

Single-pair mode prints the result the way the result screen shows it.
Batch mode performs the following steps:
1. Load configuration (optional)
2. Load answer pairs
3. Score every pair with the local scorer
4. Build an evaluation report
5. Save scored pairs and the report
"""

import argparse
import json
import logging
import sys
from typing import Dict, Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def _load_settings(config_path: Optional[str]) -> Dict[str, Any]:
    """Load and validate configuration, or return defaults."""
    from .configs import load_config, validate_config

    if config_path is None:
        return {}

    config = load_config(config_path)
    issues = validate_config(config)
    for issue in issues:
        logger.error(f"Config issue: {issue}")
    if issues:
        raise ValueError(f"Invalid configuration {config_path}: {len(issues)} issue(s)")

    setup_logging(config.get("global", {}).get("log_level", "INFO"))
    return config


def score_pair(
    pair_path: str,
    config_path: Optional[str] = None,
    return_breakdown: bool = False
) -> Dict[str, Any]:
    """
    Score one pair stored as JSON {"a": {...}, "b": {...}}.

    Args:
        pair_path: Path to the pair JSON file
        config_path: Optional YAML configuration
        return_breakdown: Whether to include per-question details

    Returns:
        Result dictionary in the app's wire shape
    """
    from .data_loading import load_answer_pair
    from .inference import create_scorer, format_percentage

    config = _load_settings(config_path)
    answers_a, answers_b = load_answer_pair(pair_path)
    scorer = create_scorer(config)

    result = scorer.compute(answers_a, answers_b, return_breakdown=return_breakdown)
    print(format_percentage(result.percentage))
    print(result.message)
    if result.breakdown:
        print(json.dumps(result.breakdown, indent=2))

    return result.to_dict()


def score_batch(
    pairs_path: str,
    config_path: Optional[str] = None,
    output_path: Optional[str] = None,
    report_path: Optional[str] = None
) -> Dict[str, Any]:
    """
    Score a CSV of answer pairs and build an evaluation report.

    Args:
        pairs_path: Path to the answer-pairs CSV
        config_path: Optional YAML configuration
        output_path: Where to write the scored CSV
        report_path: Where to write the JSON evaluation report

    Returns:
        Dictionary with the report and output paths
    """
    from .configs import get_config_value
    from .data_loading import load_answer_pairs, frame_to_pairs
    from .inference import LocalCompatibilityScorer, ScoringConfig
    from .evaluation import create_evaluation_report

    logger.info("=" * 60)
    logger.info("COMPATIBILITY QUIZ - BATCH SCORING")
    logger.info("=" * 60)

    config = _load_settings(config_path)
    delimiter = get_config_value(config, "data.delimiter", ",")
    quantiles = get_config_value(config, "evaluation.quantiles", [0.1, 0.25, 0.5, 0.75, 0.9])
    top_k = get_config_value(config, "evaluation.top_k_tokens", 10)

    pairs_df = load_answer_pairs(pairs_path, delimiter=delimiter)
    scorer = LocalCompatibilityScorer(ScoringConfig.from_config(config))

    scored_df = scorer.score_frame(pairs_df)
    logger.info(f"Scored {len(scored_df)} pairs")

    report = create_evaluation_report(
        "local_jaccard",
        scored_df,
        scorer=scorer,
        pairs_df=pairs_df,
        pairs=frame_to_pairs(pairs_df),
        quantiles=quantiles,
        top_k=top_k
    )
    logger.info("\n" + report.summary())

    if output_path:
        scored_df.to_csv(output_path, index=False)
        logger.info(f"Saved scored pairs to {output_path}")
    if report_path:
        report.save(report_path)

    return {
        "success": True,
        "n_pairs": len(scored_df),
        "output_path": output_path,
        "report_path": report_path,
        "report": report.to_dict()
    }


def main(argv=None):
    """Main entry point for the scorer."""
    parser = argparse.ArgumentParser(
        description="Score compatibility between quiz answer sets"
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--pair",
        type=str,
        help="JSON file with one pair: {\"a\": {...}, \"b\": {...}}"
    )
    mode.add_argument(
        "--pairs",
        type=str,
        help="CSV file with columns a_q1..a_q3, b_q1..b_q3"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (defaults built in)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output CSV for scored pairs (batch mode)"
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Output JSON evaluation report (batch mode)"
    )
    parser.add_argument(
        "--breakdown",
        action="store_true",
        help="Print per-question similarities (single-pair mode)"
    )

    args = parser.parse_args(argv)

    try:
        if args.pair:
            score_pair(args.pair, args.config, args.breakdown)
        else:
            score_batch(args.pairs, args.config, args.output, args.report)
        return 0
    except Exception as e:
        logger.exception(f"Scoring failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
