# roi_model/cli.py
# Command-line interface entry point (argparse)
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from roi_model.config.loaders import ConfigLoadError, load_scenarios
from roi_model.config.models import BusinessParameters, FormInputs
from roi_model.engine import compute
from roi_model.formatting import format_won
from roi_model.results import CostAnalysisResult
from roi_model.logging_config import DEFAULT_LOG_DIR, ERROR_LOGGER, SCENARIO_LOGGER, setup_logging
from roi_model.reporting import (
    COL_REMARK,
    analysis_text,
    breakdown_table,
    format_breakdown,
    save_detailed_results,
    summary,
)
from roi_model.sensitivity import sweep

# Get logger for this module
logger = logging.getLogger(__name__)

# Form flags and the FormInputs field each one sets
FORM_FLAGS = {
    "revenue_eok": "annual_revenue_eok",
    "personnel": "personnel_count",
    "salary_mil": "salary_mil",
    "units": "equipment_units",
    "reuse_optical": "reuse_optical",
    "misdetect_reduction": "misdetect_reduction_pct",
    "quality_reduction": "quality_defect_reduction_pct",
    "target_personnel": "target_personnel",
}


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Compare manual inspection costs with AI inspection: ROI, break-even and 5-year TCO."
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML scenario file. Without it the form values below are used."
    )
    parser.add_argument(
        "--scenario",
        action="append",
        default=None,
        help="Scenario name from --config to run (repeatable, default: all)."
    )

    form = parser.add_argument_group("form inputs (display units)")
    form.add_argument("--revenue-eok", type=str, help="Annual revenue in 억원")
    form.add_argument("--personnel", type=str, help="Current inspection headcount")
    form.add_argument("--salary-mil", type=str, help="Average annual salary in 백만원")
    form.add_argument("--units", type=str, help="AI units (inspection lines) to deploy")
    form.add_argument(
        "--reuse-optical",
        action="store_true",
        default=None,
        help="Reuse existing optics instead of buying new ones"
    )
    form.add_argument("--misdetect-reduction", type=float, help="Misdetection improvement in percent")
    form.add_argument("--quality-reduction", type=float, help="Quality/defect improvement in percent")
    form.add_argument("--target-personnel", type=str, help="Headcount after AI adoption")

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to save CSV/JSON reports (and the chart with --plot)."
    )
    parser.add_argument("--plot", action="store_true", help="Write a cost comparison chart")
    parser.add_argument(
        "--sweep",
        type=str,
        default=None,
        help="Parameter to sweep, e.g. target_ai_personnel or misdetect_reduction"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(DEFAULT_LOG_DIR),
        help=f"Directory to store log files (default: {DEFAULT_LOG_DIR})"
    )

    return parser.parse_args(argv)


def form_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """FormInputs fields explicitly given on the command line."""
    return {
        field: getattr(args, flag)
        for flag, field in FORM_FLAGS.items()
        if getattr(args, flag) is not None
    }


def resolve_scenarios(args: argparse.Namespace) -> Dict[str, BusinessParameters]:
    """Scenarios to evaluate: from --config, or a single one built from form flags."""
    if args.config:
        scenarios = load_scenarios(args.config)
        if args.scenario:
            missing = [name for name in args.scenario if name not in scenarios]
            if missing:
                raise ConfigLoadError(f"Unknown scenario(s) {missing}; available: {list(scenarios)}")
            scenarios = {name: scenarios[name] for name in args.scenario}
        return scenarios

    return {"cli": FormInputs(**form_overrides(args)).to_business_parameters()}


def print_report(name: str, params: BusinessParameters, out=None) -> CostAnalysisResult:
    """Evaluate one scenario and print its summary and breakdown."""
    out = out or sys.stdout
    result = compute(params)
    s = summary(result)

    print(f"=== {name} ===", file=out)
    print(f"초기 도입 비용:        {format_won(s['initial_investment'])}", file=out)
    print(f"연간 절감액 (첫해):    {format_won(s['annual_saving_y1'])}", file=out)
    print(f"연간 절감액 (2년차+):  {format_won(s['annual_saving_y2plus'])}", file=out)
    print(f"투자 회수 기간:        {s['roi_display']}", file=out)
    break_even = s["break_even_year"]
    print(f"손익분기 년차:         {f'{break_even}년차' if break_even else '없음'}", file=out)
    print(f"5년 TCO 절감액:        {format_won(s['tco_saving'])} ({s['tco_saving_rate']} %)", file=out)
    print("", file=out)
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(format_breakdown(breakdown_table(result)).drop(columns=[COL_REMARK]).to_string(index=False), file=out)
    print("", file=out)
    print(analysis_text(result), file=out)
    print("", file=out)

    logging.getLogger(SCENARIO_LOGGER).info(
        f"{name}: investment={result.initial_investment:,.0f} saving_y1={result.annual_saving_y1:,.0f} "
        f"roi='{result.roi_display}' tco_saving={result.tco_saving:,.0f}"
    )
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the roi-model CLI."""
    # Get error logger early in case we need it for initialization errors
    err_logger = logging.getLogger(ERROR_LOGGER)

    try:
        args = parse_arguments(argv)
        setup_logging(log_dir=Path(args.log_dir), debug=args.debug)
        logger.info(f"Starting ROI run with arguments: {vars(args)}")

        scenarios = resolve_scenarios(args)
        output_dir = Path(args.output_dir) if args.output_dir else None

        for name, params in scenarios.items():
            result = print_report(name, params)
            if output_dir is not None:
                save_detailed_results(result, output_dir, name)
                if args.plot:
                    # matplotlib is only imported when a chart is requested
                    from roi_model.plotting import plot_cost_comparison
                    plot_cost_comparison(result, output_dir, name)
            if args.sweep:
                df = sweep(params, args.sweep)
                print(f"--- sweep: {args.sweep} ---")
                print(df.to_string(index=False))
                if output_dir is not None:
                    df.to_csv(output_dir / f"{name}_sweep_{args.sweep}.csv", index=False)

        if args.plot and output_dir is None:
            logger.warning("--plot needs --output-dir; no chart written")

        logger.info("ROI run completed")
        return 0

    except (ConfigLoadError, ValueError) as e:
        err_logger.error(f"Error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        err_logger.exception(f"Unexpected error: {e}")
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
