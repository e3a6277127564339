"""
SearchModels CLI Entry Point
"""

import argparse
import json
import logging
import sys
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from searchmodels.branding import print_banner, print_population, print_summary
from searchmodels.common.constants import LOG_DATE_FORMAT, LOG_FORMAT, SUPPORTED_CONFIG_SUFFIXES
from searchmodels.common.helpers import format_duration, load_object
from searchmodels.engine.configuration import SearchConfig, SearchParameters, SpaceSpec
from searchmodels.engine.search import ModelSearch
from searchmodels.executor.settings import ExecutorSettings
from searchmodels.repository.population import Population

logger = logging.getLogger(__name__)


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if path.suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(f"Unsupported config format: {path.suffix}")

    with open(path, "r") as f:
        if path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f) or {}


def _build(cls, d):
    if not is_dataclass(cls) or not isinstance(d, dict):
        return d

    known = {f.name for f in fields(cls)}
    unknown = set(d) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")

    return cls(**d)


def build_config_from_dict(data: Dict[str, Any]) -> SearchConfig:
    """Build a SearchConfig from a dictionary, including nested sections."""
    data = dict(data)

    space = data.get("space")
    if isinstance(space, list):
        data["space"] = [_build(SpaceSpec, s) for s in space]
    elif isinstance(space, str):
        data["space"] = SpaceSpec(factory=space)
    elif space is not None:
        data["space"] = _build(SpaceSpec, space)

    # seeds must be hashable; YAML sequences arrive as lists
    seeds = data.get("initial_population")
    if isinstance(seeds, list):
        data["initial_population"] = [tuple(s) if isinstance(s, list) else s for s in seeds]

    if "params" in data:
        data["params"] = _build(SearchParameters, data["params"] or {})
    if "executor" in data:
        data["executor"] = _build(ExecutorSettings, data["executor"] or {})

    return _build(SearchConfig, data)


def create_search(config: SearchConfig) -> ModelSearch:
    """Resolve the import paths of a configuration into a ready search."""
    issues = config.validate()
    if issues:
        raise ValueError(f"Configuration errors: {issues}")

    error_function = load_object(config.error_function)
    spaces = [load_object(spec.factory)(**spec.kwargs) for spec in config.space_specs]
    space = spaces if isinstance(config.space, list) else spaces[0]

    return ModelSearch(
        error_function,
        space,
        config.initial_population,
        params=config.params,
        executor=config.executor,
        seed=config.seed,
    )


def write_population(population: Population, output_path: str):
    """Write the population as JSON, rendering non-JSON configurations with repr."""
    entries = [{"config": e.config, "error": e.error} for e in population]
    with open(output_path, "w") as f:
        json.dump(entries, f, indent=2, default=repr)


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SearchModels: Stochastic Model Search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run a search")
    run_parser.add_argument(
        "-c", "--config",
        type=str,
        required=True,
        help="Path to configuration file (YAML or JSON)",
    )
    run_parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Write the final population to this JSON file",
    )
    run_parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of best configurations to display",
    )
    run_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress banner output",
    )
    run_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG-level) logging output",
    )

    # Version command
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.command == "version":
        from searchmodels import __version__
        print(f"SearchModels v{__version__}")
        return 0

    if args.command == "run":
        if not args.quiet:
            print_banner()

        # Configure logging before anything else
        log_level = logging.DEBUG if args.verbose else logging.INFO
        logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        try:
            config = build_config_from_dict(load_config(args.config))
            search = create_search(config)
            population = search.run()

            if args.output:
                write_population(population, args.output)
                logger.info(f"Population written to {args.output}")

            if not args.quiet:
                print_population(population, top=args.top)
                elapsed = sum(s.elapsed for s in search.history)
                evaluation_time = sum(s.evaluation_time for s in search.history)
                print_summary({
                    "Iterations": search.iterations,
                    "Stop Reason": search.stop_reason.value,
                    "Configurations Observed": search.queue.observed,
                    "Best Error": population.best_error,
                    "Mean Error": search.history[-1].mean_error,
                    "Evaluation Time": format_duration(evaluation_time),
                    "Elapsed Time": format_duration(elapsed),
                })
            return 0

        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
