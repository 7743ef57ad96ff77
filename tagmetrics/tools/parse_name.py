"""Inspect metric name expressions from the command line.

Prints one JSON line per expression, e.g.::

    python -m tagmetrics.tools.parse_name 'http_req_duration{status:200}'
    {"name":"http_req_duration","tags":["status:200"]}

With ``--clause`` each argument is parsed as a submetric clause instead and
the resulting tag mapping is printed. With ``--config`` the metrics declared
in that YAML file are registered first and each expression is also resolved
against them (``declared``, ``type`` and, for tagged names, ``submetric``).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tagmetrics.core.config_loader import load_config
from tagmetrics.core.logging_config import setup_logging
from tagmetrics.core.structured_logging import log_error, log_info
from tagmetrics.metrics.errors import MetricsError, NameSyntaxError
from tagmetrics.metrics.metric import parse_metric_name, parse_submetric_clause
from tagmetrics.metrics.registry import Registry, declare_metrics


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tagmetrics-parse", description=__doc__.splitlines()[0])
    parser.add_argument("expressions", nargs="+", metavar="EXPR")
    parser.add_argument(
        "--clause",
        action="store_true",
        help="parse arguments as submetric clauses (key:value,...)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config whose 'metrics' block is declared before resolving",
    )
    return parser


def _load_registry(path: Path) -> Registry:
    config = load_config(path)
    setup_logging(config)
    registry = Registry()
    declared = declare_metrics(registry, config)
    log_info(logger, "metrics_declared", config=str(path), count=len(declared))
    return registry


def _resolve(registry: Registry, expr: str, name: str, tags: List[str]) -> Dict[str, Any]:
    metric = registry.get(name)
    if metric is None:
        return {"declared": False}
    result: Dict[str, Any] = {"declared": True, "type": metric.type.value}
    if tags:
        submetric = registry.get_or_create_submetric(expr)
        result["submetric"] = submetric.name
    return result


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    args = _build_parser().parse_args(argv)

    registry = None
    if args.config is not None:
        try:
            registry = _load_registry(args.config)
        except MetricsError as exc:
            log_error(logger, "metrics_config_invalid", config=str(args.config), detail=str(exc))
            return 1

    status = 0
    for expr in args.expressions:
        if args.clause:
            print(json.dumps({"clause": expr, "tags": parse_submetric_clause(expr)}, separators=(",", ":")))
            continue
        try:
            name, tags = parse_metric_name(expr)
        except NameSyntaxError as exc:
            log_error(logger, "metric_name_invalid", expression=expr, detail=exc.detail)
            status = 1
            continue
        output: Dict[str, Any] = {"name": name, "tags": tags}
        if registry is not None:
            output.update(_resolve(registry, expr, name, tags))
        print(json.dumps(output, separators=(",", ":")))
    return status


if __name__ == "__main__":
    sys.exit(main())
