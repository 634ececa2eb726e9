"""Feature file loading on top of the official Gherkin parser.

``gherkin.parser.Parser`` builds the document AST and the pickle compiler
flattens it into runnable scenarios: Background steps are prepended and every
Examples row of an outline becomes its own scenario. This module maps those
pickles onto :class:`Scenario`/:class:`Step` and restores what pickles drop,
namely step keywords, source lines and outline row numbering.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from gherkin.errors import ParserError
from gherkin.parser import Parser
from gherkin.pickles.compiler import Compiler

from page_scenarios.errors import FeatureParseError
from page_scenarios.features.models import Feature, Scenario, Step
from page_scenarios.features.tags import TagExpression

logger = logging.getLogger(__name__)

_CONJUNCTIONS = {"And", "But", "*"}


def _walk(children: Iterable[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    """Yield every background and scenario node, descending into rules."""
    for child in children:
        if "rule" in child:
            yield from _walk(child["rule"].get("children", []))
        elif "background" in child:
            yield child["background"]
        elif "scenario" in child:
            yield child["scenario"]


def _index(feature: dict[str, Any]) -> tuple[dict[str, dict[str, Any]], dict[str, int]]:
    """Map AST node ids to step nodes and to source lines."""
    steps: dict[str, dict[str, Any]] = {}
    lines: dict[str, int] = {}
    for node in _walk(feature.get("children", [])):
        if "id" in node:
            lines[node["id"]] = node["location"]["line"]
        for step in node.get("steps", []):
            steps[step["id"]] = step
        for examples in node.get("examples", []):
            for row in examples.get("tableBody", []):
                lines[row["id"]] = row["location"]["line"]
    return steps, lines


def _parse_error(exc: ParserError, path: Optional[Path]) -> FeatureParseError:
    first = (getattr(exc, "errors", None) or [exc])[0]
    location = getattr(first, "location", None) or {}
    return FeatureParseError(str(first), path=path, line=location.get("line"))


def _description(raw: Optional[str]) -> str:
    return "\n".join(line.strip() for line in (raw or "").splitlines()).strip()


def parse_feature(text: str, *, path: Optional[Path] = None) -> Feature:
    """Parse feature ``text`` into a :class:`Feature`."""
    try:
        document = Parser().parse(text)
    except ParserError as exc:
        raise _parse_error(exc, path) from exc

    ast = document.get("feature")
    if not ast:
        raise FeatureParseError("No 'Feature:' declaration found", path=path)

    document["uri"] = str(path) if path is not None else "<string>"
    feature = Feature(
        name=ast["name"],
        tags=frozenset(tag["name"] for tag in ast.get("tags", [])),
        description=_description(ast.get("description")),
        path=path,
    )
    step_nodes, lines = _index(ast)
    rows_seen: dict[str, int] = {}

    for pickle in Compiler().compile(document):
        scenario_id = pickle["astNodeIds"][0]
        name = pickle["name"]
        line = lines.get(scenario_id, 0)
        if len(pickle["astNodeIds"]) > 1:
            rows_seen[scenario_id] = rows_seen.get(scenario_id, 0) + 1
            name = f"{name} (example {rows_seen[scenario_id]})"
            line = lines.get(pickle["astNodeIds"][-1], line)

        steps: list[Step] = []
        last_kind: Optional[str] = None
        for pickle_step in pickle["steps"]:
            node = step_nodes[pickle_step["astNodeIds"][0]]
            if "dataTable" in node or "docString" in node:
                argument = node.get("dataTable") or node.get("docString")
                raise FeatureParseError(
                    "Step data tables and doc strings are not supported",
                    path=path,
                    line=argument["location"]["line"],
                )
            keyword = node["keyword"].strip()
            kind = (last_kind or "*") if keyword in _CONJUNCTIONS else keyword
            last_kind = kind
            steps.append(Step(keyword=keyword, text=pickle_step["text"], kind=kind, line=node["location"]["line"]))

        feature.scenarios.append(
            Scenario(
                name=name,
                steps=steps,
                tags=frozenset(tag["name"] for tag in pickle.get("tags", [])),
                feature=feature.name,
                path=path,
                line=line,
            )
        )
    return feature


def load_feature(path: Path) -> Feature:
    return parse_feature(path.read_text(encoding="utf-8"), path=path)


def discover_feature_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand directories into sorted ``*.feature`` files."""
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(path.rglob("*.feature")))
        elif path.is_file():
            files.append(path)
        else:
            raise FileNotFoundError(f"Feature path not found: {path}")
    return files


def load_features(paths: Iterable[str | Path]) -> list[Feature]:
    features = [load_feature(path) for path in discover_feature_files(paths)]
    logger.info(
        "Loaded %s feature(s) with %s scenario(s)",
        len(features),
        sum(len(feature.scenarios) for feature in features),
    )
    return features


def select_scenarios(features: Iterable[Feature], expression: str | TagExpression = "") -> list[Scenario]:
    """Flatten ``features`` into the scenarios matching the tag expression."""
    tag_filter = expression if isinstance(expression, TagExpression) else TagExpression(expression)
    return [scenario for feature in features for scenario in feature.scenarios if tag_filter.matches(scenario.tags)]


__all__ = ["discover_feature_files", "load_feature", "load_features", "parse_feature", "select_scenarios"]
