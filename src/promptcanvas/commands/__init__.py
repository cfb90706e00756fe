"""Canvas command pipeline: sanitize, template, normalize, place, execute."""

from promptcanvas.commands.executor import CommandExecutor, ExecutionResult
from promptcanvas.commands.interpretation import CommandInterpretation, parse_actions, requests_clear
from promptcanvas.commands.normalizer import compute_scale, normalize_group
from promptcanvas.commands.placement import Placement, PlacementEngine, candidate_centers
from promptcanvas.commands.sanitizer import extract_json_objects, interpret_response
from promptcanvas.commands.templates import KeywordTemplateMatcher, TemplateMatch, TemplateMatcher

__all__ = [
    "CommandExecutor",
    "CommandInterpretation",
    "ExecutionResult",
    "KeywordTemplateMatcher",
    "Placement",
    "PlacementEngine",
    "TemplateMatch",
    "TemplateMatcher",
    "candidate_centers",
    "compute_scale",
    "extract_json_objects",
    "interpret_response",
    "normalize_group",
    "parse_actions",
    "requests_clear",
]
