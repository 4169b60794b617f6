from .cli import apply_cli_overrides, build_parser, collect_selectors, parse_args, run
from .filters import parse_test_filter, qualify

__all__ = ["apply_cli_overrides", "build_parser", "collect_selectors", "parse_args", "parse_test_filter", "qualify", "run"]
