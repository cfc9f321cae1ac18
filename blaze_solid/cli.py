"""Command-line interface for the Solid Number engine.

Runs one calculation or analysis and exits, or starts an interactive loop
when no action is given. Output is human-readable by default and JSON with
``--format json``.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from .config import GGGX_DEFAULT_PRECISION, VERSION
from .logging_config import get_logger

logger = get_logger("cli")


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running Blaze Solid health check...")
    print("-" * 50)

    for module_name, label in (("sympy", "SymPy"), ("mpmath", "mpmath"), ("numpy", "NumPy")):
        try:
            module = __import__(module_name)
            print(f"[OK] {label} {module.__version__} imported successfully")
            checks_passed += 1
        except ImportError as e:
            print(f"[FAIL] {label} import failed: {e}")
            checks_failed += 1

    # Exact arithmetic
    try:
        from .api import calculate

        result = calculate("123456789", "*", "987654321")
        if result.ok and result.value == "121932631112635269":
            print("[OK] Exact arithmetic works")
            checks_passed += 1
        else:
            print(f"[FAIL] Exact arithmetic check failed: {result}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] Exact arithmetic check failed: {e}")
        checks_failed += 1

    # Infinity algebra
    try:
        from .api import calculate

        result = calculate("inf", "-", "inf")
        if result.ok and result.value is not None and result.value.startswith("ℕ"):
            print("[OK] Infinity algebra works")
            checks_passed += 1
        else:
            print(f"[FAIL] Infinity algebra check failed: {result}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] Infinity algebra check failed: {e}")
        checks_failed += 1

    # GGGX oracle
    try:
        from .api import analyze_value
        from .config import PI

        report = analyze_value(PI, 15)
        if report.ok and report.barrier == "quantum":
            print("[OK] GGGX oracle works")
            checks_passed += 1
        else:
            print(f"[FAIL] GGGX oracle check failed: {report}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] GGGX oracle check failed: {e}")
        checks_failed += 1

    # Pool bookkeeping after the checks above
    try:
        from .pool import get_pool

        stats = get_pool().stats()
        if stats["in_use"] == 0:
            print(f"[OK] Value pool balanced ({stats['allocations']} allocations)")
            checks_passed += 1
        else:
            print(f"[FAIL] Value pool leaked {stats['in_use']} slot(s)")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] Pool check failed: {e}")
        checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def print_result_pretty(res: dict[str, Any], output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result dictionary (from OperationResult.to_dict or AnalysisReport.to_dict)
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res, indent=2, ensure_ascii=False))
        return
    if not res.get("ok"):
        print("Error:", res.get("error"))
        if res.get("value") is not None:
            print("Value:", res["value"])
        return
    if "explanation" in res:
        print("Solid:", res.get("solid"))
        print("Barrier:", res.get("barrier"))
        print("Achievable precision:", res.get("achievable_precision"))
        if res.get("pattern_period") is not None:
            print("Pattern period:", res["pattern_period"])
        if res.get("algorithm"):
            print("Algorithm:", res["algorithm"])
        print(res.get("explanation"))
        return
    print("Result:", res.get("value"))
    confidence = res.get("confidence")
    if confidence is not None:
        print(f"Barrier: {res.get('barrier')}  Confidence: {confidence * 100:.1f}%")
    if res.get("approx") is not None:
        print("Approx:", res["approx"])


def print_help_text() -> None:
    """Print help text for interactive commands."""
    print(
        f"""Blaze Solid version {VERSION}

  A op B                 Calculate (op is one of + - * / ^, spaces required)
                         e.g. 123456789 * 987654321, inf - inf, 1 / 3
  sqrt A                 Square root
  recover A STRATEGY     Replace an undefined value (zero, one, infinity, nan, propagate)
  analyze X [PRECISION]  Run the GGGX oracle on a number
  stats                  Show value pool statistics
  help                   Show this text
  quit, exit             Leave

Operands: decimals, inf, -inf, aleph0, aleph1, undefined"""
    )


def handle_line(raw: str, output_format: str = "human", precision: int = GGGX_DEFAULT_PRECISION) -> bool:
    """Run one interactive command.

    Returns:
        True if the command succeeded
    """
    from .api import analyze_value, calculate_expression, recover_value, square_root
    from .pool import get_pool

    logger.debug("Interactive command: %s", raw)
    parts = raw.split()
    command = parts[0].lower()
    if command == "help":
        print_help_text()
        return True
    if command == "stats":
        print_result_pretty({"ok": True, **get_pool().stats()}, "json")
        return True
    if command == "sqrt" and len(parts) == 2:
        result = square_root(parts[1])
    elif command == "recover" and len(parts) == 3:
        result = recover_value(parts[1], parts[2])
    elif command == "analyze" and len(parts) in (2, 3):
        try:
            digits = int(parts[2]) if len(parts) == 3 else precision
        except ValueError:
            print(f"Error: precision must be an integer, got {parts[2]!r}")
            return False
        report = analyze_value(parts[1], digits)
        print_result_pretty(report.to_dict(), output_format)
        return report.ok
    else:
        result = calculate_expression(raw)
    print_result_pretty(result.to_dict(), output_format)
    return result.ok


def repl_loop(output_format: str = "human", precision: int = GGGX_DEFAULT_PRECISION) -> None:
    """Interactive loop with graceful interrupt handling."""
    try:
        import readline  # noqa: F401
    except (ImportError, ModuleNotFoundError):
        # readline not available on Windows - that's fine
        pass

    print("Blaze Solid - type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        if raw.lower() in ("quit", "exit"):
            print("Goodbye.")
            break
        handle_line(raw, output_format, precision)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the Blaze Solid CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="blaze-solid")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help='Evaluate one calculation and exit (e.g. "2 * 3")',
        dest="eval_expr",
    )
    parser.add_argument(
        "--calc",
        nargs=3,
        metavar=("A", "OP", "B"),
        help="Apply OP (+ - * / ^) to operands A and B",
    )
    parser.add_argument("--sqrt", type=str, metavar="A", help="Square root of A")
    parser.add_argument(
        "--analyze", type=str, metavar="VALUE", help="Run the GGGX oracle on VALUE"
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="With --analyze, print the full phase-by-phase summary",
    )
    parser.add_argument(
        "-p",
        "--precision",
        type=int,
        default=GGGX_DEFAULT_PRECISION,
        help="Desired precision (digits) for --analyze",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)
    output_format = args.format

    from .logging_config import setup_logging

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()

    from .api import analyze_value, calculate, calculate_expression, square_root

    if args.calc:
        a, op, b = args.calc
        result = calculate(a, op, b)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1
    if args.eval_expr:
        result = calculate_expression(args.eval_expr)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1
    if args.sqrt:
        result = square_root(args.sqrt)
        print_result_pretty(result.to_dict(), output_format)
        return 0 if result.ok else 1
    if args.analyze:
        if args.summary and output_format == "human":
            return _print_summary(args.analyze, args.precision)
        report = analyze_value(args.analyze, args.precision)
        print_result_pretty(report.to_dict(), output_format)
        return 0 if report.ok else 1

    repl_loop(output_format, args.precision)
    return 0


def _print_summary(text: str, precision: int) -> int:
    from .gggx import analyze

    try:
        value = float(text.replace("∞", "inf"))
    except ValueError:
        print(f"Error: Invalid value: {text!r}. Expected a number.")
        return 1
    if precision <= 0:
        print(f"Error: Precision must be a positive integer, got {precision}")
        return 1
    analysis = analyze(value, precision)
    try:
        print(analysis.summary())
        return 0 if analysis.is_complete else 1
    finally:
        analysis.release()


if __name__ == "__main__":
    sys.exit(main_entry())
