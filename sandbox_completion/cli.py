import argparse
import builtins
import json
import logging
import sys
import time

from .config import PROPERTY_TOKEN, VARIABLE_TOKEN
from .data_structures import DECLINE, ResolutionQuery, Token
from .engine import create_engine
from .exceptions import DescriptionError
from .signature import render_description
from .utils import DescriptionEncoder, TerminalColors


def build_query(engine, dotted_path: str, is_constructor: bool = False) -> ResolutionQuery:
    """
    Turns 'str.upper' into a query: the token is the last segment, the parent
    is what the preceding segments resolve to (the root for a bare name).
    """
    *parent_path, name = dotted_path.split(".")
    parent = engine.model.require_path(engine.window, ".".join(parent_path)) if parent_path else engine.window
    context = engine.model.require_path(parent, name)
    token = Token(type=PROPERTY_TOKEN if parent_path else VARIABLE_TOKEN, string=name)
    return ResolutionQuery(token=token, window=engine.window, context=context, parent=parent, is_constructor=is_constructor)


def main():
    start_time = time.perf_counter()

    parser = argparse.ArgumentParser(description="Describe a built-in object of the live Python environment.")
    parser.add_argument("path", nargs="?", default=None, help="Dotted path from the builtins module, e.g. 'str.split' or 'len'.")
    parser.add_argument("--call", action="store_true", help="Also show the value that stands in for the result of calling it.")
    parser.add_argument("--new", action="store_true", help="Treat the call as a constructor call (implies --call).")
    parser.add_argument("--json", action="store_true", help="Print the raw definition node as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--lsp", action="store_true", help="Start the language server on stdio.")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.lsp:
        from .server import start_server

        start_server()
        return

    if not args.path:
        parser.error("path is required unless --lsp is given.")

    try:
        engine = create_engine(window=builtins)
        query = build_query(engine, args.path, is_constructor=args.new)
        description = engine.describe(query)

        if description is DECLINE:
            print(f"{TerminalColors.YELLOW}No description available for '{args.path}'.{TerminalColors.RESET}")
        elif args.json:
            print(json.dumps(description, indent=2, cls=DescriptionEncoder))
        else:
            print(render_description(query.token.string, description))

        if args.call or args.new:
            value = engine.materialize(query)
            if value is DECLINE:
                print(f"{TerminalColors.YELLOW}No informed return value for '{args.path}'.{TerminalColors.RESET}")
            else:
                print(f"\n{TerminalColors.GREEN}Returns{TerminalColors.RESET}: {value!r} ({type(value).__name__})")

    except DescriptionError as e:
        print(f"\n{TerminalColors.RED}--- DESCRIPTION ERROR ---\n{e}{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"\n{TerminalColors.RED}--- UNEXPECTED ERROR ---{TerminalColors.RESET}", file=sys.stderr)
        print("This may be a bug in the engine. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    finally:
        if args.verbose:
            duration = time.perf_counter() - start_time
            print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}")


if __name__ == "__main__":
    main()
