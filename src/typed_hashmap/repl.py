"""Interactive console for typed hashmaps."""

from __future__ import annotations

import argparse
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path

from typed_hashmap.config import set_option
from typed_hashmap.display import format_value
from typed_hashmap.executor import CommandExecutor, CommandResult
from typed_hashmap.parsing.command_parser import CommandParser


def _split_statements(content: str) -> list[str]:
    """Split content into statements on semicolons and newlines.

    Separators inside brackets, parentheses or string literals do not end a
    statement, so a vector literal may span several lines. ``#`` comments
    run to the end of the line.
    """
    statements = []
    current: list[str] = []
    depth = 0
    in_string = False
    in_comment = False
    escape_next = False

    for ch in content:
        if in_comment:
            if ch != "\n":
                continue
            in_comment = False

        if escape_next:
            current.append(ch)
            escape_next = False
            continue

        if in_string:
            if ch == "\\":
                escape_next = True
            elif ch == '"':
                in_string = False
            current.append(ch)
            continue

        if ch == '"':
            in_string = True
            current.append(ch)
        elif ch == "#":
            in_comment = True
        elif ch in "([":
            depth += 1
            current.append(ch)
        elif ch in ")]":
            depth = max(0, depth - 1)
            current.append(ch)
        elif ch in ";\n" and depth == 0:
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(ch)

    stmt = "".join(current).strip()
    if stmt:
        statements.append(stmt)

    return statements


def needs_continuation(line: str) -> bool:
    """Check whether brackets or parentheses are still open at the end of ``line``."""
    depth = 0
    in_string = False
    in_comment = False
    escape = False
    for char in line:
        if in_comment:
            in_comment = char != "\n"
            continue
        if escape:
            escape = False
            continue
        if in_string:
            if char == "\\":
                escape = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "#":
            in_comment = True
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
    return depth > 0


def print_result(result: CommandResult) -> None:
    """Print a command result: warnings first, then its message or value."""
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    if result.message:
        print(result.message)
    elif result.has_value:
        print(format_value(result.value))


def run_repl(executor: CommandExecutor | None = None) -> int:
    """Run the interactive console."""
    print("thm - typed hashmap console")
    print("Type 'help' for commands, 'exit' to quit.\n")

    executor = executor or CommandExecutor()
    parser = CommandParser()

    # Command history
    history_file = Path.home() / ".thm_history"
    try:
        readline.read_history_file(history_file)
    except FileNotFoundError:
        pass

    try:
        while True:
            try:
                line = input("thm> ").strip()
            except EOFError:
                print()
                break

            if not line:
                continue

            if line.lower() in ("exit", "quit"):
                break
            elif line.lower() == "help":
                print_help()
                continue

            try:
                while needs_continuation(line):
                    try:
                        continuation = input("...> ").strip()
                    except EOFError:
                        break
                    if not continuation:
                        # Empty line cancels continuation
                        break
                    line += "\n" + continuation

                for statement in _split_statements(line):
                    print_result(executor.execute(parser.parse(statement)))
            except SyntaxError as e:
                print(f"Syntax error: {e}")
            except Exception as e:
                print(f"Error: {e}")

    finally:
        try:
            readline.set_history_length(1000)
            readline.write_history_file(history_file)
        except OSError:
            pass

    return 0


def print_help() -> None:
    """Print console help."""
    print("""
Commands:
  h = hashmap(keys, values)           Create a hashmap; kinds are inferred from the vectors
  h = hashmap([], [], key_kind = "text", value_kind = "float")
                                      Create an empty hashmap with explicit kinds
  h[keys]                             Look up values (NA for absent keys)
  h[keys] = values                    Insert or overwrite entries
  h.find_values(keys)                 Same as h[keys]
  h.set_values(keys, values)          Same as h[keys] = values
  h.has_key(key)                      Check whether a single key is present
  h.size()  h.empty()  h.clear()      Container queries and reset
  h.all_keys()  h.all_values()        Every key / value, in matching order
  h.data()                            Every entry as a key -> value mapping
  h.rehash(n)  h.bucket_count()       Resize to at least n buckets / show bucket count
  print(h)                            Show a hashmap (at most max_print entries)
  options(max_print = n)              Change how many entries are printed
  options()                           Show the current options
  help                                Show this help
  exit, quit                          Leave the console

Literals: 1, -2, 3.5, 1e3, "text", true, false, NA, [1, 2, 3]
Statements end at a newline or semicolon. '#' starts a comment.
""")


def run_file(file_path: Path, verbose: bool = False, executor: CommandExecutor | None = None) -> int:
    """Execute commands from a file.

    Args:
        file_path: Path to the file containing commands
        verbose: If True, print each command before executing it
        executor: Executor to run against (a fresh one by default)

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    statements = _split_statements(content)
    if not statements:
        print("No commands found in file", file=sys.stderr)
        return 1

    return run_statements(statements, verbose=verbose, executor=executor)


def run_statements(
    statements: list[str], verbose: bool = False, executor: CommandExecutor | None = None
) -> int:
    """Execute already-split statements, stopping at the first error."""
    executor = executor or CommandExecutor()
    parser = CommandParser()

    for text in statements:
        if verbose:
            print(f">>> {text}")
        try:
            result = executor.execute(parser.parse(text))
        except SyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print_result(result)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(description="Interactive console for typed hashmaps")
    arg_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        default=None,
        help="Execute commands from a file and exit",
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Execute the given commands and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each command before executing it",
    )
    arg_parser.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of entries shown when a hashmap is printed",
    )

    args = arg_parser.parse_args(argv)

    if args.max_print is not None:
        try:
            set_option("max_print", args.max_print)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if args.command:
        return run_statements(_split_statements(args.command), verbose=args.verbose)

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, args.verbose)

    return run_repl()


if __name__ == "__main__":
    sys.exit(main())
