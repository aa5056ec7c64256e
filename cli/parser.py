"""Command parser for CLI input."""

import shlex

from cli.models import CommandRequest, DownloadCommand, ListCommand, UploadCommand


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Upload/List/Download)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0].lower()

    if command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "list":
        return _parse_list(tokens[1:])
    elif command_name == "download":
        return _parse_download(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {tokens[0]}")


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path>...' command."""
    if not args:
        raise ParseError("upload requires at least one file")

    return UploadCommand(file_list=tuple(args))


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list' command."""
    if args:
        raise ParseError("list takes no arguments")

    return ListCommand()


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <filename> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires 1 or 2 arguments: <filename> [output_path]")

    filename = args[0]
    output_path = args[1] if len(args) > 1 else None

    return DownloadCommand(filename=filename, output_path=output_path)
