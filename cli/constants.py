"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "download", "list", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E9E6B bold",
        "command": "#0088ff bold",
    }
)

TEAL = "\033[38;2;46;158;107m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{TEAL}
  ____           _               ____  _
 |  _ \\  ___  __| |_   _ _ __   / ___|| |_ ___  _ __ ___
 | | | |/ _ \\/ _` | | | | '_ \\  \\___ \\| __/ _ \\| '__/ _ \\
 | |_| |  __/ (_| | |_| | |_) |  ___) | || (_) | | |  __/
 |____/ \\___|\\__,_|\\__,_| .__/  |____/ \\__\\___/|_|  \\___|
                        |_|
{RESET}"""

WELCOME_TITLE = "Dedup Store CLI - chunk-level deduplicating file store"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "dedup> "

DOWNLOADS_DIR = "downloads"

HELP_TEXT = """Available commands:
  upload <path>...                    Upload one or more local files
  download <filename> [output_path]   Download a stored file (defaults to downloads/<filename>)
  list                                List every stored filename
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  upload report.pdf photos/cat.png
  list
  download report.pdf
  download report.pdf downloads/report-copy.pdf"""
