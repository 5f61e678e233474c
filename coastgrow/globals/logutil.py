import re
import sys
import os
from pathlib import Path
from datetime import datetime

from coastgrow.globals import directories

################################################################################################
ANSI_ESCAPE = re.compile(r'\x1B[@-_][0-?]*[ -/]*[@-~]')
TIMESTAMP_PREFIX = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\]")
RESET = '\x1b[0m'
BOLD = "\033[1m"

# set by the CLI --verbose flag; gates debug()
VERBOSE = False

def _enable_windows_ansi():
    if os.name != "nt":
        return
    try:
        import ctypes
        kernel32 = ctypes.windll.kernel32
        h = kernel32.GetStdHandle(-11)  # STD_OUTPUT_HANDLE = -11
        mode = ctypes.c_uint32()
        if kernel32.GetConsoleMode(h, ctypes.byref(mode)):
            kernel32.SetConsoleMode(h, mode.value | 0x0004)  # ENABLE_VIRTUAL_TERMINAL_PROCESSING
    except (AttributeError, OSError):
        # plain text fallback
        pass

_enable_windows_ansi()


class Logger:
    """Tee stdout/stderr into a timestamped log file for the lifetime of a run."""
    def __init__(self, logfile_path: Path | None = None):
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.logfile_path = Path(logfile_path or directories.LOGS_DIR / f"grow_{timestamp}.log")
        self.logfile_path.parent.mkdir(parents=True, exist_ok=True)

        self._prev_stdout = sys.stdout
        self._prev_stderr = sys.stderr

        self.logfile = open(self.logfile_path, "a", encoding="utf-8", buffering=1)  # line-buffered
        sys.stdout = self
        sys.stderr = self

    def __enter__(self): return self
    def __exit__(self, exc_type, exc, tb): self.close()

    def write(self, message):
        if message is None:
            return
        if isinstance(message, (bytes, bytearray)):
            message = message.decode("utf-8", errors="replace")
        elif not isinstance(message, str):
            message = str(message)

        # timestamp each non-empty line, keep newlines
        for part in message.splitlines(keepends=True):
            if part.strip() and not TIMESTAMP_PREFIX.match(part):
                part = f"[{datetime.now():%Y-%m-%d %H:%M:%S}] {part}"

            self._prev_stdout.write(part)
            # log file gets the text without color codes
            self.logfile.write(ANSI_ESCAPE.sub("", part))

    def flush(self):
        self._prev_stdout.flush()
        self.logfile.flush()

    def close(self):
        if self.logfile.closed:
            return
        self.logfile.close()
        sys.stdout = self._prev_stdout
        sys.stderr = self._prev_stderr

def rgb_prefix(r: int, g: int, b: int) -> str:
    """Start an RGB color (leave it open)."""
    return f"\033[38;2;{r};{g};{b}m"

def _log(level, color_code, msg):
    """
    color_code can be:
      - an ANSI escape string
      - an (r, g, b) tuple for 24-bit color
    """
    if isinstance(color_code, tuple):
        start = rgb_prefix(*color_code)
        prefix = f"{start}{BOLD}[{level}]{RESET} "
    else:
        prefix = f"{color_code}{BOLD}[{level}]{RESET} "
    print(prefix + msg)

def process_step(msg):  _log("PROCESS", (171, 52, 235), msg)
def info(msg): _log("INFO", (0, 255, 255), msg)
def warn(msg): _log("WARNING", (255, 255, 0), msg)
def error(msg): _log("ERROR", (255, 0, 0), msg)
def success(msg): _log("SUCCESS", (0, 255, 0), msg)
def setting_config(msg): _log("SETTING", (250, 197, 97), msg)

def debug(msg):
    if VERBOSE:
        _log("DEBUG", (150, 150, 150), msg)

def set_verbose(flag: bool) -> None:
    global VERBOSE
    VERBOSE = bool(flag)
