import os
import threading
import multiprocessing
import config

LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}

# scope -> config switch that silences it
SCOPE_SWITCHES = {
    "TERRAIN": "LOG_TERRAIN",
    "COLUMN": "LOG_COLUMN_TRACE",
}


def enabled(scope, level="INFO"):
    switch = SCOPE_SWITCHES.get(scope)
    if switch is not None and not getattr(config, switch, True):
        return False
    floor = LEVELS.get(getattr(config, "LOG_LEVEL", "INFO"), 20)
    return LEVELS.get(level, 20) >= floor


def log(scope, msg, level="INFO"):
    if not enabled(scope, level):
        return
    pid = os.getpid()
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    text = f"[{level} pid{pid} proc{proc} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level in ("WARN", "ERROR"):
            text = f"\x1b[31m{text}\x1b[0m"
        elif proc == "MainProcess" and thread != "MainThread":
            # Main process worker thread.
            text = f"\x1b[32m{text}\x1b[0m"
        elif proc != "MainProcess":
            # Generation worker process.
            text = f"\x1b[33m{text}\x1b[0m"
    print(text)
