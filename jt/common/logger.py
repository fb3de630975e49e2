import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from jt.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

def get_logger(
        name = "journaltimer",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    log_file_path = log_dir / f"{name}.log"

    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Rotating log kept across runs
    persistent_handler_name = f"{name}:persistent"
    if persistent and not any(h.get_name() == persistent_handler_name for h in logger.handlers):
        persistent_handler = RotatingFileHandler(
            filename=log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        )
        persistent_handler.setLevel(level)
        persistent_handler.setFormatter(fmt)
        persistent_handler.set_name(persistent_handler_name)
        logger.addHandler(persistent_handler)

    # Latest-only log, overwritten each run
    latest_handler_name = f"{name}:latest"
    if not any(h.get_name() == latest_handler_name for h in logger.handlers):
        latest_log_path = log_dir / "latest.log"
        latest_handler = logging.FileHandler(
            filename=latest_log_path,
            mode="w",
            encoding="utf-8",
            delay=True
        )
        latest_handler.setLevel(level)
        latest_handler.setFormatter(fmt)
        latest_handler.set_name(latest_handler_name)
        logger.addHandler(latest_handler)

    # One debug-level file per run, only the newest few are kept. Tick-level chatter lands here.
    historical_debug_handler_name = f"{name}:historical_debug"
    if historical_debugs > 0 and not any(h.get_name() == historical_debug_handler_name for h in logger.handlers):
        historical_debug_path = log_dir / "debug"
        historical_debug_path.mkdir(parents=True,exist_ok=True)
        this_historical_debug_log_path =  historical_debug_path / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"

        historical_debug_handler = logging.FileHandler(
            filename=this_historical_debug_log_path,
            encoding="utf-8",
            delay=True
        )
        historical_debug_handler.setLevel(logging.DEBUG)
        historical_debug_handler.setFormatter(fmt)
        historical_debug_handler.set_name(historical_debug_handler_name)
        logger.addHandler(historical_debug_handler)

        runs = sorted(historical_debug_path.glob(f"{name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
        for run in runs[historical_debugs:]:
            try: run.unlink()
            except OSError: pass

    console_handler_name = f"{name}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    return logger

log = get_logger(level=logging.DEBUG,console=False,historical_debugs=10)
