from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncContextManager

from fastapi import FastAPI

from taxplanner.config import Settings, get_settings
from taxplanner.data import UnsupportedTaxYearError, get_tax_data, supported_years
from taxplanner.models import TaxData

Hook = Callable[[FastAPI], Awaitable[None] | None]


def _preload_tax_data(logger: logging.Logger, settings: Settings) -> dict[int, TaxData]:
    years = set(supported_years()) | {settings.tax_year}
    loaded: dict[int, TaxData] = {}
    for year in sorted(years):
        try:
            loaded[year] = get_tax_data(year)
        except UnsupportedTaxYearError as exc:
            logger.warning("Tax data unavailable for %s: %s", year, exc)
    return loaded


def _open_telemetry_sink(logger: logging.Logger, settings: Settings, app_label: str) -> logging.Handler | None:
    """File handler on the package logger, or None when disabled or the directory is unusable."""
    if not settings.telemetry_log_enabled:
        return None
    target = Path(settings.log_dir) / f"{app_label}.log"
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError as exc:
        logger.warning("Telemetry log disabled; cannot open %s: %s", target, exc)
        return None
    handler.set_name(f"telemetry:{app_label}")
    handler.setLevel(logging.INFO)
    handler.setFormatter(
        logging.Formatter(f"%(asctime)s %(levelname)s [{app_label}] %(name)s: %(message)s")
    )
    logging.getLogger("taxplanner").addHandler(handler)
    return handler


async def _run_hook(logger: logging.Logger, stage: str, hook: Hook | None, app: FastAPI) -> None:
    if hook is None:
        return
    try:
        outcome = hook(app)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.exception("%s hook %r failed", stage.capitalize(), getattr(hook, "__name__", hook))


def build_application_lifespan(
    app_label: str,
    *,
    startup_hook: Hook | None = None,
    shutdown_hook: Hook | None = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    base_logger = logging.getLogger("taxplanner")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        logger = base_logger.getChild(app_label)
        tax_data = _preload_tax_data(logger, settings)
        telemetry_handler = _open_telemetry_sink(logger, settings, app_label)

        app.state.settings = settings
        app.state.tax_data = tax_data
        app.state.telemetry_handler = telemetry_handler
        app.state.app_label = app_label

        logger.info(
            "Startup complete: tax_years=%s default_year=%s default_province=%s",
            sorted(tax_data),
            settings.tax_year,
            settings.default_province,
        )

        try:
            await _run_hook(logger, "startup", startup_hook, app)
            yield
        finally:
            await _run_hook(logger, "shutdown", shutdown_hook, app)
            if telemetry_handler is not None:
                logging.getLogger("taxplanner").removeHandler(telemetry_handler)
                telemetry_handler.close()
            for attr in ("settings", "tax_data", "telemetry_handler", "app_label"):
                if hasattr(app.state, attr):
                    delattr(app.state, attr)
            logger.info("Shutdown complete")

    return _lifespan
