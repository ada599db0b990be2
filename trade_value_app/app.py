"""
FastAPI application exposing the trade value calculator.

``POST /calculate-value`` validates a card's base value, normalises its
game and returns cash and trade offers.  Apart from the method and
input gates it always answers 200 with numeric values, falling back to
default percentages whenever the configured brackets cannot be used.
The remaining routes let the admin UI manage brackets and the settings
cache.
"""

from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .brackets import bracket_to_row, parse_brackets
from .fallback import FallbackReason, build_error_result
from .games import (
    DEFAULT_GAME,
    SUPPORTED_GAMES,
    get_category_id_for_game,
    is_supported_game_type,
    normalize_game_type,
)
from .services import Services, get_services
from .settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_services.cache_info().currsize:
        get_services().fallback_logger.shutdown()


app = FastAPI(title="Trade Value Calculator", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def coerce_base_value(value: Any) -> float:
    """Convert a request's ``baseValue`` to a float.

    Numbers and numeric strings convert as expected, blank strings count
    as zero and booleans as 0/1.  Integers beyond float range become
    infinity and anything else becomes NaN, so both fail validation.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # Integers too large for a float
            return math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def settings_key(game: str) -> str:
    """Key under which a game's brackets are stored and cached.

    Known aliases map to their canonical game; other names are only
    trimmed and lower-cased so an unknown name never touches the
    default game's brackets.
    """
    if is_supported_game_type(game):
        return normalize_game_type(game)
    return game.strip().lower()


async def _read_json_body(request: Request) -> Dict[str, Any]:
    """Return the JSON object body, or an empty dict if there isn't one."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@app.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple health indicator."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/games")
async def games() -> Dict[str, Any]:
    """List the supported games with their catalogue category ids."""
    return {
        "default": DEFAULT_GAME,
        "games": [
            {"game": game, "categoryId": get_category_id_for_game(game)}
            for game in SUPPORTED_GAMES
        ],
    }


@app.api_route(
    "/calculate-value",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def calculate_value(request: Request, services: Services = Depends(get_services)) -> JSONResponse:
    """Calculate cash and trade values for a card.

    Expects a JSON body ``{game, baseValue, userId?}``.  Only POST is
    accepted.  A non-numeric or negative ``baseValue`` yields 400; any
    failure past validation is answered with default values and
    ``UNKNOWN_ERROR`` rather than a 500.
    """
    if request.method != "POST":
        return JSONResponse(
            status_code=405,
            content={
                "error": "Method not allowed",
                "cashValue": 0,
                "tradeValue": 0,
                "usedFallback": True,
                "fallbackReason": FallbackReason.METHOD_NOT_ALLOWED.value,
            },
        )

    body = await _read_json_body(request)
    game = body.get("game")
    raw_base_value = body.get("baseValue")
    user_id: Optional[str] = body.get("userId") or None
    if user_id is not None:
        user_id = str(user_id)

    numeric_base = coerce_base_value(raw_base_value)
    if not math.isfinite(numeric_base) or numeric_base < 0:
        logger.warning("Invalid baseValue received: %r", raw_base_value)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid baseValue",
                "details": {
                    "received": raw_base_value,
                    # NaN and infinities are not valid JSON
                    "parsed": numeric_base if math.isfinite(numeric_base) else None,
                },
                "cashValue": 0,
                "tradeValue": 0,
                "usedFallback": True,
                "fallbackReason": FallbackReason.INVALID_INPUT.value,
            },
        )

    if numeric_base == 0:
        return JSONResponse(content={"cashValue": 0, "tradeValue": 0})

    try:
        game_key = normalize_game_type(game)
        result = await run_in_threadpool(services.engine.calculate, game_key, numeric_base, user_id)
        return JSONResponse(content=result.to_dict())
    except Exception as exc:
        logger.exception("Error in calculate-value API")
        message = f"Calculation error: {exc}"
        try:
            services.fallback_logger.log_event(
                game if isinstance(game, str) and game else "unknown",
                numeric_base,
                message,
                user_id,
            )
        except Exception as log_exc:
            logger.error("Failed to log calculation error: %s", log_exc)
        result = build_error_result(numeric_base, message, FallbackReason.UNKNOWN_ERROR)
        return JSONResponse(content=result.to_dict())


@app.post("/clear-settings-cache")
async def clear_settings_cache(request: Request, services: Services = Depends(get_services)) -> JSONResponse:
    """Clear the cached brackets for one game, or for all games."""
    body = await _read_json_body(request)
    game = body.get("game")
    key = settings_key(game) if isinstance(game, str) and game.strip() else None
    try:
        services.cache.clear(key)
    except Exception as exc:
        logger.error("Failed to clear settings cache: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to clear cache", "details": str(exc)},
        )
    return JSONResponse(
        content={"success": True, "message": f"Cache cleared for {key or 'all games'}"}
    )


@app.get("/trade-value-settings")
async def get_trade_value_settings(
    game: str = DEFAULT_GAME, services: Services = Depends(get_services)
) -> JSONResponse:
    """Return the brackets configured for ``game`` as table rows."""
    key = settings_key(game)
    try:
        brackets = await run_in_threadpool(services.cache.get, key)
    except Exception as exc:
        logger.error("Failed to load settings for %s: %s", key, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
        )
    return JSONResponse(content=[bracket_to_row(key, bracket) for bracket in brackets])


@app.post("/trade-value-settings")
async def save_trade_value_settings(request: Request, services: Services = Depends(get_services)) -> JSONResponse:
    """Replace every bracket of a game and drop its cache entry.

    Expects ``{game, settings: [row, ...]}``.
    """
    body = await _read_json_body(request)
    game = body.get("game")
    rows = body.get("settings")
    if not isinstance(game, str) or not game.strip() or not isinstance(rows, list):
        logger.warning("Invalid settings format for game %r", game)
        return JSONResponse(status_code=400, content={"error": "Invalid settings format"})
    key = settings_key(game)
    try:
        brackets = parse_brackets(rows)
    except ValueError as exc:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid settings format", "details": str(exc)},
        )

    logger.info("Saving %d setting(s) for game %s", len(brackets), key)
    try:
        await run_in_threadpool(
            services.store.replace_settings, key, [bracket_to_row(key, b) for b in brackets]
        )
    except Exception as exc:
        logger.error("Failed to save settings for %s: %s", key, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
        )
    services.cache.clear(key)
    return JSONResponse(content={"success": True})


def main() -> None:
    """Run the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="[%(asctime)s] %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
