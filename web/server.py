#!/usr/bin/env python3
"""
Wizard Duel Server

HTTP API over in-memory duel sessions, for a browser UI.

Usage:
    python web/server.py --port 8080

Endpoints:
    POST /api/duels                  start a duel
    GET  /api/duels/{id}             current state
    POST /api/duels/{id}/select      {"hand_index": 0}
    POST /api/duels/{id}/cast        {"hand_index": 0} (optional)
    POST /api/duels/{id}/punch       {"hand_index": 0} (optional)
    POST /api/duels/{id}/skip
    POST /api/duels/{id}/discard     {"spell_id": "fireball"}
    POST /api/duels/{id}/enemy-turn
"""

import argparse
import json
import logging
import os
import sys
import uuid
from typing import Any, Dict

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from packages.duel.content.spells import CatalogError
from packages.duel.content.wizards import create_wizard, get_sample_opponent
from packages.duel.handlers.duel import DuelRunner
from packages.duel.state.combat import Difficulty

logger = logging.getLogger("DuelServer")


app = FastAPI(title="Wizard Duel")

# Active duels by id
DUELS: Dict[str, DuelRunner] = {}


class DuelNotFound(KeyError):
    """No duel session with this id."""


# ============================================================================
# HELPERS
# ============================================================================

def get_runner(duel_id: str) -> DuelRunner:
    if duel_id not in DUELS:
        raise DuelNotFound(duel_id)
    return DUELS[duel_id]


async def read_body(request: Request) -> Dict[str, Any]:
    """JSON body as a dict; an empty body is {}."""
    raw = await request.body()
    if not raw:
        return {}
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def action_response(duel_id: str, runner: DuelRunner, result: Dict[str, Any]) -> JSONResponse:
    """Wrap a DuelRunner action result; failed actions are 400s."""
    payload = {"id": duel_id, "result": result, "state": runner.to_dict()}
    if not result.get("success"):
        return JSONResponse(payload, status_code=400)
    return JSONResponse(payload)


@app.exception_handler(DuelNotFound)
async def duel_not_found(request: Request, exc: DuelNotFound):
    return JSONResponse({"error": f"Duel not found: {exc.args[0]}"}, status_code=404)


@app.exception_handler(ValueError)
async def bad_request(request: Request, exc: ValueError):
    return JSONResponse({"error": str(exc)}, status_code=400)


# ============================================================================
# ROUTES
# ============================================================================

@app.post("/api/duels")
async def create_duel(request: Request):
    """Start a duel.

    Request body (all optional):
    {
        "player_name": "Merlin",
        "player_level": 1,
        "opponent": "dark_acolyte",
        "difficulty": "normal",
        "seed": "DUEL42"
    }
    """
    body = await read_body(request)
    try:
        player = create_wizard(body.get("player_name", "Player"), level=int(body.get("player_level", 1)))
        enemy = get_sample_opponent(body.get("opponent", "apprentice"))
    except CatalogError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    runner = DuelRunner(
        player,
        enemy,
        difficulty=Difficulty(body.get("difficulty", "normal")),
        seed=body.get("seed"),
    )
    duel_id = uuid.uuid4().hex
    DUELS[duel_id] = runner
    logger.info(f"Duel {duel_id}: {player.name} vs {enemy.name} (seed {runner.seed})")
    return JSONResponse({"id": duel_id, "state": runner.to_dict()}, status_code=201)


@app.get("/api/duels/{duel_id}")
async def get_duel(duel_id: str):
    """Current state of a duel."""
    runner = get_runner(duel_id)
    return JSONResponse({"id": duel_id, "state": runner.to_dict()})


@app.post("/api/duels/{duel_id}/select")
async def select(duel_id: str, request: Request):
    runner = get_runner(duel_id)
    body = await read_body(request)
    if "hand_index" not in body:
        return JSONResponse({"error": "hand_index is required"}, status_code=400)
    return action_response(duel_id, runner, runner.select(int(body["hand_index"])))


@app.post("/api/duels/{duel_id}/cast")
async def cast(duel_id: str, request: Request):
    runner = get_runner(duel_id)
    body = await read_body(request)
    hand_index = body.get("hand_index")
    result = runner.player_cast(int(hand_index) if hand_index is not None else None)
    return action_response(duel_id, runner, result)


@app.post("/api/duels/{duel_id}/punch")
async def punch(duel_id: str, request: Request):
    runner = get_runner(duel_id)
    body = await read_body(request)
    hand_index = body.get("hand_index")
    result = runner.player_punch(int(hand_index) if hand_index is not None else None)
    return action_response(duel_id, runner, result)


@app.post("/api/duels/{duel_id}/skip")
async def skip(duel_id: str):
    runner = get_runner(duel_id)
    return action_response(duel_id, runner, runner.player_skip())


@app.post("/api/duels/{duel_id}/discard")
async def discard(duel_id: str, request: Request):
    runner = get_runner(duel_id)
    body = await read_body(request)
    if "spell_id" not in body:
        return JSONResponse({"error": "spell_id is required"}, status_code=400)
    return action_response(duel_id, runner, runner.player_discard(body["spell_id"]))


@app.post("/api/duels/{duel_id}/enemy-turn")
async def enemy_turn(duel_id: str):
    runner = get_runner(duel_id)
    return action_response(duel_id, runner, runner.take_enemy_turn())


# ============================================================================
# MAIN
# ============================================================================

def main() -> None:
    parser = argparse.ArgumentParser(description="Wizard Duel HTTP server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Port (default: 8080)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    logger.info(f"Wizard Duel server on http://{args.host}:{args.port}")
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="debug" if args.verbose else "info",
    )


if __name__ == "__main__":
    main()
