from fastapi import APIRouter, Request, HTTPException, Depends, Response
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError
import logging

from models import CreateGameRequest, JoinGameRequest, MoveRequest
from infrastructure import get_broadcaster, get_move_limiter
from services import event_stream, SSE_HEADERS
from stores import (
	get_store,
	GridNotFound,
	InvalidPseudo,
	InvalidMove,
)
from utils import sanitize_pseudo
from . import games_helpers

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_session_or_404(store, game_id: str):
	session = store.get_session(game_id)
	if session is None:
		raise HTTPException(status_code=404, detail="Partie introuvable")
	return session


async def enforce_move_rate_limit(request: Request, limiter = Depends(get_move_limiter)) -> None:
	"""Reject moves from a client address that ran out of move tokens (runs before the game lookup)."""
	key = request.client.host if request.client else "unknown"
	if not limiter.allow(key):
		raise HTTPException(status_code=429, detail="Trop de requêtes, réessayez plus tard")


@router.post("/api/games")
async def create_game(req: CreateGameRequest, store = Depends(get_store)):
	if not req.grid_id:
		raise HTTPException(status_code=400, detail="Champ 'grid_id' requis")
	try:
		session = store.create_session(req.grid_id)
	except GridNotFound:
		raise HTTPException(status_code=404, detail="Grille introuvable")
	return JSONResponse(status_code=201, content=session.to_dict())


@router.get("/api/games/{game_id}")
async def get_game(game_id: str, store = Depends(get_store)):
	session = _get_session_or_404(store, game_id)
	return JSONResponse(content=games_helpers.session_with_grid(store, session))


@router.post("/api/games/{game_id}/join")
async def join_game(game_id: str, req: JoinGameRequest, store = Depends(get_store), broadcaster = Depends(get_broadcaster)):
	session = _get_session_or_404(store, game_id)
	if not req.pseudo:
		raise HTTPException(status_code=400, detail="Champ 'pseudo' requis")
	try:
		player = games_helpers.join_game(session, broadcaster, req.pseudo)
	except InvalidPseudo as exc:
		raise HTTPException(status_code=400, detail=str(exc))
	return JSONResponse(content=player.model_dump(mode="json"))


@router.post("/api/games/{game_id}/move", status_code=204, dependencies=[Depends(enforce_move_rate_limit)])
async def move(game_id: str, request: Request, store = Depends(get_store), broadcaster = Depends(get_broadcaster)):
	session = _get_session_or_404(store, game_id)
	# Decoded only once the game is known to exist, so an unknown game is always a 404.
	try:
		req = MoveRequest.model_validate_json(await request.body())
	except ValidationError:
		raise HTTPException(status_code=400, detail="Requête invalide")
	try:
		games_helpers.apply_move(
			store,
			session,
			broadcaster,
			pseudo=req.pseudo,
			row=req.row,
			col=req.col,
			value=req.value,
		)
	except InvalidMove as exc:
		raise HTTPException(status_code=400, detail=str(exc))
	return Response(status_code=204)


@router.get("/api/games/{game_id}/events")
async def game_events(game_id: str, pseudo: str = "", store = Depends(get_store), broadcaster = Depends(get_broadcaster)):
	"""Server-Sent Events stream; keeping it open is what keeps `pseudo` present in the game."""
	session = _get_session_or_404(store, game_id)
	return StreamingResponse(
		event_stream(broadcaster, session, sanitize_pseudo(pseudo)),
		headers=SSE_HEADERS,
	)
