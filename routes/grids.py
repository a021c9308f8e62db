from fastapi import APIRouter, Request, HTTPException, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
import logging

import config
from infrastructure import get_upload_limiter
from services import get_vision_client, VisionError
from stores import get_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _client_key(request: Request) -> str:
	return request.client.host if request.client else "unknown"


class _BodyTooLarge(Exception):
	pass


def _capped_receive(receive, limit: int):
	"""Wrap an ASGI `receive` so that pulling more than `limit` body bytes raises `_BodyTooLarge`.

	Counts what actually arrives, so chunked uploads without a Content-Length
	are cut off as soon as they cross the limit.
	"""
	received = 0

	async def capped():
		nonlocal received
		message = await receive()
		if message["type"] == "http.request":
			received += len(message.get("body", b""))
			if received > limit:
				raise _BodyTooLarge(received)
		return message

	return capped


@router.post("/api/grids")
async def create_grid(request: Request, store = Depends(get_store), vision = Depends(get_vision_client), limiter = Depends(get_upload_limiter)):
	"""Upload a photo of a grid, extract its structure and store it."""
	if not limiter.allow(_client_key(request)):
		raise HTTPException(status_code=429, detail="Trop de requêtes, réessayez plus tard")

	if vision is None:
		raise HTTPException(status_code=503, detail="Analyse d'image non configurée")

	too_large = HTTPException(status_code=413, detail="Image trop volumineuse (max 10 Mo)")
	content_length = request.headers.get("content-length")
	if content_length and content_length.isdigit() and int(content_length) > config.MAX_UPLOAD_BYTES:
		raise too_large

	limited = Request(request.scope, receive=_capped_receive(request.receive, config.MAX_UPLOAD_BYTES))
	try:
		form = await limited.form(max_files=1, max_fields=10)
	except _BodyTooLarge as exc:
		logger.info(f"Rejected upload after {exc.args[0]} bytes")
		raise too_large
	except Exception as exc:
		logger.info(f"Rejected unreadable upload form: {exc}")
		raise HTTPException(status_code=400, detail="Formulaire multipart invalide")

	try:
		upload = form.get("image")
		if not isinstance(upload, UploadFile):
			raise HTTPException(status_code=400, detail="Champ 'image' requis")

		mime_type = upload.content_type
		if mime_type not in config.ALLOWED_IMAGE_TYPES:
			raise HTTPException(status_code=400, detail="Format accepté : JPEG ou PNG")

		image_data = await upload.read()
	finally:
		await form.close()

	try:
		grid = await run_in_threadpool(vision.analyze_image, image_data, mime_type)
	except VisionError as exc:
		logger.error(f"Vision analyze error: {exc}", exc_info=True)
		raise HTTPException(status_code=500, detail="Erreur lors de l'analyse de la grille")

	grid = store.save_grid(grid)
	return JSONResponse(status_code=201, content=grid.to_dict())


@router.get("/api/grids")
async def list_grids(store = Depends(get_store)):
	return JSONResponse(content=[g.to_dict() for g in store.list_grids()])


@router.get("/api/grids/{grid_id}")
async def get_grid(grid_id: str, store = Depends(get_store)):
	grid = store.get_grid(grid_id)
	if grid is None:
		raise HTTPException(status_code=404, detail="Grille introuvable")
	return JSONResponse(content=grid.to_dict())
