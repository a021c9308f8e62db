"""Grid extraction from a photo, using a Gemini model on Vertex AI.

The model is asked for a strict JSON description of the grid, which is
validated into a `models.Grid`. Any failure (model call, unparseable output,
inconsistent dimensions) surfaces as `VisionError`.
"""
import base64
import json
import logging
from typing import Any

from langchain_core.messages import HumanMessage
from langchain_google_vertexai import ChatVertexAI
from pydantic import ValidationError

import config
from models import Grid

logger = logging.getLogger(__name__)


ANALYZE_PROMPT = """Analyse cette photo de grille de mots fléchés.

Extrais la structure complète au format JSON suivant :
{
  "rows": <nombre de lignes>,
  "cols": <nombre de colonnes>,
  "cells": [
    [
      {"black": true, "definitions": [{"text": "Définition", "direction": "right"}]},
      {"black": false},
      ...
    ],
    ...
  ]
}

Règles :
- Une case qui contient du texte et/ou une flèche est une case définition : "black": true avec "definitions".
- "direction" vaut "right" quand la flèche pointe vers la droite, "down" quand elle pointe vers le bas.
- Une case définition porte une ou deux définitions (au plus une par direction).
- Les cases où le joueur écrit ont "black": false et aucune "definitions".
- Réponds UNIQUEMENT avec le JSON, sans commentaire ni markdown."""


class VisionError(Exception):
	"""Raised when a grid could not be extracted from an image."""


def _strip_code_fence(text: str) -> str:
	text = text.strip()
	if text.startswith("```"):
		first_newline = text.find("\n")
		text = text[first_newline + 1:] if first_newline != -1 else ""
		if text.rstrip().endswith("```"):
			text = text.rstrip()[:-3]
	return text.strip()


def parse_grid_response(text: str) -> Grid:
	"""Turn the model's raw answer into a validated `Grid`.

	Raises:
		VisionError: If the answer is empty, not JSON, or not a consistent grid.
	"""
	if not text or not text.strip():
		raise VisionError("empty vision response")
	try:
		data = json.loads(_strip_code_fence(text))
	except json.JSONDecodeError as exc:
		raise VisionError(f"parse grid JSON: {exc}") from exc
	if not isinstance(data, dict):
		raise VisionError("grid JSON must be an object")

	# Identity and timestamps are assigned by the store, never by the model.
	data.pop("id", None)
	data.pop("created_at", None)
	try:
		return Grid.model_validate(data)
	except ValidationError as exc:
		raise VisionError(f"invalid grid: {exc}") from exc


def _response_text(resp: Any) -> str:
	if isinstance(resp, str):
		return resp
	content = getattr(resp, "content", "")
	if isinstance(content, list):
		# Multi-part answers: keep the text parts only.
		return "".join(
			part if isinstance(part, str) else part.get("text", "")
			for part in content
			if isinstance(part, (str, dict))
		)
	return str(content)


class VisionClient:
	"""
	Minimal wrapper around a multimodal chat model:

		grid = vision.analyze_image(image_bytes, "image/png")

	`llm` may be any object exposing `invoke(messages)`; by default a
	`ChatVertexAI` model is built for the given project and region.
	"""

	def __init__(
		self,
		project_id: str,
		region: str = config.GCP_REGION,
		*,
		model_name: str = config.VISION_MODEL,
		timeout: float | None = config.VISION_TIMEOUT,
		llm: Any = None,
	):
		self.project_id = project_id
		self.region = region
		self.model_name = model_name
		if llm is None:
			llm = ChatVertexAI(
				project=project_id,
				location=region,
				model_name=model_name,
				temperature=0.1,
				top_p=1.0,
				response_mime_type="application/json",
				timeout=timeout,
			)
		self._llm = llm

	def analyze_image(self, image_data: bytes, mime_type: str) -> Grid:
		"""Extract the grid structure from an image. Blocking; run it off the event loop.

		Raises:
			VisionError: If the model call fails or its answer is not a usable grid.
		"""
		encoded = base64.b64encode(image_data).decode("ascii")
		message = HumanMessage(content=[
			{"type": "text", "text": ANALYZE_PROMPT},
			{"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
		])
		try:
			resp = self._llm.invoke([message])
		except Exception as exc:
			raise VisionError(f"vision model call failed: {exc}") from exc

		grid = parse_grid_response(_response_text(resp))
		logger.info(f"Vision extracted a {grid.rows}x{grid.cols} grid")
		return grid
