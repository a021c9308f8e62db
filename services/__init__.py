"""Services package: event building, streaming and image analysis.

Import submodules to make them available as `services.streaming`, etc.
`get_vision_client` is the FastAPI dependency for the (optional) vision
backend; it returns None when no GCP project is configured.
"""
import logging
from typing import Optional

import config
from .events import (
	game_state_event,
	player_joined_event,
	player_left_event,
	cell_update_event,
	encode_event,
)
from .streaming import event_stream, format_frame, HEARTBEAT_FRAME, SSE_HEADERS
from .vision import VisionClient, VisionError, parse_grid_response

logger = logging.getLogger(__name__)

__all__ = [
	"game_state_event",
	"player_joined_event",
	"player_left_event",
	"cell_update_event",
	"encode_event",
	"event_stream",
	"format_frame",
	"HEARTBEAT_FRAME",
	"SSE_HEADERS",
	"VisionClient",
	"VisionError",
	"parse_grid_response",
	"get_vision_client",
]


_vision_client: Optional[VisionClient] = None


def get_vision_client() -> Optional[VisionClient]:
	"""Return the vision client, building it on first use when configured."""
	global _vision_client
	if _vision_client is None and config.GCP_PROJECT_ID:
		_vision_client = VisionClient(config.GCP_PROJECT_ID, config.GCP_REGION)
		logger.info(f"Vision client ready (project: {config.GCP_PROJECT_ID}, region: {config.GCP_REGION})")
	return _vision_client
