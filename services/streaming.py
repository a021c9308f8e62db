"""Server-Sent Events stream for one game session.

The stream's lifetime is the player's presence: when the generator is closed
(client gone, server shutting down) the subscriber is released and, if the
stream was opened with a pseudo, that player is removed and `player_left` is
published to everyone else.
"""
import asyncio
import logging
from typing import AsyncIterator

import config
from infrastructure import Broadcaster
from stores import GameSession
from .events import encode_event, game_state_event, player_left_event

logger = logging.getLogger(__name__)

HEARTBEAT_FRAME = ": heartbeat\n\n"

SSE_HEADERS = {
	"Content-Type": "text/event-stream",
	"Cache-Control": "no-cache",
	"Connection": "keep-alive",
}


def format_frame(message: str) -> str:
	return f"data: {message}\n\n"


async def event_stream(
	broadcaster: Broadcaster,
	session: GameSession,
	pseudo: str = "",
	*,
	heartbeat_seconds: float = config.HEARTBEAT_SECONDS,
) -> AsyncIterator[str]:
	"""Yield SSE frames for `session` until the consumer stops iterating.

	The first frame is always the `game_state` snapshot. A heartbeat comment
	is emitted every `heartbeat_seconds` regardless of traffic.
	"""
	subscriber = broadcaster.subscribe(session.id)
	logger.info(f"Stream opened on session {session.id} (pseudo={pseudo!r})")
	try:
		subscriber.offer(encode_event(game_state_event(session)))

		loop = asyncio.get_running_loop()
		next_heartbeat = loop.time() + heartbeat_seconds
		while True:
			timeout = next_heartbeat - loop.time()
			if timeout <= 0:
				next_heartbeat = loop.time() + heartbeat_seconds
				yield HEARTBEAT_FRAME
				continue
			try:
				message = await asyncio.wait_for(subscriber.get(), timeout)
			except asyncio.TimeoutError:
				continue
			if message is None:
				return
			yield format_frame(message)
	finally:
		broadcaster.unsubscribe(subscriber)
		if pseudo:
			session.remove_player(pseudo)
			broadcaster.publish(session.id, encode_event(player_left_event(pseudo)))
		logger.info(f"Stream closed on session {session.id} (pseudo={pseudo!r})")
