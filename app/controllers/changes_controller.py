"""
Controlador de cambios - WebSocket que avisa "algo cambió"

Los clientes vuelven a pedir el leaderboard / sus picks al recibir un
evento; no se mandan deltas.
"""

import asyncio
import logging
from contextlib import suppress

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.services.change_notifier import notifier


router = APIRouter(tags=["changes"])

logger = logging.getLogger(__name__)


async def _forward(websocket: WebSocket, queue: asyncio.Queue):
    while True:
        event = await queue.get()
        await websocket.send_json(event.model_dump(mode="json"))


@router.websocket("/ws/changes")
async def stream_changes(websocket: WebSocket):
    # Suscribo antes de aceptar para no perder eventos en el medio
    async with notifier.subscribe() as queue:
        await websocket.accept()
        logger.info("Change subscriber connected (%d open)", notifier.subscriber_count)

        sender = asyncio.create_task(_forward(websocket, queue))
        try:
            # Los clientes no mandan nada; leer es la forma de enterarse del cierre
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Change subscriber disconnected")
        finally:
            sender.cancel()
            # Si el envío falló, la excepción sale acá en vez de perderse
            with suppress(asyncio.CancelledError):
                await sender
