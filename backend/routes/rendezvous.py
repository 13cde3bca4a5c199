"""Rendezvous routes — device posts its bundle, editor fetches it by key.

Every outcome is a 200 with a plain-text body; the clients match on the
body text.
"""

import json
import logging
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from errors import EmptyRequest
from services.rendezvous import RendezvousStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> RendezvousStore:
    return request.app.state.rendezvous


def _parse_form(body: bytes) -> dict[str, str]:
    """Parse the first line of a form-encoded body, keeping field order."""
    lines = body.decode("utf-8", errors="replace").splitlines()
    query = lines[0].strip() if lines else ""
    if not query:
        raise EmptyRequest()
    return dict(parse_qsl(query, keep_blank_values=True))


@router.post("/", response_class=PlainTextResponse)
async def store(request: Request, rendezvous: RendezvousStore = Depends(get_store)) -> str:
    """Store the posted bundle under its `key` field."""
    params = _parse_form(await request.body())
    return await rendezvous.put(params.get("key"), params)


@router.get("/{path:path}", response_class=PlainTextResponse)
async def fetch(path: str, rendezvous: RendezvousStore = Depends(get_store)) -> str:
    """Return the bundle for the last path segment, or an empty body."""
    key = path.rsplit("/", 1)[-1]
    bundle = await rendezvous.get(key)
    if bundle is None:
        return ""
    return json.dumps(bundle, separators=(",", ":"))
