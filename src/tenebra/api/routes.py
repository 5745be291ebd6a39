# src/tenebra/api/routes.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/search")
def search(request: Request, query: Optional[str] = None) -> List[str]:
    if not query:
        raise HTTPException(status_code=400, detail="Query parameter 'query' is required")
    cache = request.app.state.cache
    return cache.search(query)


@router.get("/healthz")
def healthz(request: Request) -> Dict[str, Any]:
    return {"status": "ok", "entries": len(request.app.state.cache)}
