from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from fml.api.schemas import CompileRequest, CompileResponse, HealthResponse
from fml.errors import FMLError
from fml.frontend.lowering import Parser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(ok=True)


@router.post("/manifests/compile", response_model=CompileResponse)
def compile_manifest(req: CompileRequest):
    try:
        parser = Parser.from_str(
            req.manifest,
            object_field_fallback=req.object_field_fallback,
        )
    except FMLError as e:
        logger.info("Manifest rejected: %s", e)
        raise HTTPException(status_code=422, detail={"type": e.code, "message": e.message})

    return CompileResponse(
        ok=True,
        ir=parser.get_intermediate_representation().to_dict(),
        channels=list(parser.channels),
    )
