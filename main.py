from typing import Any, Dict

from fastapi import FastAPI, HTTPException # type: ignore
from pydantic import BaseModel, ValidationError # type: ignore

import config
from errors import StructuralError, UnsupportedLanguageError
from logging_config import get_logger, setup_logging
from registry import get_adapter, supported_languages

setup_logging()
logger = get_logger("api")

app = FastAPI(title="Parse Core (Solidity AST -> CIR)")


class ParseRequest(BaseModel):
    ast: Dict[str, Any]            # raw parser output, root must be a SourceUnit
    source_file: str | None = None
    language: str = config.DEFAULT_LANGUAGE


def _adapter_for(req: ParseRequest):
    try:
        return get_adapter(req.language)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _structural_error(e: StructuralError) -> HTTPException:
    logger.warning(f"Rejected AST: {e}")
    return HTTPException(status_code=422, detail=e.to_dict())


def _malformed_ast(e: ValidationError) -> HTTPException:
    logger.warning(f"Malformed AST: {e}")
    return HTTPException(
        status_code=422,
        detail={"error": "ValidationError", "message": str(e)},
    )


@app.get("/languages")
def languages():
    return {"languages": supported_languages()}


@app.post("/parse")
def parse(req: ParseRequest):
    adapter = _adapter_for(req)
    try:
        class_models = adapter.parse_ast(req.ast, req.source_file)
    except StructuralError as e:
        raise _structural_error(e)
    except ValidationError as e:
        raise _malformed_ast(e)

    return {
        "language": adapter.language,
        "source_file": req.source_file,
        "classes": [c.to_dict() for c in class_models],
    }


@app.post("/parse/cir")
def parse_cir(req: ParseRequest):
    adapter = _adapter_for(req)
    try:
        graph = adapter.build_cir_graph_for_ast(req.ast, req.source_file)
    except StructuralError as e:
        raise _structural_error(e)
    except ValidationError as e:
        raise _malformed_ast(e)

    return {
        "language": adapter.language,
        "source_file": req.source_file,
        "cir": graph.to_debug_json(),
    }
