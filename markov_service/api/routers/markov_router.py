import random
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from markov_service.config import settings
from markov_service.services.errors import ModelNotFoundError, ModelStateError
from markov_service.services.markov import MarkovModel, get_registry, train_from_corpus
from markov_service.services.prefix_index import IndexStats
from markov_service.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter()


class TrainRequest(BaseModel):
    corpus: List[str]
    order: int = Field(default_factory=lambda: settings.PREFIX_ORDER, ge=1)
    model_name: str = "default"


class GenerateRequest(BaseModel):
    model_name: str = "default"
    max_len: int = Field(default_factory=lambda: settings.OUTPUT_LENGTH)
    seed: Optional[int] = None


def _stats_payload(stats: IndexStats) -> dict:
    return {
        "order": stats.order,
        "prefixes": stats.prefixes,
        "suffixes": stats.suffixes,
        "vocabulary": stats.vocabulary,
        "max_branching": stats.max_branching,
        "top_prefixes": [
            {"prefix": list(prefix), "suffixes": n} for prefix, n in stats.top_prefixes
        ],
    }


def _get_model(name: str) -> MarkovModel:
    try:
        return get_registry().get(name)
    except ModelNotFoundError:
        raise HTTPException(status_code=404, detail="model not found, train first")


@router.post("/train")
def train(req: TrainRequest):
    if not req.corpus:
        raise HTTPException(status_code=400, detail="corpus is empty")

    registry = get_registry()
    if req.model_name in registry:
        raise HTTPException(status_code=409, detail="model already trained, delete it first")

    model = train_from_corpus(req.corpus, order=req.order)
    try:
        registry.add(req.model_name, model)
    except ModelStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"[MARKOV] Registered model {req.model_name!r} (order {model.order})")
    return {
        "ok": True,
        "model": req.model_name,
        "order": model.order,
        "stats": _stats_payload(model.get_stats()),
    }


@router.post("/generate")
def generate(req: GenerateRequest):
    model = _get_model(req.model_name)
    rng = random.Random(req.seed) if req.seed is not None else None
    result = model.sample(max_tokens=req.max_len, rng=rng)
    return {
        "ok": True,
        "data": {
            "text": result.text,
            "tokens": result.tokens,
            "stop_reason": result.stop_reason.value,
        },
    }


@router.get("/models")
def list_models():
    return {"ok": True, "data": {"models": get_registry().names()}}


@router.get("/models/{name}/stats")
def model_stats(name: str):
    model = _get_model(name)
    return {"ok": True, "data": _stats_payload(model.get_stats())}


@router.delete("/models/{name}")
def delete_model(name: str):
    try:
        get_registry().remove(name)
    except ModelNotFoundError:
        raise HTTPException(status_code=404, detail="model not found")
    return {"ok": True, "model": name}
