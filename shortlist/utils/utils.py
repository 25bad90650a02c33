import numpy as np
import requests

from shortlist.models.settings import EmbeddingSettings, get_settings
from shortlist.utils.exceptions import ExternalServiceError
from shortlist.utils.logging_config import get_logger

logger = get_logger(__name__)


def ollama_embed(text: str, settings: EmbeddingSettings = None) -> np.ndarray:
    settings = settings or get_settings().embedding
    url = f"{settings.base_url}/api/embeddings"
    try:
        resp = requests.post(
            url,
            json={"model": settings.model_name, "prompt": text[:settings.max_chars]},
            timeout=settings.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        status = getattr(getattr(e, "response", None), "status_code", None)
        raise ExternalServiceError(
            f"Embedding request failed: {e}", service_name="ollama", status_code=status, cause=e
        ) from e
    vector = data.get("embedding")
    if not vector:
        raise ExternalServiceError("Embedding response had no vector", service_name="ollama")
    return np.array(vector, dtype=np.float32)


def embedding_cosine(va: np.ndarray, vb: np.ndarray) -> float:
    num = float(np.dot(va, vb))
    den = float(np.linalg.norm(va) * np.linalg.norm(vb)) or 1e-8
    return max(0.0, min(1.0, num / den))


def semantic_similarity(text_a: str, text_b: str, settings: EmbeddingSettings = None) -> float:
    """Embedding cosine of two texts; 0.0 when disabled, empty or unavailable."""
    settings = settings or get_settings().embedding
    if not settings.enabled or not (text_a or "").strip() or not (text_b or "").strip():
        return 0.0
    try:
        return embedding_cosine(ollama_embed(text_a, settings), ollama_embed(text_b, settings))
    except ExternalServiceError as e:
        logger.warning(f"Semantic similarity unavailable: {e.message}")
        return 0.0
