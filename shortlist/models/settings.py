"""
Scoring and runtime settings for the shortlisting service
"""
import os
from typing import Dict, FrozenSet, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator

from shortlist.utils.exceptions import ConfigurationError

load_dotenv()

DEFAULT_STOPWORDS = frozenset([
    "the", "a", "an", "and", "or", "for", "to", "of", "in", "on", "with", "by", "at", "as", "is", "are",
    "was", "were", "be", "been", "being", "this", "that", "these", "those", "from", "it", "its", "we",
    "you", "they", "their", "our", "your", "but", "not", "will", "can", "may", "should", "would", "could",
    "if", "then", "than", "so", "such", "into", "over", "under", "about", "across", "all", "any", "also",
    "who", "what", "which", "have", "has", "had", "must", "plus", "etc", "per", "within", "using", "via",
    # JD boilerplate
    "required", "requirements", "requirement", "preferred", "responsibilities", "responsibility",
    "qualifications", "qualification", "ability", "candidate", "candidates", "looking", "join",
    "nice", "bonus", "minimum", "including", "knowledge", "understanding",
])

DEFAULT_KNOWN_SKILLS = (
    "javascript", "typescript", "react", "node", "next.js", "python", "java", "c++", "c#", "sql", "nosql",
    "mongodb", "postgres", "mysql", "aws", "gcp", "azure", "docker", "kubernetes", "ci/cd", "jenkins",
    "github actions", "ml", "nlp", "tensorflow", "pytorch", "golang", "ruby", "php", "html", "css",
    "tailwind", "jira", "git", "agile", "scrum", "kafka", "spark", "hadoop", "linux", "bash", "rest",
    "graphql", "microservices", "terraform", "ansible",
)

DEFAULT_SYNONYMS = {
    "node": ("node.js", "nodejs"),
    "react": ("react.js", "reactjs"),
    "postgres": ("postgresql",),
    "kubernetes": ("k8s",),
    "golang": ("go lang",),
    "aws": ("amazon web services",),
    "gcp": ("google cloud",),
    "ml": ("machine learning",),
    "nlp": ("natural language processing",),
    "ci/cd": ("cicd", "continuous integration"),
}


class ScoringWeights(BaseModel):
    """Weights of the final score. The semantic term is an additive boost."""
    must: float = Field(default=0.65, ge=0.0, le=1.0, description="Weight for must-have coverage")
    nice: float = Field(default=0.20, ge=0.0, le=1.0, description="Weight for nice-to-have coverage")
    cosine: float = Field(default=0.15, ge=0.0, le=1.0, description="Weight for keyword cosine similarity")
    semantic: float = Field(default=0.05, ge=0.0, le=1.0, description="Additive weight for semantic boost")

    class Config:
        frozen = True

    @validator('cosine')
    def validate_core_weights(cls, v, values):
        total = v + values.get('must', 0) + values.get('nice', 0)
        if abs(total - 1.0) > 0.01:
            raise ValueError('must, nice and cosine weights must sum to 1.0')
        return v


class ScoringThresholds(BaseModel):
    """Recommendation and fuzzy matching thresholds"""
    recommend_min: float = Field(default=0.60, ge=0.0, le=1.0, description="Minimum score to recommend")
    must_coverage_min: float = Field(default=0.4, ge=0.0, le=1.0,
                                     description="Fraction of must-have terms a recommended resume must match")
    fuzzy_short: float = Field(default=0.88, ge=0.0, le=1.0, description="Word similarity for terms of <= 6 chars")
    fuzzy_long: float = Field(default=0.82, ge=0.0, le=1.0, description="Word similarity for longer terms")
    short_term_len: int = Field(default=6, ge=1)
    nice_saturation: int = Field(default=6, ge=1, description="Nice-to-have matches giving full nice score")
    whole_word_max_len: int = Field(default=4, ge=0,
                                    description="Terms up to this length must match as whole words")

    class Config:
        frozen = True


class TermLimits(BaseModel):
    """Caps used by the JD term extractor and evidence packaging"""
    min_keyword_len: int = Field(default=3, ge=1)
    min_frequency: int = Field(default=2, ge=1)
    max_term_len: int = Field(default=40, ge=1)
    max_domain_terms: int = Field(default=40, ge=1)
    max_list_terms: int = Field(default=10, ge=1)
    fallback_terms: int = Field(default=8, ge=1)
    window_chars: int = Field(default=240, ge=1)
    max_matches: int = Field(default=6, ge=0)
    max_gaps: int = Field(default=3, ge=0)

    class Config:
        frozen = True


class ScoringConfig(BaseModel):
    """Immutable configuration injected into the scoring engine"""
    stopwords: FrozenSet[str] = Field(default=DEFAULT_STOPWORDS)
    known_skills: Tuple[str, ...] = Field(default=DEFAULT_KNOWN_SKILLS)
    synonyms: Dict[str, Tuple[str, ...]] = Field(default_factory=lambda: dict(DEFAULT_SYNONYMS))
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: ScoringThresholds = Field(default_factory=ScoringThresholds)
    limits: TermLimits = Field(default_factory=TermLimits)

    class Config:
        frozen = True

    @validator('stopwords', pre=True)
    def lowercase_stopwords(cls, v):
        return frozenset(str(w).lower() for w in v)

    @validator('known_skills', pre=True)
    def lowercase_skills(cls, v):
        return tuple(str(s).lower().strip() for s in v if str(s).strip())


_DEFAULT_CONFIG = ScoringConfig()


def default_config() -> ScoringConfig:
    return _DEFAULT_CONFIG


class EmbeddingSettings(BaseModel):
    """Embedding collaborator configuration"""
    enabled: bool = Field(default=False, description="Blend remote embedding similarity into the score")
    model_name: str = Field(default="nomic-embed-text", description="Embedding model name")
    base_url: str = Field(default="http://localhost:11434", description="Ollama base URL")
    max_chars: int = Field(default=8000, ge=1, description="Text is truncated to this length before embedding")
    timeout: int = Field(default=10, ge=1, le=300, description="Request timeout in seconds")


class ProcessingSettings(BaseModel):
    """Request processing configuration"""
    max_concurrent: int = Field(default=4, ge=1, le=32, description="Resumes scored concurrently per request")
    collaborator_timeout: float = Field(default=5.0, gt=0.0, le=120.0,
                                        description="Seconds to wait for extraction, OCR or embeddings")
    min_text_chars: int = Field(default=120, ge=0, description="Below this, the OCR fallback is tried")
    ocr_enabled: bool = Field(default=False)


class BatchSettings(BaseModel):
    """Folder-based batch shortlisting"""
    cv_dir: str = "./data/cvs"
    jd_path: str = "./data/jd.txt"
    report_dir: str = "./reports"


class Settings(BaseModel):
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    """
    Build runtime settings from the environment (.env supported).

    Raises:
        ConfigurationError: when a variable is not a valid number or is out of range
    """
    try:
        return _settings_from_env()
    except ValueError as e:
        raise ConfigurationError(f"Invalid environment configuration: {e}", cause=e) from e


def _settings_from_env() -> Settings:
    return Settings(
        processing=ProcessingSettings(
            max_concurrent=int(os.getenv("MAX_CONCURRENT", "4")),
            collaborator_timeout=float(os.getenv("COLLABORATOR_TIMEOUT", "5")),
            min_text_chars=int(os.getenv("MIN_TEXT_CHARS", "120")),
            ocr_enabled=_env_flag("OCR_ENABLED"),
        ),
        embedding=EmbeddingSettings(
            enabled=_env_flag("SEMANTIC_ENABLED"),
            model_name=os.getenv("EMBED_MODEL", "nomic-embed-text"),
            base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            timeout=int(os.getenv("EMBED_TIMEOUT", "10")),
        ),
        batch=BatchSettings(
            cv_dir=os.getenv("CV_DIR", "./data/cvs"),
            jd_path=os.getenv("JD_PATH", "./data/jd.txt"),
            report_dir=os.getenv("REPORT_DIR", "./reports"),
        ),
    )
