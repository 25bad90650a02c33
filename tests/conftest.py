import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SEMANTIC_ENABLED", "false")
os.environ.setdefault("OCR_ENABLED", "false")

import pytest

from shortlist.services.pipeline import ShortlistPipeline


@pytest.fixture
def react_jd():
    return "Required: React, Node.js, AWS. 5+ years experience."


@pytest.fixture
def strong_resume():
    return (
        "Jane Doe\njane@example.com\n\n"
        "Experience\nSenior Software Engineer - Acme Corp\nJan 2019 - Present\n"
        "Built React and Node.js services deployed on AWS.\n\n"
        "Education\nB.Tech Computer Science\n"
    )


@pytest.fixture
def weak_resume():
    return "Pastry chef with a passion for sourdough, croissants and seasonal tarts."


@pytest.fixture
def offline_pipeline():
    """Pipeline with the embedding collaborator stubbed out"""
    return ShortlistPipeline(similarity=lambda a, b: 0.0)
