"""FastAPI application package for the modification questionnaire portal.

Exposes a small application factory over the questionnaire engine: the
rule evaluator and section navigation live in `portal/logic/`, request and
domain models in `portal/models/`, and route handlers in `portal/routes/`.
"""

from __future__ import annotations

from portal.main import create_app

__all__ = ["create_app"]
