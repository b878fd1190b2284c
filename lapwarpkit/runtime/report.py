from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Tuple
import time

class SolveStats(BaseModel):
    unknowns: int = 0
    nnz: int = 0
    version: int = 0
    rebuild_count: int = 0
    factorization_count: int = 0
    channels: int = 0

class Report(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    command: str
    output: Optional[str] = None
    size: Optional[Tuple[int,int]] = None
    seconds: float = 0.0
    solver: Optional[SolveStats] = None
    extra: Dict[str,Any] = {}
