# targetscope/errors.py
from __future__ import annotations


class TargetScopeError(Exception):
    """Base for errors that abort a whole profile build."""


class InvalidGeneSymbol(TargetScopeError):
    def __init__(self, value: str):
        super().__init__(f"Invalid gene symbol: {value!r}")
        self.value = value


class TargetNotFound(TargetScopeError):
    def __init__(self, gene: str):
        super().__init__(f"Could not resolve gene symbol: {gene}")
        self.gene = gene


class ProfileDeadlineExceeded(TargetScopeError):
    def __init__(self, gene: str, deadline: float):
        super().__init__(f"Profile build for {gene} exceeded {deadline:g}s before fan-out")
        self.gene = gene
        self.deadline = deadline


class UpstreamError(TargetScopeError):
    """Identity resolution failed for a reason other than 'no such target'."""
