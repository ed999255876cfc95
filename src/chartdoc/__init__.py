"""Fidelity checks for Helm, ArgoCD and GitHub Actions tutorials."""

__version__ = "0.1.0"
