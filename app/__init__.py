"""TechAlpha Hub API — form submissions and payment proxy for the TechAlpha Hub site.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
