"""Infrastructure Layer — database, SMTP, payment gateway, and logging.

Invariants:
    - Every external failure is mapped to a TechAlphaError subclass (core/errors.py)
    - Clients are built from Settings, never from raw os.environ
"""
