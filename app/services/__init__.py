"""Services Layer — validate → persist → notify pipelines.

Invariants:
    - One module per flow (form submissions, payments)
    - Services receive their collaborators (db session, mailer, gateway) as arguments
"""
