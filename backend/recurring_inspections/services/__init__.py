"""Services Layer — async shell around the pure scheduling core.

Invariants:
    - Services own logging and repository IO; core stays pure
    - Services never build SQL or HTTP responses (the host application does)

Design Decisions:
    - Repositories injected as Protocol implementations (ADR: impureim sandwich)
"""
