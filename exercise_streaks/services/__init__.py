"""Service layer for business logic.

Services hold the streak, calendar, and praise rules, keeping callers thin.

Layer hierarchy:
    Callers (UI / API) -> Services (Business Logic) -> Repositories (Database)

The engine modules (dates, streaks, calendar, praise) are pure functions
over explicit inputs: they never read a clock or touch the database.
``records_service`` is the only module that talks to a record store and a
clock, and it does so through injected collaborators.
"""
