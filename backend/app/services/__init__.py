# Services package init
"""
Questions Portal Backend — Services Layer
==========================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services receive the request's AsyncSession and the caller id, apply
       the rules, and return Pydantic response models.

Service Inventory:
    - QuestionService: filtered listing, lookup, create/update/delete, encounters
    - VoteService: the caller's vote on a question
    - shaping: pure filter/tally/projection helpers used by QuestionService
"""
